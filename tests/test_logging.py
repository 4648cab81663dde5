import asyncio
import logging

import httpx
import structlog

from georesolve.fetch.session import build_http_client
from georesolve.geocode.client import NominatimClient
from georesolve.observability.log import configure_logging


def test_configure_logging_from_yaml(tmp_path):
    config = tmp_path / "logging.yaml"
    config.write_text(
        "version: 1\n"
        "disable_existing_loggers: false\n"
        "loggers:\n"
        "  georesolve.yamltest:\n"
        "    level: DEBUG\n",
        encoding="utf-8",
    )
    configure_logging(config)
    assert logging.getLogger("georesolve.yamltest").level == logging.DEBUG


def test_response_body_logged_at_debug(tmp_path, caplog):
    configure_logging(tmp_path / "absent.yaml")
    caplog.set_level(logging.DEBUG, logger="georesolve.trace")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text='[{"name":"Berlin","lat":"52.52","lon":"13.40"}]')

    async def _run():
        http = build_http_client(user_agent="test-agent", transport=httpx.MockTransport(handler))
        async with http:
            await NominatimClient("https://geo.test/search", http_client=http).resolve("Berlin")

    asyncio.run(_run())
    messages = [record.getMessage() for record in caplog.records if record.name == "georesolve.trace"]
    assert any("geocode_body" in message and "52.52" in message for message in messages)
    assert any("geocode_request" in message and "Berlin" in message for message in messages)


def test_response_body_hidden_at_info(tmp_path, caplog):
    configure_logging(tmp_path / "absent.yaml")
    caplog.set_level(logging.INFO, logger="georesolve.trace")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text='[{"name":"Berlin","lat":"52.52","lon":"13.40"}]')

    async def _run():
        http = build_http_client(user_agent="test-agent", transport=httpx.MockTransport(handler))
        async with http:
            await NominatimClient("https://geo.test/search", http_client=http).resolve("Berlin")

    asyncio.run(_run())
    messages = [record.getMessage() for record in caplog.records if record.name == "georesolve.trace"]
    assert not any("geocode_body" in message for message in messages)
    assert any("geocode_response" in message for message in messages)


def test_unconfigured_logging_keeps_stdout_clean(capsys):
    structlog.reset_defaults()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text='[{"name":"Berlin","lat":"52.52","lon":"13.40"}]')

    async def _run():
        http = build_http_client(user_agent="test-agent", transport=httpx.MockTransport(handler))
        async with http:
            return await NominatimClient("https://geo.test/search", http_client=http).resolve("Berlin")

    result = asyncio.run(_run())
    assert result.name == "Berlin"
    out = capsys.readouterr().out
    assert "geocode_body" not in out
    assert "geocode_request" not in out
    assert out == ""
