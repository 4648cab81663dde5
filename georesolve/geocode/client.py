"""Forward geocoding against a Nominatim-compatible search endpoint."""
from __future__ import annotations

import re
import time
from typing import Optional, Protocol
from urllib.parse import quote, urlencode

import httpx
import orjson
from pydantic import ValidationError

from georesolve.fetch.session import build_http_client
from georesolve.geocode.errors import (
    ConfigurationError,
    GeocodingError,
    MalformedResultError,
    NoResultError,
    ParseError,
    RemoteError,
    TransportError,
)
from georesolve.geocode.models import Geocode
from georesolve.observability.tracing import log_body, log_failure, log_request, log_response, span
from georesolve.settings import DEFAULT_USER_AGENT, GeocodingImplementation, GeocodingSettings

_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

class GeocodingClient(Protocol):
    """Anything that can turn a place name into a `Geocode`."""

    async def resolve(self, location: str) -> Geocode: ...

    async def aclose(self) -> None: ...


def build_query_url(base_url: str, location: str) -> str:
    """Append the search parameters to `base_url`, encoding spaces as %20."""
    query = urlencode([("q", location), ("format", "json"), ("limit", "1")], quote_via=quote)
    if base_url.endswith(("?", "&")):
        separator = ""
    elif "?" in base_url:
        separator = "&"
    else:
        separator = "?"
    return f"{base_url}{separator}{query}"


def _coordinate(item: dict, key: str, location: str) -> float:
    value = item.get(key)
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise MalformedResultError(f"Result field '{key}' is missing or not numeric", location=location)
    if isinstance(value, str) and not _DECIMAL.fullmatch(value):
        raise MalformedResultError(f"Result field '{key}' is not a number: {value!r}", location=location)
    return float(value)


def parse_first_result(body: str, *, location: str) -> Geocode:
    """Decode a search response body and build a `Geocode` from its first element."""
    try:
        payload = orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise ParseError(f"Response body is not valid JSON: {exc}", location=location) from exc
    if not isinstance(payload, list):
        raise ParseError(f"Expected a JSON array, got {type(payload).__name__}", location=location)
    if not payload:
        raise NoResultError(f"No results for location: {location}", location=location)

    item = payload[0]
    if not isinstance(item, dict):
        raise MalformedResultError("First result is not an object", location=location)
    name = item.get("name")
    if not isinstance(name, str):
        raise MalformedResultError("Result field 'name' is missing or not text", location=location)
    latitude = _coordinate(item, "lat", location)
    longitude = _coordinate(item, "lon", location)
    try:
        return Geocode(name=name, latitude=latitude, longitude=longitude)
    except ValidationError as exc:
        raise MalformedResultError(f"Coordinates out of range: {latitude}, {longitude}", location=location) from exc


class NominatimClient:
    """Resolve place names through a Nominatim `/search` endpoint.

    The base URL is fixed at construction. When no `http_client` is supplied the
    instance builds one on first use and closes it in `aclose()`; an injected
    client stays owned by the caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        try:
            scheme = httpx.URL(base_url).scheme
        except httpx.InvalidURL as exc:
            raise ConfigurationError(f"Invalid base URL {base_url!r}: {exc}") from exc
        if scheme not in ("http", "https"):
            raise ConfigurationError(f"Base URL must be http(s), got {base_url!r}")
        self._base_url = base_url
        self._user_agent = user_agent
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = build_http_client(user_agent=self._user_agent)
        return self._http_client

    async def resolve(self, location: str) -> Geocode:
        """Return the first match for `location`, raising a `GeocodingError` otherwise."""
        url = build_query_url(self._base_url, location)
        with span(name="geocode", location=location):
            try:
                return await self._fetch(url, location)
            except GeocodingError as exc:
                log_failure(kind=exc.kind, detail=str(exc))
                raise

    async def _fetch(self, url: str, location: str) -> Geocode:
        log_request(url=url)
        start = time.perf_counter()
        try:
            response = await self._client().get(url)
        except httpx.DecodingError as exc:
            raise ParseError(f"Response body could not be decoded: {exc}", location=location) from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Request to {self._base_url} failed: {exc!r}", location=location) from exc
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        log_response(status=response.status_code, bytes_read=len(response.content), elapsed_ms=elapsed_ms)

        if not response.is_success:
            raise RemoteError(response.status_code, location=location)

        body = response.text
        log_body(body=body)
        return parse_first_result(body, location=location)

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "NominatimClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_geocoding_client(
    settings: GeocodingSettings,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> GeocodingClient:
    """Instantiate the provider named by `settings.implementation`."""
    if settings.implementation is GeocodingImplementation.NOMINATIM:
        return NominatimClient(settings.base_url, user_agent=settings.user_agent, http_client=http_client)
    raise ConfigurationError(f"Unsupported geocoding implementation: {settings.implementation}")
