"""Command-line entrypoints for georesolve."""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from georesolve.fetch.session import create_http_session
from georesolve.geocode.client import create_geocoding_client
from georesolve.geocode.errors import GeocodingError
from georesolve.observability.log import configure_logging
from georesolve.settings import GeocodingSettings, load_settings

DEFAULT_SETTINGS = Path("config/settings.toml")
DEFAULT_LOGGING = Path("config/logging.yaml")


def build_arg_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(prog="georesolve", description="Resolve place names to coordinates")
    parser.add_argument("--settings", type=Path, default=DEFAULT_SETTINGS, help="Path to settings TOML")
    parser.add_argument("--logging", type=Path, default=DEFAULT_LOGGING, help="Path to logging YAML")
    sub = parser.add_subparsers(dest="command", required=True)

    resolve = sub.add_parser("resolve", help="Resolve a location to coordinates")
    resolve.add_argument("location", help="Free-text place name")
    resolve.add_argument("--base-url", help="Override the configured geocoding endpoint")

    sub.add_parser("show-config", help="Print the effective settings")

    return parser


async def run_resolve(location: str, settings: GeocodingSettings) -> dict:
    """Resolve one location and return the JSON-ready result."""
    async with create_http_session(user_agent=settings.user_agent) as http_client:
        geocoder = create_geocoding_client(settings, http_client=http_client)
        geocode = await geocoder.resolve(location)
    return geocode.as_dict()


def _print_error(exc: GeocodingError) -> None:
    print(json.dumps({"error": exc.kind, "detail": str(exc)}, indent=2))


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    load_dotenv()
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.logging)

    overrides = {}
    if getattr(args, "base_url", None):
        overrides["base_url"] = args.base_url
    try:
        settings = load_settings(args.settings, overrides=overrides)
    except GeocodingError as exc:
        _print_error(exc)
        raise SystemExit(1)

    if args.command == "show-config":
        print(json.dumps(settings.model_dump(mode="json"), indent=2))
        return

    if args.command == "resolve":
        try:
            result = asyncio.run(run_resolve(args.location, settings))
        except GeocodingError as exc:
            _print_error(exc)
            raise SystemExit(1)
        print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
