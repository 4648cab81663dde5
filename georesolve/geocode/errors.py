"""Failure taxonomy for geocoding lookups."""
from __future__ import annotations

from typing import Optional


class GeocodingError(Exception):
    """Base class for every failure raised while resolving a location."""

    kind = "geocoding_error"

    def __init__(self, message: str, *, location: Optional[str] = None) -> None:
        super().__init__(message)
        self.location = location


class TransportError(GeocodingError):
    """The request never produced a response (DNS, refused connection, timeout)."""

    kind = "transport_error"


class RemoteError(GeocodingError):
    """The service answered with a non-2xx status."""

    kind = "remote_error"

    def __init__(self, status: int, *, location: Optional[str] = None) -> None:
        super().__init__(f"Geocoding service returned status {status}", location=location)
        self.status = status


class ParseError(GeocodingError):
    """The response body is not a JSON array."""

    kind = "parse_error"


class NoResultError(GeocodingError):
    """The service returned an empty result list."""

    kind = "no_result"


class MalformedResultError(GeocodingError):
    """The first result lacks usable name/lat/lon fields."""

    kind = "malformed_result"


class ConfigurationError(GeocodingError):
    """Settings are missing or invalid."""

    kind = "configuration_error"
