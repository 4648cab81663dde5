"""Loading and validation of the geocoding settings."""
from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from georesolve.geocode.errors import ConfigurationError

DEFAULT_USER_AGENT = "georesolve/0.1"
ENV_PREFIX = "GEORESOLVE_"
_ENV_KEYS = ("base_url", "user_agent", "implementation")


class GeocodingImplementation(str, Enum):
    """Providers that can back a geocoding client."""

    NOMINATIM = "nominatim"


class GeocodingSettings(BaseModel):
    """Validated `[geocoding]` table."""

    base_url: str = Field(min_length=1)
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    implementation: GeocodingImplementation = GeocodingImplementation.NOMINATIM


def read_settings_file(path: Path) -> Dict[str, object]:
    """Read the TOML configuration file, returning an empty mapping when absent."""
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid settings file {path}: {exc}") from exc


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key in _ENV_KEYS:
        value = environ.get(f"{ENV_PREFIX}{key.upper()}")
        if value:
            overrides[key] = value.strip()
    return overrides


def load_settings(
    path: Path,
    *,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> GeocodingSettings:
    """Merge file, environment and explicit overrides (in that order) and validate."""
    raw = read_settings_file(path)
    table = raw.get("geocoding", {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"[geocoding] in {path} must be a table")
    merged = {
        **table,
        **_env_overrides(os.environ if environ is None else environ),
        **(overrides or {}),
    }
    try:
        return GeocodingSettings(**merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid geocoding settings: {exc}") from exc
