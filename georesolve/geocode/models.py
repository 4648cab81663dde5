"""Pydantic model for resolved coordinates."""
from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class Geocode(BaseModel):
    """A place name resolved to a coordinate pair."""

    model_config = ConfigDict(frozen=True)

    name: str
    latitude: float = Field(ge=-90.0, le=90.0, description="Decimal degrees, north positive")
    longitude: float = Field(ge=-180.0, le=180.0, description="Decimal degrees, east positive")

    def as_dict(self) -> Dict[str, object]:
        return self.model_dump()
