"""Base classes and shared types for Cultura Viva contracts.

Unit conventions (all contracts and API responses):
- **Distances**: meters — suffix ``_meters`` / ``_m``
- **Durations**: seconds — suffix ``_seconds`` / ``_s``
- **Datetimes**: always UTC, ISO 8601 in serialized form
- **Coordinates**: WGS84 decimal degrees, ``(latitude, longitude)`` order

External services may speak other conventions (the directions backend
returns ``[lng, lat]`` pairs), but clients must convert to the above
before handing data to the rest of the system.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model with wire-friendly serialization.

    - Enums serialize as string values.
    - ``to_api()`` produces a JSON-safe dict (datetimes as ISO 8601).
    - ``from_api()`` hydrates from a decoded JSON payload.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_api(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict using wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ApiModel":
        """Create model instance from a decoded JSON payload."""
        return cls.model_validate(data)


class CamelModel(ApiModel):
    """ApiModel whose wire names are camelCase (certificate endpoints)."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        alias_generator=to_camel,
    )


class GeoPoint(BaseModel):
    """WGS84 geographic coordinate."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_lng_lat(cls, pair: list[float] | tuple[float, float]) -> "GeoPoint":
        """Build from a GeoJSON-style ``[lng, lat]`` pair."""
        return cls(latitude=pair[1], longitude=pair[0])

    def to_lng_lat(self) -> list[float]:
        return [self.longitude, self.latitude]


class Destination(GeoPoint):
    """A navigation target: a coordinate plus the name shown to the visitor."""

    name: str = Field(..., min_length=1, max_length=200)
