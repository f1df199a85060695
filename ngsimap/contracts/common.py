"""Base classes and shared types for ngsi-map contracts.

Conventions (all contracts and API responses):
- **Coordinates**: WGS84 decimal degrees. Geometry keeps the GeoJSON
  ``[lon, lat]`` order; ``GeoPoint`` and ``Bounds`` spell the axes out.
- **Timestamps**: epoch seconds (float, UTC). Raw observation strings are
  kept alongside for display.
- **Colors**: CSS color strings (``#rrggbb`` or ``hsl(...)``).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ContractModel(BaseModel):
    """Base model with JSON-friendly serialization.

    - Enums serialize as string values.
    - ``to_json_dict()`` produces a JSON-safe dict without ``None`` fields.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GeoPoint(BaseModel):
    """WGS84 geographic coordinate."""

    latitude: float
    longitude: float

    model_config = ConfigDict(frozen=True)

    def as_latlng(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)
