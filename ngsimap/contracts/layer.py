"""Rendering-side value types: bounds, viewport, shapes and per-type layers.

All positions here are ``(lat, lon)``, the order map widgets consume.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from ngsimap.contracts.common import GeoPoint
from ngsimap.contracts.enums import ShapeKind


class Bounds(BaseModel):
    """Axis-aligned lat/lon box."""

    south: float
    west: float
    north: float
    east: float

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_latlngs(cls, latlngs: Iterable[tuple[float, float]]) -> Bounds | None:
        """Smallest box containing every position, ``None`` when empty."""
        points = [p for p in latlngs if math.isfinite(p[0]) and math.isfinite(p[1])]
        if not points:
            return None
        lats = [p[0] for p in points]
        lons = [p[1] for p in points]
        return cls(south=min(lats), west=min(lons), north=max(lats), east=max(lons))

    def extend(self, other: Bounds) -> Bounds:
        return Bounds(
            south=min(self.south, other.south),
            west=min(self.west, other.west),
            north=max(self.north, other.north),
            east=max(self.east, other.east),
        )

    def pad(self, ratio: float) -> Bounds:
        """Grow each side by ``ratio`` of the box span (Leaflet semantics)."""
        lat_buffer = abs(self.north - self.south) * ratio
        lon_buffer = abs(self.east - self.west) * ratio
        return Bounds(
            south=self.south - lat_buffer,
            west=self.west - lon_buffer,
            north=self.north + lat_buffer,
            east=self.east + lon_buffer,
        )

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(
            latitude=(self.south + self.north) / 2,
            longitude=(self.west + self.east) / 2,
        )


class Viewport(BaseModel):
    """Map center + zoom."""

    center: GeoPoint
    zoom: int = Field(..., ge=0, le=22)
    bounds: Bounds | None = None


class Shape(BaseModel):
    """One rendered marker or polyline."""

    kind: ShapeKind
    feature_id: str
    positions: list[tuple[float, float]]
    color: str
    fill_color: str | None = None
    glyph: str | None = None
    popup: str = ""

    model_config = ConfigDict(frozen=True, use_enum_values=True)


@dataclass
class LayerState:
    """Rendering layer owned by one entity type.

    Attributes:
        entity_type: Type name, also the label in the visibility control.
        color: Stable color derived from the type name.
        shapes: Shapes rendered in the current cycle (fully replaced each cycle).
    """

    entity_type: str
    color: str
    shapes: list[Shape] = field(default_factory=list)

    def clear(self) -> None:
        self.shapes.clear()

    def bounds(self) -> Bounds | None:
        return Bounds.from_latlngs(p for shape in self.shapes for p in shape.positions)
