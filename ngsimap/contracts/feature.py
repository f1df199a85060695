"""Feature and FeatureCollection — normalized projection of entities.

A ``FeatureCollection`` is derived once per fetch cycle and never mutated;
filters return new collections.
"""

import math
from typing import Any

from pydantic import ConfigDict, Field

from ngsimap.contracts.common import ContractModel
from ngsimap.contracts.entity import Geometry, PointGeometry


def _latlng(vertex: Any) -> tuple[float, float] | None:
    """``(lat, lon)`` of a drawable ``[lon, lat]`` vertex, else ``None``."""
    if not isinstance(vertex, (list, tuple)) or len(vertex) < 2:
        return None
    lon, lat = vertex[0], vertex[1]
    for axis in (lon, lat):
        if isinstance(axis, bool) or not isinstance(axis, (int, float)) or not math.isfinite(axis):
            return None
    return float(lat), float(lon)


class Attribute(ContractModel):
    """One display line of a feature: ``key: value unit``."""

    key: str
    value: str
    unit: str | None = None

    model_config = ConfigDict(frozen=True)


class Feature(ContractModel):
    """Normalized projection of one entity."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    type: str
    label: str
    status: str | None = None
    observed_at: float | None = Field(default=None, description="epoch seconds")
    observed_raw: str | None = Field(default=None, description="date as received")
    geometry: Geometry
    attributes: tuple[Attribute, ...] = ()

    def latlngs(self) -> list[tuple[float, float]]:
        """Vertices as ``(lat, lon)`` pairs, the order map widgets expect."""
        if isinstance(self.geometry, PointGeometry):
            lon, lat = self.geometry.coordinates[:2]
            return [(lat, lon)]
        return [p for p in map(_latlng, self.geometry.coordinates) if p is not None]

    def _geojson_geometry(self) -> dict[str, Any]:
        if isinstance(self.geometry, PointGeometry):
            return self.geometry.to_json_dict()
        return {
            "type": self.geometry.type,
            "coordinates": [[lon, lat] for lat, lon in self.latlngs()],
        }

    def attribute(self, key: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.key == key:
                return attr
        return None

    def to_geojson(self) -> dict[str, Any]:
        properties: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "attributes": [a.to_json_dict() for a in self.attributes],
        }
        if self.status is not None:
            properties["status"] = self.status
        if self.observed_raw is not None:
            properties["dateObserved"] = self.observed_raw
        if self.observed_at is not None:
            properties["observedAt"] = self.observed_at
        return {
            "type": "Feature",
            "geometry": self._geojson_geometry(),
            "properties": properties,
        }


class FeatureCollection(ContractModel):
    """Ordered sequence of features."""

    model_config = ConfigDict(frozen=True)

    features: tuple[Feature, ...] = ()

    def __len__(self) -> int:
        return len(self.features)

    def by_type(self) -> dict[str, list[Feature]]:
        """Partition features by entity type, preserving order."""
        partition: dict[str, list[Feature]] = {}
        for feature in self.features:
            partition.setdefault(feature.type, []).append(feature)
        return partition

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": "FeatureCollection",
            "features": [f.to_geojson() for f in self.features],
        }
