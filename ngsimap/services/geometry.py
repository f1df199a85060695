"""Location geometry checks.

A position is renderable when both axes are finite numbers and it is not the
``(0, 0)`` "no fix" sentinel. A LineString is renderable when at least two of
its vertices are; the check is existential and the vertex list is kept as
received.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ngsimap.contracts.entity import Geometry
from ngsimap.contracts.enums import GeometryType

_GEOMETRY_ADAPTER: TypeAdapter[Geometry] = TypeAdapter(Geometry)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_position(position: Any) -> bool:
    """``[lon, lat]`` with finite numbers, excluding the ``(0, 0)`` sentinel."""
    if not isinstance(position, (list, tuple)) or len(position) < 2:
        return False
    lon, lat = position[0], position[1]
    if not (_is_number(lon) and _is_number(lat)):
        return False
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return False
    return not (lon == 0 and lat == 0)


def is_valid_geometry(geometry: Any) -> bool:
    """Validate a raw GeoJSON geometry dict."""
    if not isinstance(geometry, dict):
        return False
    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates")

    if geom_type == GeometryType.POINT.value:
        return is_valid_position(coordinates)

    if geom_type == GeometryType.LINE_STRING.value:
        if not isinstance(coordinates, (list, tuple)):
            return False
        valid = sum(1 for vertex in coordinates if is_valid_position(vertex))
        return valid >= 2

    return False


def parse_location(location: Any) -> Geometry | None:
    """Extract a typed geometry from a GeoProperty, or ``None`` if unusable.

    A line that passes ``is_valid_geometry`` keeps its whole vertex array,
    malformed vertices included.
    """
    if not isinstance(location, dict):
        return None
    geometry = location.get("value")
    if not is_valid_geometry(geometry):
        return None
    try:
        return _GEOMETRY_ADAPTER.validate_python(geometry)
    except ValidationError:
        return None
