"""Map-surface capability consumed by the reconciler and view controller.

The real widget (Leaflet in a browser, folium for HTML export) sits behind
``MapSurface``. ``InMemoryMapSurface`` keeps the same state server-side so the
API can expose it and tests can inspect it.
"""

from __future__ import annotations

import math
from typing import Protocol

from ngsimap.contracts.common import GeoPoint
from ngsimap.contracts.layer import Bounds, Viewport

DEFAULT_CENTER = GeoPoint(latitude=59.3326, longitude=18.0649)
DEFAULT_ZOOM = 12
MAX_ZOOM = 18


class MapSurface(Protocol):
    def attach(self, layer_id: str) -> None: ...

    def detach(self, layer_id: str) -> None: ...

    def is_attached(self, layer_id: str) -> bool: ...

    def add_overlay(self, layer_id: str, label: str) -> None: ...

    def remove_overlay(self, layer_id: str) -> None: ...

    def set_view(self, center: GeoPoint, zoom: int) -> None: ...

    def fit_bounds(self, bounds: Bounds, padding: float) -> None: ...

    def show_user_position(self, position: GeoPoint) -> None: ...


def zoom_for_bounds(bounds: Bounds) -> int:
    """Largest web-mercator zoom at which ``bounds`` fits a ~256px tile."""
    span = max(bounds.east - bounds.west, (bounds.north - bounds.south) * 2)
    if span <= 0:
        return MAX_ZOOM
    return max(1, min(MAX_ZOOM, int(math.floor(math.log2(360.0 / span)))))


class InMemoryMapSurface:
    """Server-side record of what the map widget shows."""

    def __init__(self, center: GeoPoint = DEFAULT_CENTER, zoom: int = DEFAULT_ZOOM):
        self.viewport = Viewport(center=center, zoom=zoom)
        self.attached: set[str] = set()
        self.overlays: dict[str, str] = {}
        self.user_position: GeoPoint | None = None
        self.fit_count = 0

    def attach(self, layer_id: str) -> None:
        self.attached.add(layer_id)

    def detach(self, layer_id: str) -> None:
        self.attached.discard(layer_id)

    def is_attached(self, layer_id: str) -> bool:
        return layer_id in self.attached

    def add_overlay(self, layer_id: str, label: str) -> None:
        self.overlays[layer_id] = label

    def remove_overlay(self, layer_id: str) -> None:
        self.overlays.pop(layer_id, None)

    def set_view(self, center: GeoPoint, zoom: int) -> None:
        self.viewport = Viewport(center=center, zoom=zoom)

    def fit_bounds(self, bounds: Bounds, padding: float) -> None:
        padded = bounds.pad(padding)
        self.viewport = Viewport(
            center=padded.center, zoom=zoom_for_bounds(padded), bounds=padded
        )
        self.fit_count += 1

    def show_user_position(self, position: GeoPoint) -> None:
        self.user_position = position
