"""Static HTML rendering of the reconciled layers with folium (Leaflet)."""

from __future__ import annotations

from collections.abc import Mapping

import folium

from ngsimap.adapters.map_surface import InMemoryMapSurface
from ngsimap.contracts.enums import ShapeKind
from ngsimap.contracts.layer import LayerState

TILES_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILES_ATTRIBUTION = "© OpenStreetMap contributors"
USER_COLOR = "#38bdf8"


def build_map(layers: Mapping[str, LayerState], surface: InMemoryMapSurface) -> folium.Map:
    """One FeatureGroup per entity type, shown only if attached on the surface."""
    viewport = surface.viewport
    fmap = folium.Map(
        location=viewport.center.as_latlng(),
        zoom_start=viewport.zoom,
        tiles=TILES_URL,
        attr=TILES_ATTRIBUTION,
        max_zoom=19,
    )

    for entity_type, layer in layers.items():
        group = folium.FeatureGroup(name=entity_type, show=surface.is_attached(entity_type))
        for shape in layer.shapes:
            popup = folium.Popup(shape.popup, max_width=320)
            if shape.kind == ShapeKind.MARKER:
                folium.CircleMarker(
                    location=shape.positions[0],
                    radius=8,
                    color=shape.color,
                    fill=True,
                    fill_color=shape.fill_color or shape.color,
                    fill_opacity=0.6,
                    popup=popup,
                    tooltip=shape.glyph,
                ).add_to(group)
            else:
                folium.PolyLine(
                    locations=shape.positions,
                    color=shape.color,
                    weight=3,
                    popup=popup,
                ).add_to(group)
        group.add_to(fmap)

    if surface.user_position is not None:
        folium.CircleMarker(
            location=surface.user_position.as_latlng(),
            radius=7,
            color=USER_COLOR,
            fill=True,
            fill_color=USER_COLOR,
            fill_opacity=0.9,
        ).add_to(fmap)

    if viewport.bounds is not None:
        b = viewport.bounds
        fmap.fit_bounds([[b.south, b.west], [b.north, b.east]])

    folium.LayerControl(position="bottomleft", collapsed=False).add_to(fmap)
    return fmap


def render_html(layers: Mapping[str, LayerState], surface: InMemoryMapSurface) -> str:
    return build_map(layers, surface).get_root().render()
