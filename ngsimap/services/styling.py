"""Marker colors, glyphs and popup markup for rendered features."""

from __future__ import annotations

from html import escape

from ngsimap.contracts.entity import PointGeometry
from ngsimap.contracts.enums import ShapeKind
from ngsimap.contracts.feature import Feature
from ngsimap.contracts.layer import Shape

STATUS_COLORS = {
    "active": "#2dd4bf",
    "maintenance": "#f59e0b",
}
DEFAULT_STATUS_COLOR = "#60a5fa"

# Types whose markers are colored by temperature instead of by type
TEMPERATURE_TYPES = frozenset({"WeatherObserved"})

# (upper bound in deg C, color), first match wins
_TEMPERATURE_LADDER = [
    (0.0, "#3b82f6"),
    (10.0, "#22d3ee"),
    (20.0, "#22c55e"),
    (30.0, "#f97316"),
]
_TEMPERATURE_HOT = "#ef4444"

TYPE_GLYPHS = {
    "Station": "ST",
    "Sensor": "SE",
    "WeatherObserved": "WX",
    "Accident": "AC",
    "Route": "RT",
}


def hash_color(value: str) -> str:
    """Stable hue derived from the type name."""
    hue = 0
    for char in value:
        hue = (hue * 31 + ord(char)) % 360
    return f"hsl({hue}, 70%, 55%)"


def status_color(status: str | None) -> str:
    return STATUS_COLORS.get(status or "", DEFAULT_STATUS_COLOR)


def temperature_color(celsius: float) -> str:
    for upper, color in _TEMPERATURE_LADDER:
        if celsius < upper:
            return color
    return _TEMPERATURE_HOT


def type_glyph(entity_type: str) -> str:
    """Short abbreviation drawn on the marker."""
    if entity_type in TYPE_GLYPHS:
        return TYPE_GLYPHS[entity_type]
    capitals = [c for c in entity_type if c.isupper()]
    if len(capitals) >= 2:
        return "".join(capitals[:2])
    return entity_type[:2].upper() or "?"


def _temperature(feature: Feature) -> float | None:
    attr = feature.attribute("temperature")
    if attr is None:
        return None
    try:
        return float(attr.value)
    except ValueError:
        return None


def marker_colors(feature: Feature, type_color: str) -> tuple[str, str]:
    """``(stroke, fill)`` for a point marker."""
    if feature.type in TEMPERATURE_TYPES:
        celsius = _temperature(feature)
        if celsius is not None:
            color = temperature_color(celsius)
            return color, color
    fill = status_color(feature.status) if feature.status else type_color
    return type_color, fill


def popup_html(feature: Feature) -> str:
    """Popup block: label, type, status, observation date, attributes.

    Every interpolated string is HTML-escaped.
    """
    label = escape(feature.label)
    entity_type = escape(feature.type)
    status = escape(feature.status or "ok")
    parts = [
        '<div style="font-family: Inter, sans-serif;">',
        f'<div style="font-weight: 600; font-size: 14px;">{label}</div>',
        f'<div style="font-size: 12px; opacity: 0.7;">{entity_type}</div>',
        f'<div style="margin-top: 6px; font-size: 12px;">Status: {status}</div>',
    ]
    if feature.observed_raw:
        parts.append(
            f'<div style="margin-top: 6px; font-size: 12px;">Obs: {escape(feature.observed_raw)}</div>'
        )
    for attr in feature.attributes:
        line = f"{escape(attr.key)}: {escape(attr.value)}"
        if attr.unit:
            line += f" {escape(attr.unit)}"
        parts.append(f'<div style="font-size: 12px;">{line}</div>')
    parts.append("</div>")
    return "".join(parts)


def shape_for_feature(feature: Feature, type_color: str) -> Shape:
    """Build the marker or polyline drawn for one feature."""
    popup = popup_html(feature)
    if isinstance(feature.geometry, PointGeometry):
        stroke, fill = marker_colors(feature, type_color)
        return Shape(
            kind=ShapeKind.MARKER,
            feature_id=feature.id,
            positions=feature.latlngs(),
            color=stroke,
            fill_color=fill,
            glyph=type_glyph(feature.type),
            popup=popup,
        )
    return Shape(
        kind=ShapeKind.POLYLINE,
        feature_id=feature.id,
        positions=feature.latlngs(),
        color=type_color,
        popup=popup,
    )
