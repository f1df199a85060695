"""Enumerations shared across all ngsi-map contracts."""

from enum import Enum


class GeometryType(str, Enum):
    """Geometry kinds a location may carry and still be rendered."""
    POINT = "Point"
    LINE_STRING = "LineString"


class ViewState(str, Enum):
    """Lifecycle of the automatic initial viewport."""
    IDLE = "idle"
    LOCATED = "located"
    UNLOCATED = "unlocated"
    FITTED = "fitted"  # Terminal for automatic fitting


class PollStatus(str, Enum):
    """Observable state of the refresh loop, rendered by the UI."""
    IDLE = "idle"
    LOADING = "loading"
    OK = "ok"
    ERROR = "error"
    EMPTY_CATALOGUE = "empty_catalogue"


class ShapeKind(str, Enum):
    MARKER = "marker"
    POLYLINE = "polyline"
