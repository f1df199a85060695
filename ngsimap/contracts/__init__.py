"""ngsi-map data contracts — Pydantic v2 models for the entity-to-layer engine.

Data flow
---------

**Broker payloads** (loosely typed, validated per record):
- ``Entity`` — one NGSI-LD entity with its dynamic property bag
- ``EntityQuery`` — query parameters for the entities endpoint

**Derived every fetch cycle** (never mutated in place):
- ``Feature`` / ``FeatureCollection`` — normalized projection of entities
- ``TimeWindow`` — inclusive observation interval used to filter features

**Rendering state** (owned by the reconciler / view controller pair):
- ``LayerState`` — shapes rendered for one entity type
- ``Bounds`` / ``Viewport`` — map extent and camera
"""

from ngsimap.contracts.enums import GeometryType, PollStatus, ShapeKind, ViewState
from ngsimap.contracts.common import ContractModel, GeoPoint
from ngsimap.contracts.result import ServiceError, ServiceResult
from ngsimap.contracts.entity import (
    Entity,
    EntityQuery,
    Geometry,
    LineStringGeometry,
    PointGeometry,
)
from ngsimap.contracts.feature import Attribute, Feature, FeatureCollection
from ngsimap.contracts.layer import Bounds, LayerState, Shape, Viewport
from ngsimap.contracts.time_window import TimeWindow

__all__ = [
    # Enums
    "GeometryType",
    "PollStatus",
    "ShapeKind",
    "ViewState",
    # Common
    "ContractModel",
    "GeoPoint",
    # Result
    "ServiceError",
    "ServiceResult",
    # Entities
    "Entity",
    "EntityQuery",
    "Geometry",
    "LineStringGeometry",
    "PointGeometry",
    # Features
    "Attribute",
    "Feature",
    "FeatureCollection",
    "TimeWindow",
    # Rendering
    "Bounds",
    "LayerState",
    "Shape",
    "Viewport",
]
