"""Per-type layer reconciliation.

``ReconcilerState`` holds everything that must survive between refresh
cycles (the surface and one ``LayerState`` per entity type). It is owned by
the caller and passed into every ``reconcile`` call, so a cycle is
``(state, known_types, features) -> state'`` and can be tested without a
real map widget.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field

from ngsimap.adapters.map_surface import MapSurface
from ngsimap.contracts.feature import FeatureCollection
from ngsimap.contracts.layer import Bounds, LayerState
from ngsimap.services.styling import hash_color, shape_for_feature

logger = logging.getLogger(__name__)


@dataclass
class ReconcilerState:
    """Cross-cycle rendering state."""

    surface: MapSurface
    layers: dict[str, LayerState] = field(default_factory=dict)


@dataclass(frozen=True)
class ReconcileReport:
    created: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    rendered: int = 0


def _remove_layer(state: ReconcilerState, entity_type: str) -> None:
    if state.surface.is_attached(entity_type):
        state.surface.detach(entity_type)
    state.surface.remove_overlay(entity_type)
    del state.layers[entity_type]


def _create_layer(state: ReconcilerState, entity_type: str) -> LayerState:
    layer = LayerState(entity_type=entity_type, color=hash_color(entity_type))
    state.layers[entity_type] = layer
    state.surface.add_overlay(entity_type, entity_type)
    state.surface.attach(entity_type)
    return layer


def reconcile(
    state: ReconcilerState,
    known_types: Collection[str],
    features: FeatureCollection,
) -> ReconcileReport:
    """Bring the per-type layers in line with this cycle's features.

    1. Partition features by type.
    2. Drop layers with no features whose type left the catalogue.
    3. Create a layer (attached, registered in the control) for each new
       type with at least one feature.
    4. Replace every layer's shapes with this cycle's features.

    Visibility of existing layers is left as the user set it.
    """
    partition = features.by_type()

    removed = [
        entity_type
        for entity_type in state.layers
        if entity_type not in partition and entity_type not in known_types
    ]
    for entity_type in removed:
        _remove_layer(state, entity_type)
        logger.info("Removed layer %s", entity_type)

    created = [entity_type for entity_type in partition if entity_type not in state.layers]
    for entity_type in created:
        _create_layer(state, entity_type)
        logger.info("Created layer %s", entity_type)

    rendered = 0
    for entity_type, layer in state.layers.items():
        layer.clear()
        for feature in partition.get(entity_type, []):
            layer.shapes.append(shape_for_feature(feature, layer.color))
        rendered += len(layer.shapes)

    return ReconcileReport(created=tuple(created), removed=tuple(removed), rendered=rendered)


def set_layer_visible(state: ReconcilerState, entity_type: str, visible: bool) -> None:
    """User toggle from the type-visibility control.

    Raises:
        KeyError: If no layer exists for the type.
    """
    if entity_type not in state.layers:
        raise KeyError(f"Layer not found: {entity_type}")
    if visible:
        state.surface.attach(entity_type)
    else:
        state.surface.detach(entity_type)


def attached_bounds(layers: Mapping[str, LayerState], surface: MapSurface) -> Bounds | None:
    """Union of the bounds of every attached layer."""
    bounds: Bounds | None = None
    for entity_type, layer in layers.items():
        if not surface.is_attached(entity_type):
            continue
        layer_bounds = layer.bounds()
        if layer_bounds is None:
            continue
        bounds = layer_bounds if bounds is None else bounds.extend(layer_bounds)
    return bounds
