"""Entity → Feature transformation.

Pure and deterministic: the same entity list always yields the same
collection. A malformed record is skipped on its own and never aborts the
batch.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from ngsimap.contracts.entity import Entity
from ngsimap.contracts.feature import Feature, FeatureCollection
from ngsimap.services.attributes import (
    extract_attributes,
    property_value,
    to_display,
    unwrap,
)
from ngsimap.services.geometry import parse_location

logger = logging.getLogger(__name__)

# Observation date keys, most specific first
DEFAULT_OBSERVED_KEYS: tuple[str, ...] = ("dateObserved",)
OBSERVED_KEYS_BY_TYPE: dict[str, tuple[str, ...]] = {
    "Accident": ("accidentDate", "dateObserved"),
    "TrafficFlowObserved": ("dateObservedTo", "dateObserved"),
}


def parse_timestamp(value: str) -> float | None:
    """ISO 8601 → epoch seconds. Naive datetimes are read as UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def resolve_label(entity: Entity) -> str:
    name = to_display(property_value(entity, "name")).strip()
    if name:
        return name
    tail = entity.id.rsplit(":", 1)[-1]
    return tail or entity.id


def resolve_status(entity: Entity) -> str | None:
    status = to_display(property_value(entity, "status"))
    return status or None


def resolve_observed(entity: Entity) -> tuple[str | None, float | None]:
    """First non-empty date in the type's preference order, raw and parsed."""
    keys = OBSERVED_KEYS_BY_TYPE.get(entity.type, DEFAULT_OBSERVED_KEYS)
    for key in keys:
        raw = entity.get_dynamic(key)
        if isinstance(raw, dict) and "value" in raw:
            raw = raw["value"]
        raw = unwrap(raw)
        if isinstance(raw, str) and raw.strip():
            return raw, parse_timestamp(raw)
    return None, None


def to_feature(entity: Entity) -> Feature | None:
    """Project one entity, ``None`` when its location is unusable."""
    geometry = parse_location(entity.location)
    if geometry is None:
        return None
    observed_raw, observed_at = resolve_observed(entity)
    return Feature(
        id=entity.id,
        type=entity.type,
        label=resolve_label(entity),
        status=resolve_status(entity),
        observed_at=observed_at,
        observed_raw=observed_raw,
        geometry=geometry,
        attributes=extract_attributes(entity),
    )


def transform(entities: Iterable[Entity | Mapping[str, Any]]) -> FeatureCollection:
    """Convert broker entities into a normalized feature collection."""
    features: list[Feature] = []
    skipped = 0
    for raw in entities:
        try:
            entity = raw if isinstance(raw, Entity) else Entity.model_validate(raw)
            feature = to_feature(entity)
        except (ValidationError, TypeError, ValueError, AttributeError) as exc:
            skipped += 1
            logger.debug("Skipping malformed entity: %s", exc)
            continue
        if feature is None:
            skipped += 1
            logger.debug("Skipping entity without renderable location: %s", entity.id)
            continue
        features.append(feature)

    if skipped:
        logger.debug("Transformed %d entities, skipped %d", len(features), skipped)
    return FeatureCollection(features=tuple(features))
