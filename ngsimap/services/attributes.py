"""Dynamic attribute extraction from an entity's property bag."""

from __future__ import annotations

import json
from typing import Any

from ngsimap.contracts.entity import Entity
from ngsimap.contracts.feature import Attribute


def is_property_like(raw: Any) -> bool:
    """True for ``{"value": ...}`` objects whose value is set."""
    return isinstance(raw, dict) and raw.get("value") is not None


def unwrap(value: Any) -> Any:
    """Unwrap JSON-LD ``{"@value": ...}`` typed literals."""
    if isinstance(value, dict) and "@value" in value:
        return value["@value"]
    return value


def to_display(value: Any) -> str:
    """Coerce a property value to the string shown in popups."""
    value = unwrap(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(to_display(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    return str(value)


def normalize_unit(raw: Any) -> str | None:
    """Unit codes arrive either bare or as ``{"value": "CEL"}``."""
    if isinstance(raw, dict):
        raw = raw.get("value")
    if isinstance(raw, str) and raw:
        return raw
    return None


def property_value(entity: Entity, key: str) -> Any:
    """Raw ``value`` of a property-shaped key, else ``None``."""
    raw = entity.get_dynamic(key)
    if is_property_like(raw):
        return raw["value"]
    return None


def extract_attributes(entity: Entity) -> tuple[Attribute, ...]:
    """Ordered display attributes for every property-shaped dynamic key.

    Relationships, ``@context`` and other non-property keys are skipped, as
    are properties whose display string is empty.
    """
    attributes: list[Attribute] = []
    for key, raw in entity.dynamic_items():
        if not is_property_like(raw):
            continue
        text = to_display(raw["value"])
        if not text:
            continue
        attributes.append(Attribute(key=key, value=text, unit=normalize_unit(raw.get("unitCode"))))
    return tuple(attributes)
