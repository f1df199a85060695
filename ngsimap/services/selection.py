"""Entity type selection."""

from __future__ import annotations

ALL_TYPES = "__all__"


def resolve_active_types(types: list[str], selected: str) -> list[str]:
    """Types to fetch for the current selection."""
    if selected == ALL_TYPES:
        return list(types)
    return [selected] if selected in types else []


def normalize_type_list(raw: object) -> list[str]:
    """Deduplicated, sorted, non-empty type names from a catalogue payload.

    Accepts a bare array or an envelope exposing ``typeList`` (NGSI-LD
    ``EntityTypeList``) or ``types``. Items may be strings or objects with
    ``typeName`` / ``id``.
    """
    if isinstance(raw, dict):
        raw = raw.get("typeList", raw.get("types", []))
    if not isinstance(raw, list):
        return []

    names: set[str] = set()
    for item in raw:
        if isinstance(item, dict):
            item = item.get("typeName", item.get("id"))
        if isinstance(item, str) and item.strip():
            names.add(item.strip())
    return sorted(names)
