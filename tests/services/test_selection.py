"""Tests for type selection and catalogue normalization."""

from __future__ import annotations

from ngsimap.services.selection import ALL_TYPES, normalize_type_list, resolve_active_types

TYPES = ["Sensor", "Station"]


class TestResolveActiveTypes:
    def test_all(self):
        assert resolve_active_types(TYPES, ALL_TYPES) == TYPES

    def test_single(self):
        assert resolve_active_types(TYPES, "Station") == ["Station"]

    def test_unknown_type_fetches_nothing(self):
        assert resolve_active_types(TYPES, "Accident") == []

    def test_returns_copy(self):
        active = resolve_active_types(TYPES, ALL_TYPES)
        active.append("X")
        assert TYPES == ["Sensor", "Station"]


class TestNormalizeTypeList:
    def test_bare_array(self):
        assert normalize_type_list(["Station", "Sensor", "Station"]) == ["Sensor", "Station"]

    def test_types_envelope(self):
        assert normalize_type_list({"types": ["B", "A"]}) == ["A", "B"]

    def test_skips_blank_and_non_string(self):
        assert normalize_type_list(["", "  ", 3, None, {"typeName": "Route"}]) == ["Route"]

    def test_unexpected_payload(self):
        assert normalize_type_list("Station") == []
        assert normalize_type_list({"typeList": "Station"}) == []
