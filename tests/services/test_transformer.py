"""Tests for entity → feature transformation."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ngsimap.adapters.fixtures import STUB_ENTITIES
from ngsimap.contracts import Entity, LineStringGeometry, PointGeometry
from ngsimap.services.transformer import parse_timestamp, resolve_label, transform


def _point(lon: float, lat: float) -> dict:
    return {"type": "GeoProperty", "value": {"type": "Point", "coordinates": [lon, lat]}}


def _ts(text: str) -> float:
    return datetime.fromisoformat(text.replace("Z", "+00:00")).timestamp()


class TestExampleScenario:
    def test_zero_point_excluded_and_labels_resolved(self):
        entities = [
            {
                "id": "urn:ngsi-ld:Station:central",
                "type": "Station",
                "location": _point(18.0649, 59.3326),
                "status": {"type": "Property", "value": "active"},
            },
            {
                "id": "urn:ngsi-ld:Station:zero",
                "type": "Station",
                "location": _point(0, 0),
            },
        ]
        fc = transform(entities)
        assert len(fc) == 1
        feature = fc.features[0]
        assert feature.id == "urn:ngsi-ld:Station:central"
        assert feature.label == "central"
        assert feature.status == "active"


class TestGeometry:
    @pytest.mark.parametrize("lon,lat", [(18.0649, 59.3326), (-74.006, 40.7128), (0.0, 51.4779), (151.2, -33.86)])
    def test_valid_point_round_trips(self, lon, lat):
        fc = transform([{"id": "urn:x:a", "type": "T", "location": _point(lon, lat)}])
        assert len(fc) == 1
        geometry = fc.features[0].geometry
        assert isinstance(geometry, PointGeometry)
        assert geometry.coordinates == [lon, lat]

    def test_line_string_supported(self):
        fc = transform(
            [
                {
                    "id": "urn:ngsi-ld:Route:r1",
                    "type": "Route",
                    "location": {
                        "type": "GeoProperty",
                        "value": {"type": "LineString", "coordinates": [[18.0, 59.0], [18.1, 59.1]]},
                    },
                }
            ]
        )
        assert isinstance(fc.features[0].geometry, LineStringGeometry)

    def test_missing_or_unsupported_location_skipped(self):
        fc = transform(
            [
                {"id": "urn:x:a", "type": "T"},
                {"id": "urn:x:b", "type": "T", "location": {"value": {"type": "Polygon", "coordinates": []}}},
                {"id": "urn:x:c", "type": "T", "location": "59,18"},
            ]
        )
        assert len(fc) == 0


class TestMalformedRecords:
    def test_bad_records_do_not_block_valid_ones(self):
        entities = [
            None,
            "not an entity",
            {"type": "Station", "location": _point(18, 59)},
            {"id": 42, "type": "Station", "location": _point(18, 59)},
            {"id": "urn:x:ok", "type": "Station", "location": _point(18, 59)},
            {"id": "urn:x:nan", "type": "Station", "location": _point(float("nan"), 59)},
        ]
        fc = transform(entities)
        assert [f.id for f in fc.features] == ["urn:x:ok"]

    def test_deterministic(self):
        first = transform(STUB_ENTITIES)
        second = transform(STUB_ENTITIES)
        assert first == second

    def test_accepts_entity_models(self):
        entity = Entity.model_validate({"id": "urn:x:a", "type": "T", "location": _point(18, 59)})
        assert len(transform([entity])) == 1


class TestLabel:
    def test_name_property_wins(self):
        entity = Entity.model_validate(
            {"id": "urn:ngsi-ld:Station:central", "type": "Station", "name": {"type": "Property", "value": "Central"}}
        )
        assert resolve_label(entity) == "Central"

    def test_empty_name_falls_back_to_id_tail(self):
        entity = Entity.model_validate(
            {"id": "urn:ngsi-ld:Station:central", "type": "Station", "name": {"type": "Property", "value": "  "}}
        )
        assert resolve_label(entity) == "central"

    def test_id_without_colon(self):
        entity = Entity.model_validate({"id": "station-7", "type": "Station"})
        assert resolve_label(entity) == "station-7"

    def test_trailing_colon_uses_whole_id(self):
        entity = Entity.model_validate({"id": "urn:x:", "type": "Station"})
        assert resolve_label(entity) == "urn:x:"


class TestObservedAt:
    def test_plain_string_date(self):
        fc = transform(
            [
                {
                    "id": "urn:x:w",
                    "type": "WeatherObserved",
                    "location": _point(18, 59),
                    "dateObserved": {"type": "Property", "value": "2024-05-01T12:00:00Z"},
                }
            ]
        )
        feature = fc.features[0]
        assert feature.observed_raw == "2024-05-01T12:00:00Z"
        assert feature.observed_at == _ts("2024-05-01T12:00:00Z")

    def test_value_wrapper_unwrapped(self):
        fc = transform(
            [
                {
                    "id": "urn:x:w",
                    "type": "WeatherObserved",
                    "location": _point(18, 59),
                    "dateObserved": {
                        "type": "Property",
                        "value": {"@type": "DateTime", "@value": "2024-05-01T12:00:00Z"},
                    },
                }
            ]
        )
        assert fc.features[0].observed_at == _ts("2024-05-01T12:00:00Z")

    def test_accident_prefers_accident_date(self):
        fc = transform(
            [
                {
                    "id": "urn:x:acc",
                    "type": "Accident",
                    "location": _point(18, 59),
                    "dateObserved": {"type": "Property", "value": "2024-05-01T08:10:00Z"},
                    "accidentDate": {"type": "Property", "value": "2024-05-01T07:45:00Z"},
                }
            ]
        )
        assert fc.features[0].observed_at == _ts("2024-05-01T07:45:00Z")

    def test_other_types_ignore_accident_date(self):
        fc = transform(
            [
                {
                    "id": "urn:x:s",
                    "type": "Station",
                    "location": _point(18, 59),
                    "accidentDate": {"type": "Property", "value": "2024-05-01T07:45:00Z"},
                }
            ]
        )
        assert fc.features[0].observed_at is None

    def test_unparsable_date_leaves_feature_untimed(self):
        fc = transform(
            [
                {
                    "id": "urn:x:w",
                    "type": "WeatherObserved",
                    "location": _point(18, 59),
                    "dateObserved": {"type": "Property", "value": "yesterday-ish"},
                }
            ]
        )
        assert len(fc) == 1
        assert fc.features[0].observed_at is None
        assert fc.features[0].observed_raw == "yesterday-ish"


class TestParseTimestamp:
    def test_zulu(self):
        assert parse_timestamp("1970-01-01T00:00:10Z") == 10.0

    def test_naive_is_utc(self):
        expected = datetime(2024, 5, 1, tzinfo=timezone.utc).timestamp()
        assert parse_timestamp("2024-05-01T00:00:00") == expected

    def test_garbage(self):
        assert parse_timestamp("not a date") is None
