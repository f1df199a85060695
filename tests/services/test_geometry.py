"""Tests for location geometry validation."""

from __future__ import annotations

import math

import pytest

from ngsimap.contracts import LineStringGeometry, PointGeometry
from ngsimap.services.geometry import (
    is_valid_geometry,
    is_valid_position,
    parse_location,
)


class TestIsValidPosition:
    @pytest.mark.parametrize(
        "position",
        [[18.0649, 59.3326], [0, 12.5], [-0.1, 0], [18.0, 59.0, 30.0], (1, 2)],
    )
    def test_valid(self, position):
        assert is_valid_position(position)

    @pytest.mark.parametrize(
        "position",
        [
            [0, 0],
            [0.0, 0.0],
            [math.nan, 59.0],
            [18.0, math.inf],
            ["18.0", "59.0"],
            [True, 59.0],
            [18.0],
            None,
            "18,59",
        ],
    )
    def test_invalid(self, position):
        assert not is_valid_position(position)


class TestIsValidGeometry:
    def test_point(self):
        assert is_valid_geometry({"type": "Point", "coordinates": [18.0, 59.0]})

    def test_null_island_point_rejected(self):
        assert not is_valid_geometry({"type": "Point", "coordinates": [0, 0]})

    def test_unsupported_type(self):
        assert not is_valid_geometry(
            {"type": "Polygon", "coordinates": [[[18, 59], [18.1, 59], [18, 59.1], [18, 59]]]}
        )

    def test_line_needs_two_valid_vertices(self):
        assert is_valid_geometry({"type": "LineString", "coordinates": [[18, 59], [18.1, 59.1]]})
        assert not is_valid_geometry({"type": "LineString", "coordinates": [[18, 59], [0, 0]]})
        assert not is_valid_geometry({"type": "LineString", "coordinates": [[18, 59]]})

    def test_line_tolerates_partial_corruption(self):
        geometry = {"type": "LineString", "coordinates": [[18, 59], [0, 0], [18.1, 59.1]]}
        assert is_valid_geometry(geometry)

    def test_not_a_dict(self):
        assert not is_valid_geometry(None)
        assert not is_valid_geometry([18.0, 59.0])


class TestParseLocation:
    def test_point(self):
        geometry = parse_location(
            {"type": "GeoProperty", "value": {"type": "Point", "coordinates": [18.0649, 59.3326]}}
        )
        assert isinstance(geometry, PointGeometry)
        assert geometry.coordinates == [18.0649, 59.3326]

    def test_line_keeps_every_vertex(self):
        coords = [[18, 59], [0, 0], [18.1, 59.1]]
        geometry = parse_location(
            {"type": "GeoProperty", "value": {"type": "LineString", "coordinates": coords}}
        )
        assert isinstance(geometry, LineStringGeometry)
        assert geometry.coordinates == [[18.0, 59.0], [0.0, 0.0], [18.1, 59.1]]

    def test_line_with_malformed_vertices_kept_whole(self):
        coords = [[18, 59], ["x", None], [18.1, 59.1], [18], [], [math.nan, 59.2]]
        geometry = parse_location({"value": {"type": "LineString", "coordinates": coords}})
        assert isinstance(geometry, LineStringGeometry)
        assert len(geometry.coordinates) == 6

    def test_line_with_too_few_valid_vertices_rejected(self):
        coords = [[18, 59], ["x", None], [18]]
        assert parse_location({"value": {"type": "LineString", "coordinates": coords}}) is None

    def test_missing_value(self):
        assert parse_location({"type": "GeoProperty"}) is None
        assert parse_location(None) is None
