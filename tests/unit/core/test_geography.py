"""Tests for coordinate encoding helpers."""

from __future__ import annotations

import pytest

from cloudsift.core.compiler import compile_filter
from cloudsift.core.geography import coordinate_box, degrees_to_int, int_to_degrees


class TestEncoding:
    def test_origin(self) -> None:
        assert degrees_to_int(0, 0) == (2000394000, 2000394000)

    def test_values_are_positive(self) -> None:
        lat, lng = degrees_to_int(-89.9, -179.9)
        assert lat > 0
        assert lng > 0

    def test_round_trip(self) -> None:
        lat, lng = int_to_degrees(*degrees_to_int(45.52, -122.68))
        assert lat == pytest.approx(45.52, abs=1e-5)
        assert lng == pytest.approx(-122.68, abs=1e-5)


class TestCoordinateBox:
    def test_box_contains_center(self) -> None:
        lat, lng = degrees_to_int(45.52, -122.68)
        box = coordinate_box(45.52, -122.68, meters=1000)
        assert box["lat"].start < lat < box["lat"].end
        assert box["lng"].start < lng < box["lng"].end

    def test_latitude_span_is_about_twice_the_distance_in_centimetres(self) -> None:
        box = coordinate_box(10.0, 20.0, meters=1000)
        assert box["lat"].end - box["lat"].start == pytest.approx(200_000, rel=0.01)

    def test_box_compiles_to_range_filter(self) -> None:
        box = coordinate_box(0.0, 0.0, meters=10)
        query = compile_filter({"and": box})
        assert query.startswith("(and lat:")
        assert f"lat:{box['lat'].start}..{box['lat'].end}" in query
        assert f"lng:{box['lng'].start}..{box['lng'].end})" in query
