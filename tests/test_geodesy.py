"""
Tests for great-circle geodesy.

Validates:
  - Haversine distance against known arc lengths
  - Distance identity and symmetry
  - Bearing cardinal directions, range, and reversal
  - Unit conversion constants
  - NaN input propagates without raising
"""

import math
import pytest

from src.geodesy import (
    bearing_degrees,
    haversine_meters,
    meters_to_yards,
    yards_to_meters,
)
from src.models.coordinate import Coordinate

# One degree of arc on a 6,371 km sphere
ONE_DEGREE_M = 6_371_000.0 * math.pi / 180

ATLANTA = Coordinate(33.749, -84.388)


class TestHaversine:
    """Tests for great-circle distance."""

    @pytest.mark.parametrize("coord", [
        ATLANTA,
        Coordinate(0.0, 0.0),
        Coordinate(89.9999, 179.9),
        Coordinate(-33.868, 151.207),
    ])
    def test_same_point_is_zero(self, coord):
        assert haversine_meters(coord, coord) == 0.0

    def test_one_degree_latitude(self):
        d = haversine_meters(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
        assert d == pytest.approx(ONE_DEGREE_M, abs=0.01)

    def test_one_degree_longitude_at_equator(self):
        d = haversine_meters(Coordinate(0.0, 0.0), Coordinate(0.0, 1.0))
        assert d == pytest.approx(ONE_DEGREE_M, abs=0.01)

    def test_longitude_shrinks_with_latitude(self):
        """A degree of longitude at 60° is half that at the equator."""
        d = haversine_meters(Coordinate(60.0, 0.0), Coordinate(60.0, 1.0))
        assert d == pytest.approx(ONE_DEGREE_M / 2, rel=1e-4)

    def test_antipodal_is_half_circumference(self):
        d = haversine_meters(Coordinate(0.0, 0.0), Coordinate(0.0, 180.0))
        assert d == pytest.approx(math.pi * 6_371_000.0, rel=1e-9)

    def test_golf_scale_distance(self):
        """0.0012° north is roughly a 146-yard shot."""
        end = Coordinate(ATLANTA.lat + 0.0012, ATLANTA.lon)
        yards = meters_to_yards(haversine_meters(ATLANTA, end))
        assert 145 < yards < 147

    @pytest.mark.parametrize("a,b", [
        (ATLANTA, Coordinate(33.7503, -84.3871)),
        (Coordinate(51.5, -0.001), Coordinate(51.5, 0.001)),
        (Coordinate(-33.868, 151.207), Coordinate(-33.867, 151.209)),
        (Coordinate(10.0, 179.9999), Coordinate(10.0, -179.9999)),
    ])
    def test_symmetric(self, a, b):
        assert haversine_meters(a, b) == pytest.approx(haversine_meters(b, a))

    @pytest.mark.parametrize("a,b", [
        (Coordinate(-74.6, -180.0), Coordinate(74.6, 0.0)),
        (Coordinate(74.6, 0.0), Coordinate(-74.6, -180.0)),
        (Coordinate(-33.7, 12.3), Coordinate(33.7, -167.7)),
        (Coordinate(90.0, 0.0), Coordinate(-90.0, 0.0)),
    ])
    def test_antipodal_pairs_do_not_raise(self, a, b):
        d = haversine_meters(a, b)
        assert d == pytest.approx(math.pi * 6_371_000.0, rel=1e-6)

    def test_crossing_antimeridian_is_short(self):
        d = haversine_meters(Coordinate(0.0, 179.9999), Coordinate(0.0, -179.9999))
        assert d < 30

    def test_accepts_position_samples(self):
        from src.models.coordinate import PositionSample
        s = PositionSample(33.749, -84.388, 5.0, 0)
        assert haversine_meters(s, ATLANTA) == 0.0

    def test_nan_propagates(self):
        d = haversine_meters(Coordinate(math.nan, 0.0), ATLANTA)
        assert math.isnan(d)


class TestBearing:
    """Tests for initial bearing."""

    @pytest.mark.parametrize("end,expected", [
        (Coordinate(1.0, 0.0), 0.0),
        (Coordinate(0.0, 1.0), 90.0),
        (Coordinate(-1.0, 0.0), 180.0),
        (Coordinate(0.0, -1.0), 270.0),
    ])
    def test_cardinal_directions(self, end, expected):
        assert bearing_degrees(Coordinate(0.0, 0.0), end) == pytest.approx(expected)

    def test_northeast(self):
        b = bearing_degrees(ATLANTA, Coordinate(33.750, -84.387))
        assert 30 < b < 60

    def test_same_point_is_zero(self):
        assert bearing_degrees(ATLANTA, ATLANTA) == 0.0

    @pytest.mark.parametrize("d_lat,d_lon", [
        (0.001, 0.0), (0.001, 0.001), (0.0, 0.001), (-0.001, 0.001),
        (-0.001, 0.0), (-0.001, -0.001), (0.0, -0.001), (0.001, -0.001),
        (-1e-12, 0.0),
    ])
    def test_range(self, d_lat, d_lon):
        end = Coordinate(ATLANTA.lat + d_lat, ATLANTA.lon + d_lon)
        b = bearing_degrees(ATLANTA, end)
        assert 0.0 <= b < 360.0

    @pytest.mark.parametrize("d_lat,d_lon", [
        (0.0013, 0.0), (0.001, 0.0008), (0.0, 0.0015), (-0.0009, 0.0011),
        (-0.0013, -0.0002), (0.0004, -0.0016),
    ])
    def test_reverse_differs_by_180(self, d_lat, d_lon):
        end = Coordinate(ATLANTA.lat + d_lat, ATLANTA.lon + d_lon)
        forward = bearing_degrees(ATLANTA, end)
        back = bearing_degrees(end, ATLANTA)
        diff = (back - forward) % 360
        assert diff == pytest.approx(180.0, abs=0.01)

    def test_nan_does_not_raise(self):
        b = bearing_degrees(ATLANTA, Coordinate(math.nan, math.nan))
        assert math.isnan(b)


class TestUnitConversion:

    def test_one_yard(self):
        assert meters_to_yards(0.9144) == pytest.approx(1.0)
        assert yards_to_meters(1.0) == pytest.approx(0.9144)

    @pytest.mark.parametrize("meters,yards", [
        (0.0, 0.0),
        (91.44, 100.0),
        (100.0, 109.3613),
        (274.32, 300.0),
    ])
    def test_meters_to_yards(self, meters, yards):
        assert meters_to_yards(meters) == pytest.approx(yards, abs=1e-3)

    def test_yards_to_meters_inverse(self):
        assert meters_to_yards(yards_to_meters(237.0)) == pytest.approx(237.0)
