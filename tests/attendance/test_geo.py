import math

import pytest

from team_attendance.attendance.geo import haversine_meters
from team_attendance.core.constants import EARTH_RADIUS_METERS


def test_same_point_is_zero():
    assert haversine_meters(52.52, 13.405, 52.52, 13.405) == 0


def test_one_degree_along_meridian():
    expected = EARTH_RADIUS_METERS * math.pi / 180  # ~111194.93 m
    assert haversine_meters(0.0, 0.0, 1.0, 0.0) == pytest.approx(expected, rel=1e-9)
    assert haversine_meters(0.0, 0.0, 0.0, 1.0) == pytest.approx(expected, rel=1e-9)


def test_antipodes_are_half_the_circumference():
    assert haversine_meters(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_METERS, rel=1e-9)
    assert haversine_meters(0.0, 0.0, 90.0, 0.0) == pytest.approx(math.pi * EARTH_RADIUS_METERS / 2, rel=1e-9)


def test_symmetric():
    a = haversine_meters(48.8566, 2.3522, 51.5074, -0.1278)
    b = haversine_meters(51.5074, -0.1278, 48.8566, 2.3522)
    assert a == pytest.approx(b)
    assert 340_000 < a < 347_000
