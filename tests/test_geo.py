"""Tests for great-circle distance."""

import math

import pytest

from feedrank.models import Coordinates
from feedrank.ranking import haversine_km


def _pt(lat, lon):
    return Coordinates(latitude=lat, longitude=lon)


def test_zero_distance_for_identical_points():
    assert haversine_km(_pt(40.0, -73.0), _pt(40.0, -73.0)) == 0.0


def test_distance_is_symmetric():
    a, b = _pt(40.7128, -74.0060), _pt(34.0522, -118.2437)
    assert haversine_km(a, b) == pytest.approx(haversine_km(b, a))


def test_one_degree_of_latitude():
    # 2 * pi * 6371 / 360
    assert haversine_km(_pt(0.0, 0.0), _pt(1.0, 0.0)) == pytest.approx(111.195, abs=0.01)


def test_new_york_to_los_angeles():
    distance = haversine_km(_pt(40.7128, -74.0060), _pt(34.0522, -118.2437))
    assert distance == pytest.approx(3936, rel=0.01)


def test_antipodal_points_do_not_fail():
    distance = haversine_km(_pt(0.0, 0.0), _pt(0.0, 180.0))
    assert distance == pytest.approx(math.pi * 6371.0, rel=1e-6)


def test_nan_coordinates_propagate():
    assert math.isnan(haversine_km(_pt(float("nan"), 0.0), _pt(1.0, 1.0)))
