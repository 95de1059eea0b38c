"""Unit tests for great-circle distance helpers."""

import math

import pytest

from mallfinder.models.geo import GeoPoint
from mallfinder.services.distance import (
    EARTH_RADIUS_KM,
    format_distance,
    haversine_km,
    within_radius,
)

MEXICO_CITY = GeoPoint(19.4326, -99.1332)
MONTERREY = GeoPoint(25.6866, -100.3161)

def test_distance_to_self_is_zero():
    assert haversine_km(MEXICO_CITY, MEXICO_CITY) == 0.0

def test_distance_is_symmetric():
    assert haversine_km(MEXICO_CITY, MONTERREY) == pytest.approx(
        haversine_km(MONTERREY, MEXICO_CITY)
    )

def test_one_degree_of_latitude():
    """Along a meridian one degree is R * pi / 180."""
    expected = EARTH_RADIUS_KM * math.pi / 180
    assert haversine_km(GeoPoint(0, 0), GeoPoint(1, 0)) == pytest.approx(expected, rel=1e-9)

def test_mexico_city_to_monterrey():
    assert haversine_km(MEXICO_CITY, MONTERREY) == pytest.approx(706, abs=5)

def test_antipodal_points():
    """Half the circumference, the largest possible distance."""
    distance = haversine_km(GeoPoint(0, 0), GeoPoint(0, 180))
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM)

def test_distance_across_antimeridian():
    """179.9 E to 179.9 W is a short hop, not a trip around the globe."""
    assert haversine_km(GeoPoint(0, 179.9), GeoPoint(0, -179.9)) < 25

def test_format_distance():
    assert format_distance(0) == "0.0 km"
    assert format_distance(1.26) == "1.3 km"
    assert format_distance(705.94) == "705.9 km"

def test_within_radius_boundary_is_inclusive():
    distance = haversine_km(MEXICO_CITY, MONTERREY)
    assert within_radius(distance, distance)
    assert not within_radius(distance, distance - 0.001)
    assert within_radius(0.0, 0.0)

def test_within_radius_rejects_negative_radius():
    with pytest.raises(ValueError):
        within_radius(1.0, -1)
