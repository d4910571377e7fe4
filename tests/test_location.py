"""
Test Location Utility Functions
Haversine distance and meter/degree conversions
"""

import math

import pytest

from geoproximity.exceptions import InvalidCoordinate
from geoproximity.utils.location import (
    EARTH_RADIUS_METERS,
    calculate_distance,
    longitude_span,
    meters_to_latitude_degrees,
    validate_coordinates
)

SAN_FRANCISCO = (37.7749, -122.4194)
LOS_ANGELES = (34.0522, -118.2437)


def test_distance_to_same_point_is_zero():
    assert calculate_distance(*SAN_FRANCISCO, *SAN_FRANCISCO) == 0


def test_distance_is_symmetric():
    assert calculate_distance(*SAN_FRANCISCO, *LOS_ANGELES) == \
        calculate_distance(*LOS_ANGELES, *SAN_FRANCISCO)


def test_distance_san_francisco_to_los_angeles():
    assert calculate_distance(*SAN_FRANCISCO, *LOS_ANGELES) == pytest.approx(559_000, rel=0.01)


def test_one_degree_along_equator():
    expected = EARTH_RADIUS_METERS * math.pi / 180
    assert calculate_distance(0, 0, 0, 1) == pytest.approx(expected)


def test_antipodal_points():
    assert calculate_distance(0, 0, 0, 180) == pytest.approx(EARTH_RADIUS_METERS * math.pi)


def test_distance_across_antimeridian_is_short():
    assert calculate_distance(0, 179.9, 0, -179.9) < 25_000


def test_meters_to_latitude_degrees():
    assert meters_to_latitude_degrees(1609.34 * 69.1703234283616) == pytest.approx(1.0)
    assert meters_to_latitude_degrees(0) == 0


def test_longitude_span_widens_with_latitude():
    assert longitude_span(1.0, 0) == pytest.approx(1.0)
    assert longitude_span(1.0, 60) == pytest.approx(2.0)
    assert longitude_span(1.0, -60) == pytest.approx(2.0)


def test_longitude_span_capped_at_poles():
    assert longitude_span(1.0, 90) == 360.0
    assert longitude_span(1.0, 89.9999) == 360.0


def test_validate_coordinates():
    validate_coordinates(90, 180)
    validate_coordinates(-90, -180)

    with pytest.raises(InvalidCoordinate):
        validate_coordinates(0, 181)
    with pytest.raises(InvalidCoordinate):
        validate_coordinates(None, 0)
