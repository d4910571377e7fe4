"""
Location Utility Functions
Coordinate validation, distance calculation and meter/degree conversions
"""

import math

from geoproximity.exceptions import InvalidCoordinate

# Mean Earth radius
EARTH_RADIUS_METERS = 6371000.0

# 1 degree latitude ≈ 69.17 miles, 1 mile = 1609.34 meters
METERS_PER_MILE = 1609.34
MILES_PER_LATITUDE_DEGREE = 69.1703234283616


def validate_coordinates(latitude: float, longitude: float) -> None:
    """
    Raise InvalidCoordinate unless latitude is in [-90, 90] and longitude in
    [-180, 180]. NaN is rejected by the comparisons.
    """
    try:
        valid = -90 <= latitude <= 90 and -180 <= longitude <= 180
    except TypeError:
        valid = False
    if not valid:
        raise InvalidCoordinate(latitude, longitude)


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two coordinates using Haversine formula.

    Args:
        lat1, lon1: First coordinate
        lat2, lon2: Second coordinate

    Returns:
        Distance in meters
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = math.sin(delta_lat / 2) ** 2 + \
        math.cos(lat1_rad) * math.cos(lat2_rad) * \
        math.sin(delta_lon / 2) ** 2

    # Rounding can push a slightly above 1 for antipodal points
    c = 2 * math.asin(math.sqrt(min(a, 1.0)))

    return EARTH_RADIUS_METERS * c


def meters_to_latitude_degrees(meters: float) -> float:
    """
    Convert a north-south distance in meters to degrees of latitude.
    """
    return meters / (METERS_PER_MILE * MILES_PER_LATITUDE_DEGREE)


def longitude_span(latitude_span: float, latitude: float) -> float:
    """
    Widen a latitude span into the longitude span covering the same distance
    at the given latitude.

    The cos(latitude) approximation grows without bound towards the poles,
    so the result is capped at a full turn (360 degrees).
    """
    cos_lat = abs(math.cos(math.radians(latitude)))
    if cos_lat < 1e-12:
        return 360.0
    return min(abs(latitude_span / cos_lat), 360.0)
