"""
Exceptions
Error types raised by the geohash codec and the proximity queries
"""


class GeoProximityError(Exception):
    """Base class for all geoproximity errors"""


class InvalidCoordinate(GeoProximityError, ValueError):
    """Latitude or longitude outside the valid range"""

    def __init__(self, latitude: float, longitude: float):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(
            f"Invalid coordinate ({latitude}, {longitude}): latitude must be in "
            f"[-90, 90] and longitude in [-180, 180]"
        )


class InvalidHashCharacter(GeoProximityError, ValueError):
    """Geohash contains a character outside the base32 alphabet"""

    def __init__(self, geohash: str, position: int):
        self.geohash = geohash
        self.position = position
        self.character = geohash[position]
        super().__init__(
            f"Invalid geohash character '{self.character}' at position {position} in '{geohash}'"
        )


class InvalidArgument(GeoProximityError, ValueError):
    """Non-positive precision or limit, unknown direction, etc."""


class DataSourceError(GeoProximityError):
    """A range provider failed to fetch records"""
