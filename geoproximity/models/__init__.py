"""
Data Models
"""

from geoproximity.models.location import (
    Direction,
    GeoPoint,
    DecodedLocation,
    CoordinateRange,
    BoundingBox
)

__all__ = [
    "Direction",
    "GeoPoint",
    "DecodedLocation",
    "CoordinateRange",
    "BoundingBox"
]
