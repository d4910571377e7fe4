"""
Utility Functions
"""

from geoproximity.utils.location import (
    validate_coordinates,
    calculate_distance,
    meters_to_latitude_degrees,
    longitude_span
)
from geoproximity.utils.geohash import (
    BASE32,
    encode,
    decode,
    decode_point,
    error_for_precision,
    adjacent,
    neighbors
)

__all__ = [
    "validate_coordinates",
    "calculate_distance",
    "meters_to_latitude_degrees",
    "longitude_span",
    "BASE32",
    "encode",
    "decode",
    "decode_point",
    "error_for_precision",
    "adjacent",
    "neighbors"
]
