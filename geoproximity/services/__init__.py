"""
Query Services
"""

from geoproximity.services.range_provider import (
    SortedRangeProvider,
    InMemoryRangeProvider
)
from geoproximity.services.proximity import (
    fetch_by_distance,
    fetch_nearest,
    distance_to
)
from geoproximity.services.bounding_box import (
    bounding_box,
    nearby,
    within_radius
)

__all__ = [
    "SortedRangeProvider",
    "InMemoryRangeProvider",
    "fetch_by_distance",
    "fetch_nearest",
    "distance_to",
    "bounding_box",
    "nearby",
    "within_radius"
]
