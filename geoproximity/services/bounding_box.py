"""
Bounding Box Search
Coarse radius queries over latitude/longitude columns
"""

import logging
from typing import Any, List

from geoproximity.config import settings
from geoproximity.exceptions import InvalidArgument
from geoproximity.models.location import BoundingBox, CoordinateRange
from geoproximity.services.proximity import DISTANCE_FIELD
from geoproximity.services.range_provider import (
    Entity,
    Filters,
    SortedRangeProvider,
    call_provider
)
from geoproximity.utils.location import (
    calculate_distance,
    longitude_span,
    meters_to_latitude_degrees,
    validate_coordinates
)

logger = logging.getLogger(__name__)

# Sentinel for nearby(): use settings.nearby_default_limit
DEFAULT_LIMIT = object()


def bounding_box(latitude: float, longitude: float, meters: float) -> BoundingBox:
    """
    Get a box big enough to hold every point within `meters` of a centre.

    Longitude ranges are split in two when the box crosses the antimeridian.
    The longitude span uses cos(latitude), so boxes near the poles become very
    wide; past about 89.9 degrees they cover every longitude.

    Raises:
        InvalidCoordinate: If the centre is out of range
        InvalidArgument: If meters is negative
    """
    validate_coordinates(latitude, longitude)
    if meters < 0:
        raise InvalidArgument(f"Radius must not be negative, got {meters}")

    lat_grid = meters_to_latitude_degrees(meters)
    long_grid = longitude_span(lat_grid, latitude)

    latitude_range = CoordinateRange(
        minimum=max(latitude - lat_grid, -90.0),
        maximum=min(latitude + lat_grid, 90.0)
    )

    if long_grid >= 180:
        longitudes = [CoordinateRange(minimum=-180.0, maximum=180.0)]
    elif longitude + long_grid > 180:
        longitudes = [
            CoordinateRange(minimum=longitude - long_grid, maximum=180.0),
            CoordinateRange(minimum=-180.0, maximum=longitude + long_grid - 360),
        ]
    elif longitude - long_grid < -180:
        longitudes = [
            CoordinateRange(minimum=-180.0, maximum=longitude + long_grid),
            CoordinateRange(minimum=longitude - long_grid + 360, maximum=180.0),
        ]
    else:
        longitudes = [
            CoordinateRange(minimum=longitude - long_grid, maximum=longitude + long_grid)
        ]

    return BoundingBox(latitude=latitude_range, longitudes=longitudes)


def nearby(
    provider: SortedRangeProvider,
    latitude: float,
    longitude: float,
    meters: float,
    limit: Any = DEFAULT_LIMIT,
    filters: Filters = None
) -> List[Entity]:
    """
    Find records near a point using a bounding box.

    Records are ordered by squared degree offset from the centre, measuring
    longitude the short way round the antimeridian. This tracks true distance
    for small boxes. This is a coarse filter: some results can
    lie outside the radius. Use within_radius() for exact radius semantics.

    Args:
        provider: Source of records with latitude/longitude fields
        latitude: Centre latitude
        longitude: Centre longitude
        meters: Search radius in meters
        limit: Maximum number of records (settings.nearby_default_limit by
            default, None for no limit)
        filters: Equality filters passed through to the provider

    Returns:
        Records inside the box, closest first
    """
    if limit is DEFAULT_LIMIT:
        limit = settings.nearby_default_limit
    if limit is not None and limit < 1:
        raise InvalidArgument(f"Limit must be positive, got {limit}")

    box = bounding_box(latitude, longitude, meters)

    def order_by(entity: Entity) -> float:
        # Take the short way round when the box wraps the antimeridian
        d_lon = abs(entity["longitude"] - longitude)
        d_lon = min(d_lon, 360 - d_lon)
        return (entity["latitude"] - latitude) ** 2 + d_lon ** 2

    results = call_provider(provider, "fetch_in_box", box, order_by, limit=limit, filters=filters)
    logger.debug(
        f"Bounding box around ({latitude}, {longitude}) r={meters}m "
        f"matched {len(results)} records (antimeridian split: {box.crosses_antimeridian})"
    )

    return results if limit is None else results[:limit]


def within_radius(
    provider: SortedRangeProvider,
    latitude: float,
    longitude: float,
    meters: float,
    limit: Any = DEFAULT_LIMIT,
    filters: Filters = None
) -> List[Entity]:
    """
    Find records within `meters` of a point by great-circle distance.

    Runs the bounding box query without a limit, annotates each record with
    "distance" in meters, drops those beyond the radius and sorts the rest by
    distance before applying limit.
    """
    if limit is DEFAULT_LIMIT:
        limit = settings.nearby_default_limit
    if limit is not None and limit < 1:
        raise InvalidArgument(f"Limit must be positive, got {limit}")

    results = []
    for entity in nearby(provider, latitude, longitude, meters, limit=None, filters=filters):
        entity = dict(entity)
        entity[DISTANCE_FIELD] = calculate_distance(
            latitude, longitude, entity["latitude"], entity["longitude"]
        )
        if entity[DISTANCE_FIELD] <= meters:
            results.append(entity)

    results.sort(key=lambda e: e[DISTANCE_FIELD])
    return results if limit is None else results[:limit]
