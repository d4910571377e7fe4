"""
Proximity Service
Nearest-record queries over a geohash-ordered data set

Records are scanned outward from the centre key in both directions, merged
by how close their keys are to the centre, then re-ranked by true
great-circle distance. Key order only approximates spatial order: records
just across a cell boundary can sort far from the centre key and be missed.
Raise over_fetch to widen the scanned window when that matters.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from geoproximity.config import settings
from geoproximity.exceptions import InvalidArgument
from geoproximity.services.range_provider import (
    Entity,
    Filters,
    SortedRangeProvider,
    call_provider
)
from geoproximity.utils.geohash import decode, encode
from geoproximity.utils.location import calculate_distance

logger = logging.getLogger(__name__)

DISTANCE_FIELD = "distance"


def lexicographic_value(geohash: str) -> int:
    """
    Read a geohash as a positional integer, last character least significant.

    Each character contributes its ordinal offset from '0' times a power of 26.
    Only differences between values of same-length keys are meaningful.
    """
    value = 0
    for c in geohash:
        value = value * 26 + (ord(c) - 0x30)
    return value


def merge_by_key_distance(
    center: str,
    above: List[Entity],
    below: List[Entity],
    limit: int,
    field: str = "geohash"
) -> List[Entity]:
    """
    Merge two scans running away from center into one list ordered by key
    distance to center.

    Args:
        center: Centre key
        above: Records with keys >= center, ascending
        below: Records with keys < center, descending
        limit: Maximum number of records to take
        field: Key field name

    Returns:
        Up to limit records, closest keys first
    """
    center_value = lexicographic_value(center)
    result = []
    i = j = 0

    while len(result) < limit and i < len(above) and j < len(below):
        da = abs(lexicographic_value(above[i][field]) - center_value)
        db = abs(lexicographic_value(below[j][field]) - center_value)
        if da < db:
            result.append(above[i])
            i += 1
        else:
            result.append(below[j])
            j += 1

    while len(result) < limit and i < len(above):
        result.append(above[i])
        i += 1
    while len(result) < limit and j < len(below):
        result.append(below[j])
        j += 1

    return result


def fetch_by_distance(
    provider: SortedRangeProvider,
    center: str,
    limit: Optional[int] = None,
    field: str = "geohash",
    skip_decoding: bool = False,
    over_fetch: Optional[float] = None,
    filters: Filters = None
) -> List[Entity]:
    """
    Fetch the records nearest to a geohash.

    Args:
        provider: Source of geohash-ordered records
        center: Geohash to search around
        limit: Maximum number of results (defaults to settings.proximity_default_limit)
        field: Name of the geohash field on the records
        skip_decoding: If True, rank by key distance only and leave "distance" unset.
            Faster, less accurate.
        over_fetch: Scan ceil(limit * over_fetch) records on each side before
            ranking (defaults to settings.proximity_over_fetch)
        filters: Equality filters passed through to the provider

    Returns:
        Up to limit records. Unless skip_decoding, each carries a "distance" in
        meters and the list is sorted by it.

    Raises:
        InvalidArgument: If limit < 1 or over_fetch < 1
        InvalidHashCharacter: If center is not a valid geohash
        DataSourceError: If the provider fails
    """
    if limit is None:
        limit = settings.proximity_default_limit
    if over_fetch is None:
        over_fetch = settings.proximity_over_fetch
    if limit < 1:
        raise InvalidArgument(f"Limit must be positive, got {limit}")
    if over_fetch < 1:
        raise InvalidArgument(f"Over-fetch factor must be at least 1, got {over_fetch}")

    center = center.lower()
    # Validates center before any scan is issued
    origin = decode(center)
    window = math.ceil(limit * over_fetch)

    # Records keyed exactly at center come from the ascending scan
    above = call_provider(
        provider, "scan_ascending", field, center, window, inclusive=True, filters=filters
    )
    below = call_provider(
        provider, "scan_descending", field, center, window, inclusive=False, filters=filters
    )

    candidates = merge_by_key_distance(center, above, below, window, field=field)
    logger.debug(
        f"Merged {len(candidates)} candidates around {center} "
        f"({len(above)} above, {len(below)} below, window {window})"
    )

    if not skip_decoding:
        # Annotate copies, provider records may be shared between queries
        annotated = []
        for entity in candidates:
            location = decode(entity[field])
            entity = dict(entity)
            entity[DISTANCE_FIELD] = calculate_distance(
                origin.latitude, origin.longitude,
                location.latitude, location.longitude
            )
            annotated.append(entity)
        candidates = annotated
        # sort() is stable, equal distances keep merge order
        candidates.sort(key=lambda e: e[DISTANCE_FIELD])

    return candidates[:limit]


def fetch_nearest(
    provider: SortedRangeProvider,
    latitude: float,
    longitude: float,
    limit: Optional[int] = None,
    precision: Optional[int] = None,
    **kwargs: Any
) -> List[Entity]:
    """
    Fetch the records nearest to a coordinate.

    The coordinate is encoded at `precision` (settings.geohash_precision by
    default), which should match the precision the records were indexed at.
    Remaining keyword arguments go to fetch_by_distance.
    """
    center = encode(latitude, longitude, precision)
    return fetch_by_distance(provider, center, limit=limit, **kwargs)


def distance_to(entity: Dict[str, Any], latitude: float, longitude: float) -> float:
    """Distance in meters from a record's stored coordinates to a point"""
    return calculate_distance(entity["latitude"], entity["longitude"], latitude, longitude)
