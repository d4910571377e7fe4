"""
Range Providers
Contract for the ordered/bounded record scans the proximity queries run on,
plus an in-memory implementation
"""

import logging
from abc import ABC, abstractmethod
from bisect import bisect_left, bisect_right
from typing import Any, Callable, Dict, Iterable, List, Optional

from geoproximity.exceptions import DataSourceError, GeoProximityError, InvalidArgument
from geoproximity.models.location import BoundingBox

logger = logging.getLogger(__name__)

Entity = Dict[str, Any]
Filters = Optional[Dict[str, Any]]


class SortedRangeProvider(ABC):
    """
    Source of records ordered by an indexed key.

    Implementations return plain dicts carrying at least the key field plus
    "latitude" and "longitude". Failures must be raised as DataSourceError.
    """

    @abstractmethod
    def scan_ascending(
        self,
        field: str,
        value: str,
        limit: int,
        inclusive: bool = False,
        filters: Filters = None
    ) -> List[Entity]:
        """Records with field > value (>= if inclusive), ascending, at most limit"""

    @abstractmethod
    def scan_descending(
        self,
        field: str,
        value: str,
        limit: int,
        inclusive: bool = False,
        filters: Filters = None
    ) -> List[Entity]:
        """Records with field < value (<= if inclusive), descending, at most limit"""

    @abstractmethod
    def fetch_in_box(
        self,
        box: BoundingBox,
        order_by: Callable[[Entity], float],
        limit: Optional[int] = None,
        filters: Filters = None
    ) -> List[Entity]:
        """Records inside box, ascending by order_by, at most limit (None = all)"""


def call_provider(provider: SortedRangeProvider, method: str, *args, **kwargs) -> List[Entity]:
    """
    Run a provider scan and materialise the result.

    DataSourceError and other GeoProximityError subclasses pass through
    unchanged; any other exception is raised as DataSourceError.
    """
    try:
        return list(getattr(provider, method)(*args, **kwargs))
    except GeoProximityError:
        raise
    except Exception as e:
        raise DataSourceError(f"{type(provider).__name__}.{method} failed: {e}") from e


def _matches(entity: Entity, filters: Filters) -> bool:
    if not filters:
        return True
    return all(entity.get(k) == v for k, v in filters.items())


class InMemoryRangeProvider(SortedRangeProvider):
    """
    Provider over a list of dicts, kept sorted by the key field.

    Useful for tests and for callers that already hold a pre-indexed data set
    in memory. Records missing the key field are ignored by the scans.
    """

    def __init__(self, entities: Iterable[Entity], field: str = "geohash"):
        self.field = field
        self._entities = sorted(
            (e for e in entities if e.get(field) is not None),
            key=lambda e: e[field]
        )
        self._keys = [e[field] for e in self._entities]
        logger.debug(f"In-memory provider loaded {len(self._entities)} records keyed by {field}")

    def __len__(self) -> int:
        return len(self._entities)

    def _check_field(self, field: str) -> None:
        if field != self.field:
            raise InvalidArgument(f"Provider is indexed on '{self.field}', not '{field}'")

    def scan_ascending(self, field, value, limit, inclusive=False, filters=None):
        self._check_field(field)
        start = bisect_left(self._keys, value) if inclusive else bisect_right(self._keys, value)

        results = []
        for entity in self._entities[start:]:
            if len(results) >= limit:
                break
            if _matches(entity, filters):
                results.append(entity)
        return results

    def scan_descending(self, field, value, limit, inclusive=False, filters=None):
        self._check_field(field)
        end = bisect_right(self._keys, value) if inclusive else bisect_left(self._keys, value)

        results = []
        for entity in reversed(self._entities[:end]):
            if len(results) >= limit:
                break
            if _matches(entity, filters):
                results.append(entity)
        return results

    def fetch_in_box(self, box, order_by, limit=None, filters=None):
        matches = [
            e for e in self._entities
            if e.get("latitude") is not None
            and e.get("longitude") is not None
            and box.contains(e["latitude"], e["longitude"])
            and _matches(e, filters)
        ]
        matches.sort(key=order_by)
        return matches if limit is None else matches[:limit]
