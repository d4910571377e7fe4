"""
Database Connection
Supabase client setup and a range provider backed by a Supabase table
"""

from typing import List, Optional
from supabase import create_client, Client
from geoproximity.config import settings
from geoproximity.exceptions import DataSourceError
from geoproximity.services.range_provider import Entity, SortedRangeProvider
import logging

logger = logging.getLogger(__name__)


class Database:
    """Database connection manager"""

    def __init__(self):
        self._client: Client | None = None

    def get_client(self) -> Client:
        """
        Get Supabase client, created on first use from settings.
        """
        if self._client is None:
            logger.info("Initializing Supabase client...")

            if not settings.supabase_url or not settings.supabase_key:
                raise ValueError(
                    "Supabase is not configured. Please set:\n"
                    "  - SUPABASE_URL\n"
                    "  - SUPABASE_KEY\n"
                    "Check your .env file and Supabase Dashboard → Project Settings → API"
                )

            self._client = create_client(settings.supabase_url, settings.supabase_key)
            logger.info("✅ Supabase client initialized")
        return self._client

    def close(self):
        """Drop the cached client"""
        self._client = None


# Global database instance
db = Database()


def get_db_client() -> Client:
    """
    Get the shared Supabase client.
    """
    return db.get_client()


class SupabaseRangeProvider(SortedRangeProvider):
    """
    Range provider reading rows from a Supabase (PostgREST) table.

    The table needs an index on the geohash column for the scans and on
    latitude/longitude for the bounding box query. PostgREST cannot order by
    an arbitrary expression, so fetch_in_box pulls every row inside the box
    and orders and truncates locally.
    """

    def __init__(self, client: Optional[Client] = None, table: Optional[str] = None, columns: str = "*"):
        self._client = client
        self.table = table or settings.places_table
        self.columns = columns

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_db_client()
        return self._client

    def _select(self, filters):
        query = self.client.from_(self.table).select(self.columns)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return query

    def _execute(self, query, description: str) -> List[Entity]:
        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Supabase {description} on {self.table} failed: {e}")
            raise DataSourceError(f"Supabase {description} on {self.table} failed: {e}") from e
        return response.data or []

    def scan_ascending(self, field, value, limit, inclusive=False, filters=None):
        query = self._select(filters)
        query = query.gte(field, value) if inclusive else query.gt(field, value)
        query = query.order(field).limit(limit)
        return self._execute(query, "ascending scan")

    def scan_descending(self, field, value, limit, inclusive=False, filters=None):
        query = self._select(filters)
        query = query.lte(field, value) if inclusive else query.lt(field, value)
        query = query.order(field, desc=True).limit(limit)
        return self._execute(query, "descending scan")

    def fetch_in_box(self, box, order_by, limit=None, filters=None):
        query = self._select(filters) \
            .gte("latitude", box.latitude.minimum) \
            .lte("latitude", box.latitude.maximum)

        if box.crosses_antimeridian:
            query = query.or_(",".join(
                f"and(longitude.gte.{r.minimum},longitude.lte.{r.maximum})"
                for r in box.longitudes
            ))
        else:
            longitudes = box.longitudes[0]
            query = query.gte("longitude", longitudes.minimum).lte("longitude", longitudes.maximum)

        rows = self._execute(query, "bounding box query")
        rows.sort(key=order_by)
        return rows if limit is None else rows[:limit]
