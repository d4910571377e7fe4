"""
Check nearest-place queries against a live Supabase table

Usage:
    python scripts/check_nearest.py 37.7749 -122.4194 --limit 5 --meters 2000
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv
load_dotenv()

from geoproximity.database import SupabaseRangeProvider
from geoproximity.logging_config import configure_logging
from geoproximity.services import fetch_nearest, nearby
from geoproximity.utils import encode
import logging

configure_logging()
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Run nearest and nearby queries for a point")
    parser.add_argument("latitude", type=float)
    parser.add_argument("longitude", type=float)
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--meters", type=float, default=5000.0)
    parser.add_argument("--over-fetch", type=float, default=None)
    parser.add_argument("--table", default=None)
    args = parser.parse_args()

    provider = SupabaseRangeProvider(table=args.table)
    center = encode(args.latitude, args.longitude)

    logger.info("=" * 80)
    logger.info(f"Nearest {args.limit} to ({args.latitude}, {args.longitude}) [{center}]")
    logger.info("=" * 80)

    nearest = fetch_nearest(
        provider,
        args.latitude,
        args.longitude,
        limit=args.limit,
        over_fetch=args.over_fetch
    )
    for i, row in enumerate(nearest, 1):
        logger.info(f"{i:3d}. {row.get('name', row.get('id'))} {row['geohash']} {row['distance']:.0f}m")

    logger.info("=" * 80)
    logger.info(f"Bounding box search, {args.meters}m")
    logger.info("=" * 80)

    rows = nearby(provider, args.latitude, args.longitude, args.meters, limit=args.limit)
    for i, row in enumerate(rows, 1):
        logger.info(f"{i:3d}. {row.get('name', row.get('id'))} ({row['latitude']}, {row['longitude']})")

    if not nearest and not rows:
        logger.info("❌ No places found")


if __name__ == "__main__":
    main()
