#!/usr/bin/env python3
# =============================================================================
# scripts/seed_sectors.py - Seed the sectors table
# =============================================================================
# Upserts the sector catalogue (lib/sectors.py) into the `sectors` table,
# matching existing rows on slug. Safe to run repeatedly.
#
# Usage:
#   python scripts/seed_sectors.py
#   python scripts/seed_sectors.py --dry-run     # Print what would be written
# =============================================================================

import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from lib.sectors import SECTORS  # noqa: E402
from lib.supabase_client import SupabaseClient  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("seed_sectors")


def seed_sectors(dry_run: bool = False) -> int:
    """
    Upsert every catalogue sector.

    Returns:
        Number of rows written (or that would be written)
    """
    rows = [sector.to_row() for sector in SECTORS]

    if dry_run:
        for row in rows:
            print(f"  {row['icon']}  {row['slug']:<16} {row['name']}")
        return len(rows)

    client = SupabaseClient.get_client()
    response = client.table("sectors").upsert(rows, on_conflict="slug").execute()
    written = len(response.data or [])

    logger.info(f"Upserted {written} sectors")
    return written


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the sectors table from the built-in catalogue")
    parser.add_argument("--dry-run", action="store_true", help="Print the sectors without writing")
    args = parser.parse_args()

    try:
        count = seed_sectors(dry_run=args.dry_run)
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        return 1

    print(f"\n{count} sectors {'listed' if args.dry_run else 'seeded'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
