#!/usr/bin/env python3
"""Seed reserved categories script.

Creates the catalog tables if needed and inserts the "Deleted" and
"No category" rows that product and category deletion depend on.

Usage:
    python scripts/seed_reserved_categories.py
    python scripts/seed_reserved_categories.py --no-create-tables
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog_service.application.category_service import CategoryService
from catalog_service.catalog import models  # noqa: F401  registers tables
from catalog_service.infrastructure.database import async_session_factory, create_tables, engine


async def seed() -> list[str]:
    """Create missing reserved categories.

    Returns:
        Titles of the categories created.
    """
    async with async_session_factory() as session:
        created = await CategoryService(session).ensure_reserved()
    return [c.category_title for c in created]


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the reserved catalog categories",
    )
    parser.add_argument(
        "--no-create-tables",
        action="store_true",
        help="Don't create missing tables (use when migrations manage the schema)",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Catalog Reserved Category Seeder")
    print("=" * 60)

    if not args.no_create_tables:
        print("Creating database tables...")
        await create_tables()
        print("Tables ready.")
        print()

    try:
        titles = await seed()
    except Exception as e:
        print(f"  ✗ Error: {e}")
        raise
    finally:
        await engine.dispose()

    if titles:
        for title in titles:
            print(f"  ✓ Created: {title}")
    else:
        print("  ✓ Reserved categories already present")

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
