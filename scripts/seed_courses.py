#!/usr/bin/env python3
"""
Load the demo course catalogue into the SQLite database.

Usage:
    python scripts/seed_courses.py [--force]

--force rewrites every demo course (and its tee sheet) even when the
database already holds courses.
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from golf_finder import config, db  # noqa: E402
from golf_finder.mock_data import get_demo_courses, seed_demo_data  # noqa: E402


async def seed(force: bool) -> int:
    await db.init_db()
    try:
        await db.purge_past_availability(date.today())
        if not force:
            return await seed_demo_data()
        courses = get_demo_courses()
        for course in courses:
            await db.upsert_course(course)
        return len(courses)
    finally:
        await db.close_db()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--force", action="store_true", help="overwrite existing demo courses")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    written = asyncio.run(seed(args.force))
    print(f"✓ {written} course(s) written to {config.DB_PATH}")


if __name__ == "__main__":
    main()
