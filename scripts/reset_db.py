#!/usr/bin/env python3
"""
Delete the local database file and recreate it at the latest schema.
Usage:
    python -m scripts.reset_db --yes
"""
import argparse
import asyncio
import sys

from services.db import Database


async def reset_database() -> None:
    db = Database()
    try:
        await db.reset()
        info = await db.debug_schema()
    finally:
        await db.dispose()
    print(f"✓ database recreated at schema v{info['version']}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--yes", action="store_true", help="confirm: all meals are lost")
    args = parser.parse_args()
    if not args.yes:
        print("Refusing to reset without --yes")
        sys.exit(1)
    asyncio.run(reset_database())


if __name__ == "__main__":
    main()
