#!/usr/bin/env python3
"""
Print the live `meals` columns and the stored schema version.
Usage:
    python -m scripts.schema_info
"""
import asyncio

from services.db import Database


async def schema_info() -> None:
    db = Database()
    try:
        info = await db.debug_schema()
    finally:
        await db.dispose()
    print(f"schema version: {info['version']}")
    for col in info["columns"]:
        print(f"  {col['name']:<12} {col['type']}")


def main():
    asyncio.run(schema_info())


if __name__ == "__main__":
    main()
