"""
Import meals from a JSON file into the local store.

Usage
-----

    # flat list  [{"date": "2025-01-05", "name": "Apple", "calories": 95}, ...]
    # or by date {"2025-01-05": [{"name": "Apple", "calories": 95}], ...}
    python -m scripts.import_meals path/to/meals.json
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from core.meal_import import ImportParseError, parse_import_payload
from core.models.meal import ImportResult
from services.db import Database
from services.transfer import bulk_upsert_meals


async def _import(path: Path, database_url: str | None = None) -> ImportResult:
    db = Database(database_url)
    try:
        payload = parse_import_payload(path.read_bytes())
        return await bulk_upsert_meals(db, payload)
    finally:
        await db.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("file", type=Path, help="JSON file to import")
    parser.add_argument("--database-url", help="override DATABASE_URL")
    args = parser.parse_args(argv)

    try:
        res = asyncio.run(_import(args.file, args.database_url))
    except ImportParseError as exc:
        print(f"✗ invalid JSON in {args.file}: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"✗ cannot read {args.file}: {exc}", file=sys.stderr)
        return 1
    print(f"✓ imported {args.file}: added={res.added} updated={res.updated} skipped={res.skipped}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
