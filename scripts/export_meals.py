"""
Export every meal as a flat JSON list (or the example template when empty).

Usage
-----

    python -m scripts.export_meals            # writes ./olive-export-<today>.json
    python -m scripts.export_meals --out dir/
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any

from services.db import Database
from services.transfer import export_meals


async def _export(database_url: str | None = None) -> tuple[str, list[dict[str, Any]]]:
    db = Database(database_url)
    try:
        return await export_meals(db)
    finally:
        await db.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--out", type=Path, default=Path("."), help="target directory")
    parser.add_argument("--database-url", help="override DATABASE_URL")
    args = parser.parse_args(argv)

    filename, records = asyncio.run(_export(args.database_url))
    args.out.mkdir(parents=True, exist_ok=True)
    target = args.out / filename
    target.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"✓ wrote {len(records)} records to {target}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
