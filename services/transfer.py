"""
services/transfer.py
────────────────────────────────────────────────────────────────────────
JSON import (bulk upsert) and export on top of the meal store.
"""
from __future__ import annotations

import logging
from datetime import date as _date
from typing import Any

from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from core.meal_import import build_plan, export_filename, export_records
from core.models.meal import ImportResult, now_ms
from services.db import Database, MealRow
from services.meals import get_all_meals_grouped_by_date

_LOG = logging.getLogger(__name__)


async def bulk_upsert_meals(db: Database, payload: Any) -> ImportResult:
    """Validate every item, then upsert the valid ones in a single transaction.

    Invalid items are only counted as skipped. A storage failure rolls back the
    whole batch and propagates. `updated` counts items that carried their own
    id and `added` the rest: a heuristic, not a check of prior existence.
    """
    stamp = now_ms()
    plan = build_plan(payload, stamp)
    result = ImportResult(skipped=plan.skipped)
    if not plan.rows:
        return result

    async with db.begin() as conn:
        for row in plan.rows:
            stmt = sqlite_insert(MealRow).values(
                id=row.id,
                date=row.date,
                name=row.name,
                calories=row.calories,
                time=row.time,
                ingredients=row.ingredients,
                created_at=stamp,
            )
            # created_at keeps its first-insert value on overwrite
            stmt = stmt.on_conflict_do_update(
                index_elements=[MealRow.id],
                set_={
                    "date": stmt.excluded["date"],
                    "name": stmt.excluded["name"],
                    "calories": stmt.excluded["calories"],
                    "time": stmt.excluded["time"],
                    "ingredients": stmt.excluded["ingredients"],
                },
            )
            await conn.execute(stmt)
            if row.explicit_id:
                result.updated += 1
            else:
                result.added += 1

    _LOG.info(
        "import: added=%d updated=%d skipped=%d",
        result.added,
        result.updated,
        result.skipped,
    )
    return result


async def export_meals(
    db: Database, today: str | None = None
) -> tuple[str, list[dict[str, Any]]]:
    """(suggested filename, flat records); the example template when no meals exist."""
    today = today or _date.today().isoformat()
    grouped = await get_all_meals_grouped_by_date(db)
    meals = [m for day in grouped.values() for m in day]
    return export_filename(bool(meals), today), export_records(meals, today)
