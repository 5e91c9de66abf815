"""Autocomplete over past meals: distinct (name, calories) pairs by recency, then frequency."""
from __future__ import annotations

import re

from sqlalchemy import func, select

from config import settings
from core.models.meal import Suggestion
from services.db import Database, MealRow

_LIKE_META = re.compile(r"[%_]")


def clean_prefix(prefix: str | None) -> str:
    """Trim and drop LIKE wildcards so user input only ever matches literally."""
    return _LIKE_META.sub("", (prefix or "").strip())


async def get_name_suggestions(
    db: Database, prefix: str | None, limit: int | None = None
) -> list[Suggestion]:
    term = clean_prefix(prefix)
    if not term:
        return []
    limit = settings.suggestion_limit if limit is None else limit
    if limit <= 0:
        return []

    stmt = (
        select(MealRow.name, MealRow.calories)
        .where(MealRow.name.like(f"{term}%"))
        .group_by(MealRow.name, MealRow.calories)
        .order_by(func.max(MealRow.created_at).desc(), func.count().desc())
        .limit(limit)
    )
    async with db.connect() as conn:
        rows = await conn.execute(stmt)
        return [Suggestion(name=r.name, calories=r.calories) for r in rows]
