"""
services/meals.py
────────────────────────────────────────────────────────────────────────
Date-partitioned CRUD over `meals` plus the grouped aggregation queries.
Every write runs in its own transaction and is committed before returning.
"""
from __future__ import annotations

from sqlalchemy import delete, func, insert, literal_column, select, update

from core.models.meal import DEFAULT_TIME, Meal, now_ms
from services.db import Database, MealRow

# every read path coalesces a NULL time
_MEAL_COLUMNS = (
    MealRow.id,
    MealRow.date,
    MealRow.name,
    MealRow.calories,
    func.coalesce(MealRow.time, DEFAULT_TIME).label("time"),
    MealRow.ingredients,
    MealRow.created_at,
)
_TIME = func.coalesce(MealRow.time, DEFAULT_TIME)
# insertion order breaks created_at ties (same millisecond)
_ROWID = literal_column("meals.rowid")


def _to_meal(row) -> Meal:
    return Meal.model_validate(dict(row._mapping))


# ───────────────────────── writes ───────────────────────────
async def add_meal(db: Database, meal: Meal) -> Meal:
    """Insert `meal` stamped with a fresh created_at.

    Raises IntegrityError when calories <= 0 or the id already exists.
    """
    stored = meal.model_copy(update={"created_at": now_ms()})
    async with db.begin() as conn:
        await conn.execute(
            insert(MealRow).values(
                id=stored.id,
                date=stored.date,
                name=stored.name,
                calories=stored.calories,
                time=stored.time,
                ingredients=stored.ingredients or None,
                created_at=stored.created_at,
            )
        )
    return stored


async def update_meal(
    db: Database,
    meal_id: str,
    name: str,
    calories: float,
    time: str | None = None,
) -> int:
    """Returns the affected row count; an unknown id is a silent no-op (0)."""
    values: dict[str, object] = {"name": name, "calories": calories}
    if time is not None:
        values["time"] = time
    async with db.begin() as conn:
        result = await conn.execute(
            update(MealRow).where(MealRow.id == meal_id).values(**values)
        )
        count = result.rowcount
    return count


async def delete_meal(db: Database, meal_id: str) -> int:
    async with db.begin() as conn:
        result = await conn.execute(delete(MealRow).where(MealRow.id == meal_id))
        count = result.rowcount
    return count


async def clear_all_meals(db: Database) -> int:
    async with db.begin() as conn:
        result = await conn.execute(delete(MealRow))
        count = result.rowcount
    return count


# ───────────────────────── reads ────────────────────────────
async def get_meal(db: Database, meal_id: str) -> Meal | None:
    async with db.connect() as conn:
        row = (
            await conn.execute(select(*_MEAL_COLUMNS).where(MealRow.id == meal_id))
        ).first()
    return _to_meal(row) if row is not None else None


async def get_meals_by_date(db: Database, date: str) -> list[Meal]:
    async with db.connect() as conn:
        rows = await conn.execute(
            select(*_MEAL_COLUMNS)
            .where(MealRow.date == date)
            .order_by(_TIME.asc(), MealRow.created_at.asc(), _ROWID.asc())
        )
        return [_to_meal(r) for r in rows]


async def get_all_meals_grouped_by_date(db: Database) -> dict[str, list[Meal]]:
    """date -> meals, keys inserted newest first; per-date order as get_meals_by_date."""
    async with db.connect() as conn:
        rows = await conn.execute(
            select(*_MEAL_COLUMNS).order_by(
                MealRow.date.desc(),
                _TIME.asc(),
                MealRow.created_at.asc(),
                _ROWID.asc(),
            )
        )
        grouped: dict[str, list[Meal]] = {}
        for r in rows:
            meal = _to_meal(r)
            grouped.setdefault(meal.date, []).append(meal)
    return grouped


async def get_totals_by_date(db: Database) -> dict[str, float]:
    """One GROUP BY pass; dates without meals are absent (treat as zero)."""
    async with db.connect() as conn:
        rows = await conn.execute(
            select(MealRow.date, func.sum(MealRow.calories).label("total"))
            .group_by(MealRow.date)
            .order_by(MealRow.date.desc())
        )
        return {r.date: float(r.total or 0) for r in rows}


async def get_day_summary(db: Database, date: str, goal: int) -> dict[str, object]:
    async with db.connect() as conn:
        total = (
            await conn.execute(
                select(func.coalesce(func.sum(MealRow.calories), 0)).where(
                    MealRow.date == date
                )
            )
        ).scalar_one()
    total = float(total)
    return {"date": date, "total": total, "goal": goal, "remaining": goal - total}
