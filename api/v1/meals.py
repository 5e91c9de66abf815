# api/v1/meals.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import IntegrityError

from api.v1.deps import get_db, get_prefs
from api.v1.schemas.meal import DaySummary, MealOut
from core.models.meal import MealCreate, MealUpdate, Suggestion
from services import meals as store
from services.db import Database
from services.prefs import PreferenceService
from services.suggestions import get_name_suggestions

router = APIRouter()


# ───────────────────────── aggregate reads ──────────────────
@router.get("/grouped", response_model=dict[str, list[MealOut]])
async def all_meals_grouped(db: Database = Depends(get_db)) -> dict[str, list[MealOut]]:
    """Every meal keyed by date, newest date first."""
    grouped = await store.get_all_meals_grouped_by_date(db)
    return {
        day: [MealOut.model_validate(m.model_dump()) for m in meals]
        for day, meals in grouped.items()
    }


@router.get("/totals", response_model=dict[str, float])
async def totals_by_date(db: Database = Depends(get_db)) -> dict[str, float]:
    return await store.get_totals_by_date(db)


@router.get("/summary/{date}", response_model=DaySummary)
async def day_summary(
    date: str,
    db: Database = Depends(get_db),
    prefs: PreferenceService = Depends(get_prefs),
) -> DaySummary:
    summary = await store.get_day_summary(db, date, prefs.goal.get())
    return DaySummary.model_validate(summary)


@router.get("/suggestions", response_model=list[Suggestion])
async def suggestions(
    prefix: str = "",
    limit: int | None = Query(None, ge=1, le=50),
    db: Database = Depends(get_db),
) -> list[Suggestion]:
    return await get_name_suggestions(db, prefix, limit)


# ───────────────────────── per-date CRUD ────────────────────
@router.get("/by-date/{date}", response_model=list[MealOut])
async def meals_for_date(date: str, db: Database = Depends(get_db)) -> list[MealOut]:
    meals = await store.get_meals_by_date(db, date)
    return [MealOut.model_validate(m.model_dump()) for m in meals]


@router.post("", response_model=MealOut, status_code=status.HTTP_201_CREATED)
async def create_meal(body: MealCreate, db: Database = Depends(get_db)) -> MealOut:
    try:
        meal = await store.add_meal(db, body.to_meal())
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Meal rejected by storage constraints")
    return MealOut.model_validate(meal.model_dump())


@router.patch("/{meal_id}", response_model=MealOut)
async def edit_meal(
    meal_id: str,
    body: MealUpdate,
    db: Database = Depends(get_db),
) -> MealOut:
    try:
        await store.update_meal(db, meal_id, body.name, body.calories, body.time)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Meal rejected by storage constraints")
    # update is a silent no-op for unknown ids; re-read to confirm
    meal = await store.get_meal(db, meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return MealOut.model_validate(meal.model_dump())


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_meal(meal_id: str, db: Database = Depends(get_db)) -> Response:
    await store.delete_meal(db, meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_200_OK)
async def clear_meals(db: Database = Depends(get_db)) -> dict[str, int]:
    return {"deleted": await store.clear_all_meals(db)}
