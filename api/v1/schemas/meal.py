from __future__ import annotations

from pydantic import BaseModel

from core.models.meal import Meal


class MealOut(Meal):
    """Stored meal; `time` is always filled in."""

    created_at: int


class DaySummary(BaseModel):
    date: str
    total: float
    goal: int
    remaining: float


class ExportRecord(BaseModel):
    name: str
    calories: float
    time: str
    ingredients: str
    date: str
