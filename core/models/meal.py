from __future__ import annotations

import math
import random
import re
import time as _time

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIME = "12:00"
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def now_ms() -> int:
    return int(_time.time() * 1000)


def new_meal_id() -> str:
    """Timestamp + random suffix, e.g. `1736064000123-k3x9qa`."""
    suffix = "".join(random.choices("abcdefghijklmnopqrstuvwxyz0123456789", k=6))
    return f"{now_ms()}-{suffix}"


def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("name must not be empty")
    return value


def _finite_calories(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError("calories must be a finite number")
    return value


class Meal(BaseModel):
    id: str
    date: str
    name: str
    calories: float
    time: str = DEFAULT_TIME
    ingredients: str | None = None
    created_at: int | None = None

    model_config = ConfigDict(from_attributes=True)


class MealCreate(BaseModel):
    """Single-meal input; rejected before any storage call when invalid."""

    id: str | None = None
    date: str = Field(..., pattern=DATE_RE.pattern)
    name: str
    calories: float = Field(..., gt=0)
    time: str = Field(DEFAULT_TIME, pattern=TIME_RE.pattern)
    ingredients: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("calories")
    @classmethod
    def _calories(cls, value: float) -> float:
        return _finite_calories(value)

    @field_validator("ingredients")
    @classmethod
    def _ingredients(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    def to_meal(self) -> Meal:
        return Meal(
            id=self.id or new_meal_id(),
            date=self.date,
            name=self.name,
            calories=self.calories,
            time=self.time,
            ingredients=self.ingredients,
        )


class MealUpdate(BaseModel):
    name: str
    calories: float = Field(..., gt=0)
    time: str | None = Field(None, pattern=TIME_RE.pattern)

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("calories")
    @classmethod
    def _calories(cls, value: float) -> float:
        return _finite_calories(value)


class Suggestion(BaseModel):
    name: str
    calories: float


class ImportResult(BaseModel):
    added: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.added + self.updated + self.skipped
