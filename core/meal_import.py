"""
core/meal_import.py
────────────────────────────────────────────────────────────────────────
Turns untyped, already-parsed JSON into normalised meal rows.

Accepted shapes
---------------
(a) [{id?, date, name, calories, time?, ingredients?}, ...]
(b) {"YYYY-MM-DD": [{id?, name, calories, time?, ingredients?}, ...], ...}

Anything else yields no items. Each item is validated on its own; a bad item
is counted as skipped and never stops the batch. Nothing here touches storage.
"""

from __future__ import annotations

import json
import logging
import math
import random
import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from core.models.meal import DATE_RE, DEFAULT_TIME, now_ms

_LOG = logging.getLogger(__name__)

_WS = re.compile(r"\s+")


class ImportParseError(ValueError):
    """Payload is not valid JSON; raised before any item is looked at."""


@dataclass(frozen=True)
class ImportRow:
    id: str
    date: str
    name: str
    calories: float
    time: str
    ingredients: str | None
    explicit_id: bool


@dataclass
class ImportPlan:
    rows: list[ImportRow] = field(default_factory=list)
    skipped: int = 0

    @property
    def submitted(self) -> int:
        return len(self.rows) + self.skipped


def parse_import_payload(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ImportParseError(f"not valid JSON: {exc}") from exc


def flatten_payload(payload: Any) -> list[Any]:
    """Shape (a) is returned as-is; shape (b) gets the key injected as `date`."""
    if isinstance(payload, list):
        return list(payload)
    if not isinstance(payload, dict):
        return []
    items: list[Any] = []
    for date, entries in payload.items():
        if not isinstance(entries, list):
            continue
        for entry in entries:
            items.append({**entry, "date": date} if isinstance(entry, dict) else entry)
    return items


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _calories(value: Any) -> float | None:
    # bools are ints in Python; a JSON true is not a calorie count
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def _synth_id(stamp: int) -> str:
    return f"{stamp}{random.random()}"


def normalise_item(item: Any, stamp: int) -> ImportRow | None:
    """Validated row, or None when the item must be skipped."""
    if not isinstance(item, dict):
        return None

    date = _text(item.get("date"))
    name = _text(item.get("name"))
    calories = _calories(item.get("calories"))
    if not DATE_RE.match(date) or not name or calories is None:
        return None

    raw_id = item.get("id")
    explicit = bool(raw_id)
    meal_id = _WS.sub("", str(raw_id) if explicit else _synth_id(stamp))
    if not meal_id:
        meal_id = _synth_id(stamp)

    time = _text(item.get("time")) or DEFAULT_TIME
    ingredients = _text(item.get("ingredients")) or None

    return ImportRow(
        id=meal_id,
        date=date,
        name=name,
        calories=calories,
        time=time,
        ingredients=ingredients,
        explicit_id=explicit,
    )


def build_plan(payload: Any, stamp: int | None = None) -> ImportPlan:
    stamp = now_ms() if stamp is None else stamp
    plan = ImportPlan()
    for item in flatten_payload(payload):
        row = normalise_item(item, stamp)
        if row is None:
            plan.skipped += 1
            continue
        plan.rows.append(row)
    if plan.skipped:
        _LOG.info("import: %d of %d items failed validation", plan.skipped, plan.submitted)
    return plan


# ───────────────────────── export ───────────────────────────
_TEMPLATE: tuple[dict[str, Any], ...] = (
    {
        "name": "Example Meal 1",
        "calories": 350,
        "time": "08:00",
        "ingredients": "2 eggs, 1 slice toast, 1 tbsp butter",
    },
    {
        "name": "Example Meal 2",
        "calories": 500,
        "time": "13:00",
        "ingredients": "Grilled chicken breast, rice, vegetables",
    },
    {
        "name": "Example Meal 3",
        "calories": 300,
        "time": "19:00",
        "ingredients": "Salad with olive oil dressing",
    },
)


def export_records(meals: Iterable[Any], today: str) -> list[dict[str, Any]]:
    """Flat export rows (no id / created_at); the example template when empty."""
    records = [
        {
            "name": m.name,
            "calories": m.calories,
            "time": m.time or DEFAULT_TIME,
            "ingredients": m.ingredients or "",
            "date": m.date,
        }
        for m in meals
    ]
    if records:
        return records
    return [{**example, "date": today} for example in _TEMPLATE]


def export_filename(has_data: bool, today: str) -> str:
    return f"olive-export-{today}.json" if has_data else "olive-template.json"
