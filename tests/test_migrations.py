"""
Schema migrator: idempotence and recovery from half-applied upgrades.
"""
from __future__ import annotations

import sqlite3

import pytest
from sqlalchemy.exc import OperationalError

from services.db import Database
from services.migrations import LATEST_VERSION

pytestmark = pytest.mark.asyncio

ALL_COLUMNS = {"id", "date", "name", "calories", "time", "ingredients", "created_at"}


def _column_names(info: dict) -> set[str]:
    return {c["name"] for c in info["columns"]}


async def test_fresh_database_reaches_latest_version(db):
    info = await db.debug_schema()
    assert info["version"] == LATEST_VERSION == 3
    assert _column_names(info) == ALL_COLUMNS


async def test_migrating_repeatedly_is_a_no_op(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'again.db'}"
    snapshots = []
    for _ in range(3):
        database = Database(url)
        snapshots.append(await database.debug_schema())
        await database.dispose()
    assert snapshots[0] == snapshots[1] == snapshots[2]


async def test_column_left_by_interrupted_upgrade_is_tolerated(tmp_path):
    # ingredients already added but the counter never moved past 2
    path = tmp_path / "partial.db"
    raw = sqlite3.connect(path)
    raw.executescript(
        """
        CREATE TABLE meals (
            id TEXT PRIMARY KEY NOT NULL,
            date TEXT NOT NULL,
            name TEXT NOT NULL,
            calories REAL NOT NULL CHECK (calories > 0),
            created_at INTEGER NOT NULL
        );
        ALTER TABLE meals ADD COLUMN time TEXT DEFAULT '12:00';
        ALTER TABLE meals ADD COLUMN ingredients TEXT;
        INSERT INTO meals (id, date, name, calories, created_at)
            VALUES ('a', '2025-01-01', 'Oats', 300, 1);
        PRAGMA user_version = 2;
        """
    )
    raw.close()

    database = Database(f"sqlite+aiosqlite:///{path}")
    info = await database.debug_schema()
    await database.dispose()

    assert info["version"] == 3
    assert _column_names(info) == ALL_COLUMNS


async def test_version_one_database_is_upgraded_in_place(tmp_path):
    path = tmp_path / "v1.db"
    raw = sqlite3.connect(path)
    raw.executescript(
        """
        CREATE TABLE meals (
            id TEXT PRIMARY KEY NOT NULL,
            date TEXT NOT NULL,
            name TEXT NOT NULL,
            calories REAL NOT NULL CHECK (calories > 0),
            created_at INTEGER NOT NULL
        );
        INSERT INTO meals (id, date, name, calories, created_at)
            VALUES ('old', '2024-12-31', 'Pie', 410, 5);
        PRAGMA user_version = 1;
        """
    )
    raw.close()

    from services.meals import get_meals_by_date

    database = Database(f"sqlite+aiosqlite:///{path}")
    meals = await get_meals_by_date(database, "2024-12-31")
    await database.dispose()

    assert [(m.id, m.time, m.ingredients) for m in meals] == [("old", "12:00", None)]


async def test_reset_recreates_empty_schema(tmp_path):
    from core.models.meal import Meal
    from services.meals import add_meal, get_totals_by_date

    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'reset.db'}")
    await add_meal(database, Meal(id="x", date="2025-01-01", name="Tea", calories=5))
    await database.reset()

    assert await get_totals_by_date(database) == {}
    assert (await database.debug_schema())["version"] == 3
    await database.dispose()


async def test_failed_step_keeps_version_and_retries_next_start(tmp_path):
    # a view named `meals` cannot take ALTER TABLE ... ADD COLUMN
    path = tmp_path / "blocked.db"
    raw = sqlite3.connect(path)
    raw.executescript(
        """
        CREATE VIEW meals AS
            SELECT 'a' AS id, '2025-01-01' AS date, 'Oats' AS name,
                   300.0 AS calories, 1 AS created_at;
        PRAGMA user_version = 1;
        """
    )
    raw.close()

    database = Database(f"sqlite+aiosqlite:///{path}")
    with pytest.raises(OperationalError):
        await database.engine()

    raw = sqlite3.connect(path)
    assert raw.execute("PRAGMA user_version").fetchone()[0] == 1
    raw.executescript(
        """
        DROP VIEW meals;
        CREATE TABLE meals (
            id TEXT PRIMARY KEY NOT NULL,
            date TEXT NOT NULL,
            name TEXT NOT NULL,
            calories REAL NOT NULL CHECK (calories > 0),
            created_at INTEGER NOT NULL
        );
        """
    )
    raw.close()

    info = await database.debug_schema()
    await database.dispose()

    assert info["version"] == 3
    assert _column_names(info) == ALL_COLUMNS
