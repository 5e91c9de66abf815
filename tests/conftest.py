from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import insert

from services.db import Database, MealRow
from services.prefs import PreferenceService, SettingsFile


@pytest_asyncio.fixture
async def db(tmp_path: Path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'olive.db'}")
    yield database
    await database.dispose()


@pytest.fixture
def prefs(tmp_path: Path) -> PreferenceService:
    return PreferenceService(SettingsFile(tmp_path / "prefs.json"), default_goal=2000).load()


@pytest.fixture
def insert_row(db: Database):
    """Write a raw row with a chosen created_at (bypasses add_meal's clock)."""

    async def _insert(**values) -> None:
        values.setdefault("time", "12:00")
        async with db.begin() as conn:
            await conn.execute(insert(MealRow).values(**values))

    return _insert
