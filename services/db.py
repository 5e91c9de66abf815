"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup over SQLite (aiosqlite)
* `Database`: one lazily-opened, memoised storage handle per process
* Model that maps the single `meals` table
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

from sqlalchemy import Float, Integer, String, event, inspect
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncConnection,
    AsyncEngine,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from services.migrations import current_version, migrate

_LOG = logging.getLogger(__name__)

# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class MealRow(Base):
    """Query-side mapping only; DDL lives in services/migrations.py."""

    __tablename__ = "meals"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    date: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    calories: Mapped[float] = mapped_column(Float, nullable=False)
    time: Mapped[str | None] = mapped_column(String, default="12:00")
    ingredients: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)


# ───────── engine helper ─────────────────────────────────────────────
def _create_engine(url: str, echo: bool = False) -> AsyncEngine:
    eng = create_async_engine(url, echo=echo)
    if eng.dialect.name != "sqlite":
        return eng

    # pysqlite only opens transactions before DML; take over so DDL and the
    # user_version bump in a migration step commit together.
    @event.listens_for(eng.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(eng.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    return eng


class Database:
    """Explicit storage handle: engine creation + migration happen once, under a lock."""

    def __init__(self, url: str | None = None, echo: bool | None = None) -> None:
        self.url = url or settings.database_url
        self.echo = settings.db_echo if echo is None else echo
        self._engine: AsyncEngine | None = None
        self._lock = asyncio.Lock()

    async def engine(self) -> AsyncEngine:
        if self._engine is not None:
            return self._engine
        async with self._lock:
            if self._engine is None:
                eng = _create_engine(self.url, self.echo)
                try:
                    async with eng.connect() as conn:
                        version = await migrate(conn)
                except Exception:
                    await eng.dispose()
                    raise
                _LOG.info("storage ready at schema v%d (%s)", version, self.url)
                self._engine = eng
        return self._engine

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        """Read-only work; nothing is committed."""
        eng = await self.engine()
        async with eng.connect() as conn:
            yield conn

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[AsyncConnection]:
        """One transaction, committed on exit and rolled back on error."""
        eng = await self.engine()
        async with eng.begin() as conn:
            yield conn

    async def dispose(self) -> None:
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None

    # ───────── admin helpers ─────────────────────────────────────────
    async def debug_schema(self) -> dict[str, Any]:
        """Live column list of `meals` plus the stored schema version."""
        async with self.connect() as conn:
            columns = await conn.run_sync(
                lambda sync_conn: [
                    {"name": c["name"], "type": str(c["type"])}
                    for c in inspect(sync_conn).get_columns("meals")
                ]
            )
            version = await current_version(conn)
        return {"columns": columns, "version": version}

    async def reset(self) -> None:
        """Drop the database file and migrate a fresh one."""
        await self.dispose()
        path = self.file_path()
        if path is not None:
            for candidate in (path, Path(f"{path}-wal"), Path(f"{path}-shm")):
                candidate.unlink(missing_ok=True)
            _LOG.warning("database file %s removed", path)
        await self.engine()

    def file_path(self) -> Path | None:
        database = make_url(self.url).database
        if not database or database == ":memory:":
            return None
        return Path(database)
