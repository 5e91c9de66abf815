"""
services/migrations.py
────────────────────────────────────────────────────────────────────────
Additive, forward-only schema steps for the `meals` table.

The applied version lives in SQLite's own `PRAGMA user_version`; each step
runs in one transaction whose final statement bumps that counter, so a
failed step leaves the version untouched and is retried on next start.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable

from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncConnection

_LOG = logging.getLogger(__name__)

TABLE = "meals"


async def current_version(conn: AsyncConnection) -> int:
    result = await conn.exec_driver_sql("PRAGMA user_version")
    return int(result.scalar() or 0)


async def _columns(conn: AsyncConnection) -> set[str]:
    def _probe(sync_conn) -> set[str]:
        insp = inspect(sync_conn)
        if not insp.has_table(TABLE):
            return set()
        return {c["name"] for c in insp.get_columns(TABLE)}

    return await conn.run_sync(_probe)


async def _add_column(conn: AsyncConnection, name: str, ddl: str) -> None:
    if name in await _columns(conn):
        _LOG.info("column %s.%s already present, skipping ALTER", TABLE, name)
        return
    try:
        await conn.exec_driver_sql(f"ALTER TABLE {TABLE} ADD COLUMN {name} {ddl}")
    except OperationalError as exc:
        if "duplicate column" not in str(exc.orig).lower():
            raise
        _LOG.info("column %s.%s added concurrently, treating as applied", TABLE, name)


# ───────── steps (index i upgrades version i → i + 1) ────────────────
async def _create_base_table(conn: AsyncConnection) -> None:
    await conn.exec_driver_sql(
        f"""
        CREATE TABLE IF NOT EXISTS {TABLE} (
            id TEXT PRIMARY KEY NOT NULL,
            date TEXT NOT NULL,
            name TEXT NOT NULL,
            calories REAL NOT NULL CHECK (calories > 0),
            created_at INTEGER NOT NULL DEFAULT (strftime('%s','now') * 1000)
        )
        """
    )


async def _add_time(conn: AsyncConnection) -> None:
    await _add_column(conn, "time", "TEXT DEFAULT '12:00'")


async def _add_ingredients(conn: AsyncConnection) -> None:
    await _add_column(conn, "ingredients", "TEXT")


STEPS: list[Callable[[AsyncConnection], Awaitable[None]]] = [
    _create_base_table,
    _add_time,
    _add_ingredients,
]
LATEST_VERSION = len(STEPS)


async def migrate(conn: AsyncConnection) -> int:
    """Bring `conn`'s database up to LATEST_VERSION; safe to call on every start."""
    async with conn.begin():
        version = await current_version(conn)

    while version < LATEST_VERSION:
        step = STEPS[version]
        async with conn.begin():
            await step(conn)
            # PRAGMA takes no bind parameters
            await conn.exec_driver_sql(f"PRAGMA user_version = {version + 1:d}")
        version += 1
        _LOG.info("schema migrated to v%d (%s)", version, step.__name__.lstrip("_"))

    return version
