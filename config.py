"""
Centralised settings loader.

Every value can be overridden through the environment or a local `.env`
file, e.g. `DATABASE_URL=sqlite+aiosqlite:///tmp/olive.db`.
"""

from __future__ import annotations
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / storage ──────────────────────────────────────────
    env_name: str = Field("local", validation_alias="ENV_NAME")
    database_url: str = Field(
        "sqlite+aiosqlite:///olive.db", validation_alias="DATABASE_URL"
    )
    db_echo: bool = Field(False, validation_alias="DB_ECHO")

    # ─── preferences (goal / theme) ─────────────────────────────────
    prefs_path: Path = Field(Path("olive-prefs.json"), validation_alias="PREFS_PATH")
    default_calorie_goal: int = Field(2000, ge=1, validation_alias="DEFAULT_CALORIE_GOAL")

    # ─── misc ───────────────────────────────────────────────────────
    suggestion_limit: int = Field(8, ge=1, validation_alias="SUGGESTION_LIMIT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    log_format: str = Field(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        validation_alias="LOG_FORMAT",
    )

    # allow other env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
