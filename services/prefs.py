"""
services/prefs.py
────────────────────────────────────────────────────────────────────────
Calorie goal + theme override: tiny string key-value settings with an
in-memory cache and synchronous change listeners.

The cached value is authoritative for the running process; persisting it
is best-effort and a failed write is only logged.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Generic, TypeVar

from config import settings
from core.models.prefs import Theme

_LOG = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[T], None]

CALORIE_GOAL_KEY = "CALORIE_GOAL_V1"
THEME_KEY = "THEME_OVERRIDE_V1"


# ───────────────────────── key-value area ───────────────────
class SettingsFile:
    """String key-value pairs kept in one JSON object file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp.replace(self.path)


# ───────────────────────── observable value ─────────────────
class Preference(Generic[T]):
    def __init__(
        self,
        store: SettingsFile,
        key: str,
        default: T,
        parse: Callable[[str], T],
        dump: Callable[[T], str | None],
    ) -> None:
        self.store = store
        self.key = key
        self.default = default
        self._parse = parse
        self._dump = dump
        self._value: T = default
        self._listeners: list[Listener] = []

    def load(self) -> T:
        """Read from the key-value area; falls back to the default on absence or error."""
        try:
            raw = self.store.get(self.key)
            self._value = self.default if raw is None else self._parse(raw)
        except (OSError, ValueError) as exc:
            _LOG.warning("could not read preference %s: %s", self.key, exc)
            self._value = self.default
        return self._value

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        try:
            raw = self._dump(value)
            if raw is None:
                self.store.remove(self.key)
            else:
                self.store.set(self.key, raw)
        except (OSError, ValueError, TypeError) as exc:
            _LOG.warning("could not persist preference %s: %s", self.key, exc)
        for listener in list(self._listeners):
            listener(self._value)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; it is called now with the cached value and on every change."""
        self._listeners.append(listener)
        listener(self._value)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def _parse_theme(raw: str) -> Theme | None:
    return Theme(raw) if raw in (Theme.light.value, Theme.dark.value) else None


def _dump_theme(value: Theme | None) -> str | None:
    return None if value is None else Theme(value).value


class PreferenceService:
    """Built once at process start and handed to whoever needs goal/theme."""

    def __init__(self, store: SettingsFile, default_goal: int | None = None) -> None:
        self.store = store
        self.goal: Preference[int] = Preference(
            store,
            CALORIE_GOAL_KEY,
            settings.default_calorie_goal if default_goal is None else default_goal,
            parse=lambda raw: int(raw, 10),
            dump=lambda value: str(int(value)),
        )
        self.theme: Preference[Theme | None] = Preference(
            store, THEME_KEY, None, parse=_parse_theme, dump=_dump_theme
        )

    @classmethod
    def from_settings(cls) -> "PreferenceService":
        return cls(SettingsFile(settings.prefs_path))

    def load(self) -> "PreferenceService":
        self.goal.load()
        self.theme.load()
        return self
