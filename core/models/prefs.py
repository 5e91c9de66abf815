from __future__ import annotations

from enum import Enum


class Theme(str, Enum):
    light = "light"
    dark = "dark"


def resolve_theme(override: Theme | None, system: str | None) -> Theme:
    """Explicit override wins; otherwise follow the system scheme (light unless dark)."""
    if override is not None:
        return override
    return Theme.dark if system == "dark" else Theme.light
