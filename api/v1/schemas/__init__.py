"""Re-export individual schema modules for easy imports."""

from .meal import DaySummary, ExportRecord, MealOut
from .prefs import GoalIn, GoalOut, ThemeIn, ThemeOut

__all__ = [
    "DaySummary",
    "ExportRecord",
    "MealOut",
    "GoalIn",
    "GoalOut",
    "ThemeIn",
    "ThemeOut",
]
