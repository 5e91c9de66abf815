from __future__ import annotations

from pydantic import BaseModel, Field

from core.models.prefs import Theme


class GoalIn(BaseModel):
    goal: int = Field(..., gt=0, le=99_999_999, examples=[2000])


class GoalOut(GoalIn):
    pass


class ThemeIn(BaseModel):
    override: Theme | None = Field(None, description="light, dark, or null to follow the system")


class ThemeOut(ThemeIn):
    resolved: Theme
