from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from api.v1.deps import get_prefs
from api.v1.schemas.prefs import GoalIn, GoalOut, ThemeIn, ThemeOut
from core.models.prefs import resolve_theme
from services.prefs import PreferenceService

router = APIRouter()


# ───────────────────────── goal ─────────────────────────────
@router.get("/goal", response_model=GoalOut, status_code=status.HTTP_200_OK)
async def get_goal(prefs: PreferenceService = Depends(get_prefs)) -> GoalOut:
    return GoalOut(goal=prefs.goal.get())


@router.put("/goal", response_model=GoalOut, status_code=status.HTTP_200_OK)
async def put_goal(body: GoalIn, prefs: PreferenceService = Depends(get_prefs)) -> GoalOut:
    prefs.goal.set(body.goal)
    return GoalOut(goal=prefs.goal.get())


# ───────────────────────── theme ────────────────────────────
@router.get("/theme", response_model=ThemeOut)
async def get_theme(
    system: str | None = Query(None, description="client's system scheme: light or dark"),
    prefs: PreferenceService = Depends(get_prefs),
) -> ThemeOut:
    override = prefs.theme.get()
    return ThemeOut(override=override, resolved=resolve_theme(override, system))


@router.put("/theme", response_model=ThemeOut)
async def put_theme(
    body: ThemeIn,
    system: str | None = Query(None),
    prefs: PreferenceService = Depends(get_prefs),
) -> ThemeOut:
    prefs.theme.set(body.override)
    return ThemeOut(override=body.override, resolved=resolve_theme(body.override, system))
