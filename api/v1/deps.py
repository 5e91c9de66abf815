from __future__ import annotations

from fastapi import Request

from services.db import Database
from services.prefs import PreferenceService


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_prefs(request: Request) -> PreferenceService:
    return request.app.state.prefs
