# api/v1/router.py
from fastapi import APIRouter

from . import data, meals, prefs

api_router = APIRouter()

api_router.include_router(meals.router, prefix="/meals", tags=["Meals"])
api_router.include_router(data.router, prefix="/data", tags=["Import/Export"])
api_router.include_router(prefs.router, prefix="/preferences", tags=["Preferences"])
