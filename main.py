from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from config import settings
from api.v1.router import api_router
from services.db import Database
from services.prefs import PreferenceService

logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)


def create_app(
    db: Database | None = None,
    prefs: PreferenceService | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.db = db or Database()
        app.state.prefs = (prefs or PreferenceService.from_settings()).load()
        await app.state.db.engine()  # open + migrate before serving
        try:
            yield
        finally:
            await app.state.db.dispose()

    app = FastAPI(title="Olive Calorie Log API", version="1.0.0", lifespan=lifespan)

    # CORS (local app only – lock down if exposed)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.env_name}

    return app


app = create_app()
