from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from api.v1.deps import get_db
from api.v1.schemas.meal import ExportRecord
from core.meal_import import ImportParseError, parse_import_payload
from core.models.meal import ImportResult
from services.db import Database
from services.transfer import bulk_upsert_meals, export_meals

router = APIRouter()


@router.post("/import", response_model=ImportResult)
async def import_meals(request: Request, db: Database = Depends(get_db)) -> ImportResult:
    """Raw JSON body in either the flat-list or the date-keyed shape."""
    try:
        payload = parse_import_payload(await request.body())
    except ImportParseError:
        raise HTTPException(status_code=400, detail="Invalid JSON")
    return await bulk_upsert_meals(db, payload)


@router.get("/export", response_model=list[ExportRecord])
async def export(response: Response, db: Database = Depends(get_db)) -> list[dict]:
    filename, records = await export_meals(db)
    response.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return records
