"""
State router.

GET /state/{day}   — everything recorded for one day, as read by the narrative generator
"""
from datetime import date

from fastapi import APIRouter, Depends

from minakami.db.base import get_database
from minakami.db.facade import DatabaseService
from minakami.services.digest import build_day_digest

router = APIRouter(prefix="/state", tags=["state"])


@router.get("/{day}", summary="Full digest of a day")
async def state_for_day(day: date, db: DatabaseService = Depends(get_database)):
    return await build_day_digest(db, day)
