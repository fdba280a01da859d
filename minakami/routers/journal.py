"""
Journal router.

PUT    /journal/days/{day}/narrative   — store the narrative (replaces)
GET    /journal/days/{day}/narrative
GET    /journal/narratives             — narratives for a day range
PUT    /journal/days/{day}/summary     — store the daily summary (replaces)
GET    /journal/days/{day}/summary
GET    /journal/days/{day}/notes
POST   /journal/notes
GET    /journal/notes/search?q=
PATCH  /journal/notes/{id}
DELETE /journal/notes/{id}
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from minakami.core.errors import NotFoundError
from minakami.db.base import get_database
from minakami.db.facade import DatabaseService
from minakami.schemas.common import ErrorResponse, WriteResult
from minakami.schemas.journal import (
    DailySummaryUpsert,
    NarrativeOut,
    NarrativeUpsert,
    NoteCreate,
    NoteOut,
    NoteUpdate,
)
from minakami.services.digest import save_narrative

router = APIRouter(prefix="/journal", tags=["journal"])


# ---------------------------------------------------------------------------
# Narratives
# ---------------------------------------------------------------------------

@router.put("/days/{day}/narrative", response_model=NarrativeOut)
async def put_narrative(
    day: date,
    payload: NarrativeUpsert,
    db: DatabaseService = Depends(get_database),
):
    await save_narrative(db, day, payload.summary)
    return await db.get_narrative_summary(day)


@router.get(
    "/days/{day}/narrative",
    response_model=NarrativeOut,
    responses={404: {"model": ErrorResponse, "description": "No narrative for this day."}},
)
async def get_narrative(day: date, db: DatabaseService = Depends(get_database)):
    narrative = await db.get_narrative_summary(day)
    if narrative is None:
        raise NotFoundError("narrative", day.isoformat())
    return narrative


@router.get("/narratives", response_model=list[NarrativeOut])
async def list_narratives(
    start: date = Query(description="First day, inclusive."),
    end: date = Query(description="Last day, inclusive."),
    db: DatabaseService = Depends(get_database),
):
    return await db.get_narrative_summaries_for_date_range(start, end)


# ---------------------------------------------------------------------------
# Daily summaries
# ---------------------------------------------------------------------------

@router.put("/days/{day}/summary")
async def put_daily_summary(
    day: date,
    payload: DailySummaryUpsert,
    db: DatabaseService = Depends(get_database),
):
    await db.add_daily_summary(day, payload)
    return await db.get_daily_summary(day)


@router.get(
    "/days/{day}/summary",
    responses={404: {"model": ErrorResponse, "description": "No summary for this day."}},
)
async def get_daily_summary(day: date, db: DatabaseService = Depends(get_database)):
    summary = await db.get_daily_summary(day)
    if summary is None:
        raise NotFoundError("daily_summary", day.isoformat())
    return summary


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------

@router.get("/days/{day}/notes", response_model=list[NoteOut])
async def notes_for_day(day: date, db: DatabaseService = Depends(get_database)):
    return await db.get_user_notes_for_date(day)


@router.post("/notes", response_model=WriteResult, status_code=status.HTTP_201_CREATED)
async def create_note(payload: NoteCreate, db: DatabaseService = Depends(get_database)):
    result = await db.add_user_note(payload.day, payload.note_text, payload.timestamp)
    return WriteResult(insert_id=result.insert_id, rows_affected=result.rows_affected)


@router.get("/notes/search", response_model=list[NoteOut])
async def search_notes(
    q: str = Query(min_length=1, description="Substring to look for in note text."),
    limit: int = Query(default=50, ge=1, le=500),
    db: DatabaseService = Depends(get_database),
):
    return await db.search_notes(q, limit)


@router.get("/notes/recent", response_model=list[NoteOut])
async def recent_notes(
    limit: int = Query(default=20, ge=1, le=500),
    db: DatabaseService = Depends(get_database),
):
    return await db.get_recent_user_notes(limit)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteOut,
    responses={404: {"model": ErrorResponse, "description": "Note not found."}},
)
async def update_note(
    note_id: int,
    payload: NoteUpdate,
    db: DatabaseService = Depends(get_database),
):
    result = await db.update_user_note(note_id, payload.note_text)
    if result.rows_affected == 0:
        raise NotFoundError("note", note_id)
    return await db.get_user_note_by_id(note_id)


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Note not found."}},
)
async def delete_note(note_id: int, db: DatabaseService = Depends(get_database)):
    result = await db.delete_user_note(note_id)
    if result.rows_affected == 0:
        raise NotFoundError("note", note_id)


@router.get("/stats")
async def journal_stats(
    start: date = Query(description="First day, inclusive."),
    end: Optional[date] = Query(default=None, description="Last day, inclusive."),
    db: DatabaseService = Depends(get_database),
):
    return await db.get_summary_stats(start, end or start)
