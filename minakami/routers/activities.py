"""
Activities router.

POST   /activities            — record an activity
GET    /activities            — activities for one day
GET    /activities/recent     — most recent first
GET    /activities/strava     — Strava-sourced activities
GET    /activities/stats      — aggregates over a day range
GET    /activities/{id}
PATCH  /activities/{id}       — partial update
DELETE /activities/{id}
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from minakami.core.dates import day_bounds
from minakami.core.errors import NotFoundError
from minakami.db.base import get_database
from minakami.db.facade import DatabaseService
from minakami.schemas.activity import ActivityCreate, ActivityOut, ActivityStats, ActivityUpdate
from minakami.schemas.common import ErrorResponse, WriteResult

router = APIRouter(prefix="/activities", tags=["activities"])


@router.post(
    "",
    response_model=WriteResult,
    status_code=status.HTTP_201_CREATED,
    summary="Record an activity",
)
async def create_activity(payload: ActivityCreate, db: DatabaseService = Depends(get_database)):
    result = await db.add_activity(payload)
    return WriteResult(insert_id=result.insert_id, rows_affected=result.rows_affected)


@router.get("", response_model=list[ActivityOut], summary="Activities for one day")
async def list_activities(
    day: Optional[date] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD). Defaults to today (local time).",
        examples=["2026-02-20"],
    ),
    db: DatabaseService = Depends(get_database),
):
    return await db.get_activities_for_date(day or date.today())


@router.get("/recent", response_model=list[ActivityOut], summary="Most recent activities")
async def recent_activities(
    limit: int = Query(default=10, ge=1, le=500),
    db: DatabaseService = Depends(get_database),
):
    return await db.get_recent_activities(limit)


@router.get("/strava", response_model=list[ActivityOut], summary="Strava activities")
async def strava_activities(db: DatabaseService = Depends(get_database)):
    return await db.get_strava_activities()


@router.get("/stats", response_model=ActivityStats, summary="Activity aggregates")
async def activity_stats(
    start: date = Query(description="First day, inclusive."),
    end: Optional[date] = Query(default=None, description="Last day, inclusive. Defaults to `start`."),
    db: DatabaseService = Depends(get_database),
):
    start_ms, _ = day_bounds(start)
    _, end_ms = day_bounds(end or start)
    return await db.get_activity_stats(start_ms, end_ms)


@router.get(
    "/{activity_id}",
    response_model=ActivityOut,
    responses={404: {"model": ErrorResponse, "description": "Activity not found."}},
)
async def get_activity(activity_id: int, db: DatabaseService = Depends(get_database)):
    activity = await db.get_activity_by_id(activity_id)
    if activity is None:
        raise NotFoundError("activity", activity_id)
    return activity


@router.patch(
    "/{activity_id}",
    response_model=ActivityOut,
    responses={404: {"model": ErrorResponse, "description": "Activity not found."}},
)
async def update_activity(
    activity_id: int,
    payload: ActivityUpdate,
    db: DatabaseService = Depends(get_database),
):
    if await db.get_activity_by_id(activity_id) is None:
        raise NotFoundError("activity", activity_id)
    await db.update_activity(activity_id, payload)
    return await db.get_activity_by_id(activity_id)


@router.delete(
    "/{activity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Activity not found."}},
)
async def delete_activity(activity_id: int, db: DatabaseService = Depends(get_database)):
    result = await db.delete_activity(activity_id)
    if result.rows_affected == 0:
        raise NotFoundError("activity", activity_id)
