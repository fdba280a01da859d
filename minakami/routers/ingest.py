"""
Ingest router for the device collectors.

POST /ingest/locations   — one location fix
POST /ingest/calls       — batch of call log rows
POST /ingest/app-usage   — batch of app usage sessions
POST /ingest/strava      — raw Strava activities, de-duplicated on strava_id
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from minakami.db.base import get_database
from minakami.db.facade import DatabaseService
from minakami.schemas.ingest import (
    AppUsageBatch,
    CallLogBatch,
    ImportSummary,
    LocationRecorded,
    LocationSample,
    StravaImportRequest,
    StravaImportResponse,
)
from minakami.services.ingest import (
    DEFAULT_VISIT_RADIUS_M,
    import_app_usage,
    import_call_logs,
    import_strava_activities,
    record_location_sample,
)

router = APIRouter(prefix="/ingest", tags=["ingest"])


@router.post("/locations", response_model=LocationRecorded, status_code=status.HTTP_201_CREATED)
async def ingest_location(
    payload: LocationSample,
    radius_m: float = Query(default=DEFAULT_VISIT_RADIUS_M, gt=0, le=10_000),
    db: DatabaseService = Depends(get_database),
):
    """Count a visit to a known place within `radius_m`, or record a new place."""
    result = await record_location_sample(db, payload, radius_m)
    return LocationRecorded(location_id=result.location_id, created=result.created)


@router.post("/calls", response_model=ImportSummary, status_code=status.HTTP_201_CREATED)
async def ingest_calls(payload: CallLogBatch, db: DatabaseService = Depends(get_database)):
    result = await import_call_logs(db, payload.items)
    return ImportSummary(total=result.total, inserted=result.inserted, ids=result.ids)


@router.post("/app-usage", response_model=ImportSummary, status_code=status.HTTP_201_CREATED)
async def ingest_app_usage(payload: AppUsageBatch, db: DatabaseService = Depends(get_database)):
    result = await import_app_usage(db, payload.items)
    return ImportSummary(total=result.total, inserted=result.inserted, ids=result.ids)


@router.post(
    "/strava",
    response_model=StravaImportResponse,
    responses={422: {"description": "An activity is missing `id` or `start_date`."}},
)
async def ingest_strava(payload: StravaImportRequest, db: DatabaseService = Depends(get_database)):
    """
    Import Strava activities. Activities whose `id` is already stored are
    skipped, so re-sending the same page is harmless.
    """
    result = await import_strava_activities(db, payload.activities)
    return StravaImportResponse(
        total_fetched=result.total_fetched,
        new_activities=result.new_activities,
        skipped=result.skipped,
        ids=result.ids,
    )
