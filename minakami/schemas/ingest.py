"""
Ingest request / response schemas for the device collectors.

POST /ingest/locations   → LocationSample      → LocationRecorded
POST /ingest/calls       → CallLogBatch        → ImportSummary
POST /ingest/app-usage   → AppUsageBatch       → ImportSummary
POST /ingest/strava      → StravaImportRequest → StravaImportResponse
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

BATCH_MAX_ITEMS = 500


class LocationSample(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timestamp: int = Field(ge=0, description="Epoch ms of the fix.")
    accuracy: Optional[float] = Field(default=None, ge=0, description="Meters.")
    name: Optional[str] = None


class LocationRecorded(BaseModel):
    location_id: int
    created: bool = Field(description="False when an existing place within the radius was revisited.")


class CallLogCreate(BaseModel):
    phone_number: str = Field(min_length=1)
    contact_name: Optional[str] = None
    call_type: Literal["incoming", "outgoing", "missed"]
    call_date: int = Field(ge=0, description="Epoch ms.")
    duration: int = Field(default=0, ge=0, description="Seconds.")


class AppUsageCreate(BaseModel):
    app_name: str = Field(min_length=1)
    package_name: Optional[str] = None
    category: Optional[str] = None
    duration: int = Field(ge=0, description="Foreground time in ms.")
    timestamp: Optional[int] = Field(default=None, ge=0)
    session_date: Optional[str] = Field(default=None, examples=["2026-02-20"])
    source: Literal["manual", "android_usage_stats", "demo_usage"] = "manual"


class CallLogBatch(BaseModel):
    items: Annotated[list[CallLogCreate], Field(min_length=1, max_length=BATCH_MAX_ITEMS)]


class AppUsageBatch(BaseModel):
    items: Annotated[list[AppUsageCreate], Field(min_length=1, max_length=BATCH_MAX_ITEMS)]


class ImportSummary(BaseModel):
    total: int
    inserted: int
    ids: list[int] = Field(default_factory=list)


class StravaImportRequest(BaseModel):
    """Raw activity objects as returned by the Strava /athlete/activities API."""
    model_config = ConfigDict(extra="forbid")

    activities: Annotated[list[dict[str, Any]], Field(max_length=BATCH_MAX_ITEMS)]


class StravaImportResponse(BaseModel):
    total_fetched: int
    new_activities: int
    skipped: int
    ids: list[int] = Field(default_factory=list)
