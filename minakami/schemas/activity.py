"""
Activity request / response schemas.

Timestamps are epoch milliseconds, as stored.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityCreate(BaseModel):
    """A single activity to record."""
    type: str = Field(min_length=1, max_length=64, examples=["exercise", "walk"])
    start_time: int = Field(ge=0, description="Start, epoch ms.")
    end_time: Optional[int] = Field(default=None, ge=0, description="End, epoch ms.")
    duration: Optional[int] = Field(default=None, ge=0, description="Duration in ms.")
    details: Optional[str] = None
    source: Optional[str] = Field(default=None, description="Defaults to 'manual'.")
    metadata: Optional[dict[str, Any]] = None
    calories: Optional[float] = Field(default=None, ge=0)
    distance: Optional[float] = Field(default=None, ge=0, description="Meters.")
    sport_type: Optional[str] = None
    strava_id: Optional[str] = None
    heart_rate_avg: Optional[float] = Field(default=None, ge=0)
    heart_rate_max: Optional[float] = Field(default=None, ge=0)
    elevation_gain: Optional[float] = None


class ActivityUpdate(BaseModel):
    """Partial update. Only the fields present in the request are written."""
    model_config = ConfigDict(extra="forbid")

    type: Optional[str] = Field(default=None, min_length=1, max_length=64)
    start_time: Optional[int] = Field(default=None, ge=0)
    end_time: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=0)
    details: Optional[str] = None
    source: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    calories: Optional[float] = Field(default=None, ge=0)
    distance: Optional[float] = Field(default=None, ge=0)
    sport_type: Optional[str] = None
    heart_rate_avg: Optional[float] = Field(default=None, ge=0)
    heart_rate_max: Optional[float] = Field(default=None, ge=0)
    elevation_gain: Optional[float] = None


class ActivityOut(BaseModel):
    id: int
    type: Optional[str] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    duration: Optional[int] = None
    details: Optional[str] = None
    source: Optional[str] = None
    metadata: Any = Field(default_factory=dict)
    calories: Optional[float] = None
    distance: Optional[float] = None
    sport_type: Optional[str] = None
    strava_id: Optional[str] = None
    heart_rate_avg: Optional[float] = None
    heart_rate_max: Optional[float] = None
    elevation_gain: Optional[float] = None


class ActivityStats(BaseModel):
    total_activities: int = 0
    total_duration: float = 0
    total_calories: float = 0
    total_distance: float = 0
    avg_heart_rate: float = 0
