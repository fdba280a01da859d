"""
Journal schemas: narrative summaries, daily summaries and user notes.

All three are keyed by a calendar day.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class NarrativeUpsert(BaseModel):
    summary: str = Field(min_length=1, description="Generated narrative text for the day.")


class NarrativeOut(BaseModel):
    id: int
    date: str
    summary: str
    created_at: Optional[str] = None


class DailySummaryUpsert(BaseModel):
    """Full field set for a day. A second write replaces the whole row."""
    morning_activity: Optional[str] = None
    afternoon_activity: Optional[str] = None
    evening_activity: Optional[str] = None
    night_activity: Optional[str] = None
    total_steps: int = Field(default=0, ge=0)
    total_active_time: int = Field(default=0, ge=0)
    most_visited_location: Optional[int] = Field(
        default=None, description="locations.id of the most visited place."
    )
    most_called_contact: Optional[str] = None
    summary_data: dict[str, Any] = Field(default_factory=dict)


class NoteCreate(BaseModel):
    day: date = Field(examples=["2026-02-20"])
    note_text: str = Field(min_length=1, max_length=10_000)
    timestamp: Optional[int] = Field(default=None, ge=0, description="Epoch ms; defaults to now.")

    @field_validator("note_text", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("note_text must not be empty after stripping whitespace")
        return stripped


class NoteUpdate(BaseModel):
    note_text: str = Field(min_length=1, max_length=10_000)


class NoteOut(BaseModel):
    id: int
    date: str
    note_text: str
    timestamp: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
