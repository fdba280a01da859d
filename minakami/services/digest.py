"""
Day digest: everything the narrative generator reads for one calendar day,
gathered in one call.
"""
from __future__ import annotations

from typing import Any

from minakami.core.dates import DateLike, day_bounds, format_day
from minakami.db.connection import ExecuteResult
from minakami.db.facade import DatabaseService


async def build_day_digest(db: DatabaseService, day: DateLike) -> dict[str, Any]:
    start, end = day_bounds(day)
    return {
        "date": format_day(day),
        "activities": await db.get_activities_for_date(day),
        "activity_stats": await db.get_activity_stats(start, end),
        "locations": await db.get_locations_for_date_range(start, end),
        "location_stats": await db.get_location_stats(start, end),
        "call_stats": await db.get_call_stats(day),
        "top_contacts": await db.get_top_contacts(start, end, limit=5),
        "app_usage_stats": await db.get_app_usage_stats(day),
        "top_apps": await db.get_top_apps_for_date(day, limit=5),
        "notes": await db.get_user_notes_for_date(day),
        "narrative": await db.get_narrative_summary(day),
        "daily_summary": await db.get_daily_summary(day),
    }


async def save_narrative(db: DatabaseService, day: DateLike, text: str) -> ExecuteResult:
    """Store the generated narrative, replacing any earlier one for the day."""
    return await db.add_narrative_summary(day, text.strip())
