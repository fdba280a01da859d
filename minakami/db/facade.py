"""
DatabaseService: one flat surface over the five repositories.

Every legacy call site (`db.add_activity(...)`, `db.get_call_stats(...)`)
goes through here. New code can reach a repository directly through
`db.repositories.activity` and friends, or run ad hoc SQL with the raw
execute / query_all / query_one / query_first primitives.

initialize() runs the schema manager's startup sequence once per instance;
later calls return immediately.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from minakami.core.config import Settings
from minakami.core.dates import DateLike
from minakami.db.connection import DatabaseConnection, ExecuteResult, Params, Statement
from minakami.db.schema import SchemaManager
from minakami.repositories import (
    ActivityRepository,
    AppUsageRepository,
    CallLogRepository,
    LocationRepository,
    NarrativeRepository,
)
from minakami.repositories.base import Fields
from minakami.services.performance import PerformanceTracker, QueryTimer

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    activity: ActivityRepository
    location: LocationRepository
    app_usage: AppUsageRepository
    narrative: NarrativeRepository
    call_log: CallLogRepository


class DatabaseService:
    def __init__(
        self,
        connection: DatabaseConnection,
        tracker: Optional[PerformanceTracker] = None,
    ):
        self.connection = connection
        self.schema = SchemaManager(connection)
        self.tracker = tracker
        self.repositories = Repositories(
            activity=ActivityRepository(connection, tracker),
            location=LocationRepository(connection, tracker),
            app_usage=AppUsageRepository(connection, tracker),
            narrative=NarrativeRepository(connection, tracker),
            call_log=CallLogRepository(connection, tracker),
        )
        self.initialized = False
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseService":
        connection = DatabaseConnection(settings.DATABASE_URL, echo=settings.SQL_ECHO)
        tracker = QueryTimer(
            slow_query_threshold_ms=settings.SLOW_QUERY_THRESHOLD_MS,
            max_stored_metrics=settings.MAX_STORED_METRICS,
        )
        return cls(connection, tracker)

    async def initialize(self) -> None:
        if self.initialized:
            return
        async with self._init_lock:
            if self.initialized:
                return
            await self.schema.initialize_database()
            self.initialized = True
            logger.info("Database initialized")

    async def close(self) -> None:
        await self.connection.dispose()
        self.initialized = False

    # ------------------------------------------------------------------
    # Raw SQL
    # ------------------------------------------------------------------

    async def execute(self, statement: Statement, params: Params = None) -> ExecuteResult:
        return await self.connection.execute(statement, params)

    async def query_all(self, statement: Statement, params: Params = None) -> list[dict]:
        return await self.connection.query_all(statement, params)

    async def query_one(self, statement: Statement, params: Params = None) -> Optional[dict]:
        return await self.connection.query_one(statement, params)

    async def query_first(self, statement: Statement, params: Params = None) -> Optional[dict]:
        return await self.connection.query_first(statement, params)

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    async def add_activity(self, activity: Fields) -> ExecuteResult:
        return await self.repositories.activity.add_activity(activity)

    async def get_activities_for_date_range(self, start: DateLike, end: DateLike) -> list[dict]:
        return await self.repositories.activity.get_activities_for_date_range(start, end)

    async def get_activities_for_date(self, day: DateLike) -> list[dict]:
        return await self.repositories.activity.get_activities_for_date(day)

    async def get_recent_activities(self, limit: int = 10) -> list[dict]:
        return await self.repositories.activity.get_recent_activities(limit)

    async def get_activity_by_id(self, activity_id: int) -> Optional[dict]:
        return await self.repositories.activity.get_activity_by_id(activity_id)

    async def update_activity(self, activity_id: int, updates: Fields) -> ExecuteResult:
        return await self.repositories.activity.update_activity(activity_id, updates)

    async def delete_activity(self, activity_id: int) -> ExecuteResult:
        return await self.repositories.activity.delete_activity(activity_id)

    async def get_activities_by_type(self, activity_type: str, limit: int = 50) -> list[dict]:
        return await self.repositories.activity.get_activities_by_type(activity_type, limit)

    async def get_activities_by_source(self, source: str, limit: int = 50) -> list[dict]:
        return await self.repositories.activity.get_activities_by_source(source, limit)

    async def get_strava_activities(self) -> list[dict]:
        return await self.repositories.activity.get_strava_activities()

    async def find_activity_by_strava_id(self, strava_id: str) -> Optional[dict]:
        return await self.repositories.activity.find_activity_by_strava_id(strava_id)

    async def get_activity_stats(self, start: DateLike, end: DateLike) -> dict:
        return await self.repositories.activity.get_activity_stats(start, end)

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    async def add_location(self, location: Fields) -> ExecuteResult:
        return await self.repositories.location.add_location(location)

    async def get_locations_for_date_range(self, start: DateLike, end: DateLike) -> list[dict]:
        return await self.repositories.location.get_locations_for_date_range(start, end)

    async def get_recent_locations(self, limit: int = 20) -> list[dict]:
        return await self.repositories.location.get_recent_locations(limit)

    async def find_nearby_location(
        self, latitude: float, longitude: float, radius_meters: float = 100
    ) -> Optional[dict]:
        return await self.repositories.location.find_nearby_location(
            latitude, longitude, radius_meters
        )

    async def update_location_visit(
        self, location_id: int, timestamp: Optional[DateLike] = None
    ) -> ExecuteResult:
        return await self.repositories.location.update_location_visit(location_id, timestamp)

    async def update_location_name(self, location_id: int, name: Optional[str]) -> ExecuteResult:
        return await self.repositories.location.update_location_name(location_id, name)

    async def get_most_visited_locations(self, limit: int = 10) -> list[dict]:
        return await self.repositories.location.get_most_visited_locations(limit)

    async def get_location_by_id(self, location_id: int) -> Optional[dict]:
        return await self.repositories.location.get_location_by_id(location_id)

    async def delete_location(self, location_id: int) -> ExecuteResult:
        return await self.repositories.location.delete_location(location_id)

    async def get_location_stats(self, start: DateLike, end: DateLike) -> dict:
        return await self.repositories.location.get_location_stats(start, end)

    # ------------------------------------------------------------------
    # App usage
    # ------------------------------------------------------------------

    async def add_app_usage(self, usage: Fields) -> ExecuteResult:
        return await self.repositories.app_usage.add_app_usage(usage)

    async def get_app_usage_for_date(self, day: DateLike) -> list[dict]:
        return await self.repositories.app_usage.get_app_usage_for_date(day)

    async def get_app_usage_for_date_range(self, start: DateLike, end: DateLike) -> list[dict]:
        return await self.repositories.app_usage.get_app_usage_for_date_range(start, end)

    async def get_top_apps_for_date(self, day: DateLike, limit: int = 10) -> list[dict]:
        return await self.repositories.app_usage.get_top_apps_for_date(day, limit)

    async def get_app_usage_stats(self, day: DateLike) -> dict:
        return await self.repositories.app_usage.get_app_usage_stats(day)

    async def get_app_trends(
        self, app_name: str, days: int = 7, until: Optional[DateLike] = None
    ) -> list[dict]:
        return await self.repositories.app_usage.get_app_trends(app_name, days, until)

    async def delete_app_usage(self, usage_id: int) -> ExecuteResult:
        return await self.repositories.app_usage.delete_app_usage(usage_id)

    async def delete_app_usage_for_date(self, day: DateLike) -> ExecuteResult:
        return await self.repositories.app_usage.delete_app_usage_for_date(day)

    async def get_weekly_usage_stats(self, start: DateLike) -> list[dict]:
        return await self.repositories.app_usage.get_weekly_usage_stats(start)

    # ------------------------------------------------------------------
    # Narratives, daily summaries, notes
    # ------------------------------------------------------------------

    async def add_narrative_summary(self, day: DateLike, summary: str) -> ExecuteResult:
        return await self.repositories.narrative.add_narrative_summary(day, summary)

    async def get_narrative_summary(self, day: DateLike) -> Optional[dict]:
        return await self.repositories.narrative.get_narrative_summary(day)

    async def get_recent_narrative_summaries(self, limit: int = 7) -> list[dict]:
        return await self.repositories.narrative.get_recent_narrative_summaries(limit)

    async def get_narrative_summaries_for_date_range(
        self, start: DateLike, end: DateLike
    ) -> list[dict]:
        return await self.repositories.narrative.get_narrative_summaries_for_date_range(start, end)

    async def add_daily_summary(self, day: DateLike, summary_data: Fields) -> ExecuteResult:
        return await self.repositories.narrative.add_daily_summary(day, summary_data)

    async def get_daily_summary(self, day: DateLike) -> Optional[dict]:
        return await self.repositories.narrative.get_daily_summary(day)

    async def get_recent_daily_summaries(self, limit: int = 7) -> list[dict]:
        return await self.repositories.narrative.get_recent_daily_summaries(limit)

    async def add_user_note(
        self, day: DateLike, note_text: str, timestamp: Optional[int] = None
    ) -> ExecuteResult:
        return await self.repositories.narrative.add_user_note(day, note_text, timestamp)

    async def get_user_note_by_id(self, note_id: int) -> Optional[dict]:
        return await self.repositories.narrative.get_user_note_by_id(note_id)

    async def get_user_notes_for_date(self, day: DateLike) -> list[dict]:
        return await self.repositories.narrative.get_user_notes_for_date(day)

    async def get_recent_user_notes(self, limit: int = 20) -> list[dict]:
        return await self.repositories.narrative.get_recent_user_notes(limit)

    async def update_user_note(self, note_id: int, note_text: str) -> ExecuteResult:
        return await self.repositories.narrative.update_user_note(note_id, note_text)

    async def delete_user_note(self, note_id: int) -> ExecuteResult:
        return await self.repositories.narrative.delete_user_note(note_id)

    async def search_notes(self, search_term: str, limit: int = 50) -> list[dict]:
        return await self.repositories.narrative.search_notes(search_term, limit)

    async def get_summary_stats(self, start: DateLike, end: DateLike) -> dict:
        return await self.repositories.narrative.get_summary_stats(start, end)

    # ------------------------------------------------------------------
    # Call logs
    # ------------------------------------------------------------------

    async def add_call_log(self, call_log: Fields) -> ExecuteResult:
        return await self.repositories.call_log.add_call_log(call_log)

    async def get_call_log_by_id(self, call_log_id: int) -> Optional[dict]:
        return await self.repositories.call_log.get_call_log_by_id(call_log_id)

    async def get_call_logs_for_date(self, day: DateLike) -> list[dict]:
        return await self.repositories.call_log.get_call_logs_for_date(day)

    async def get_call_logs_for_date_range(self, start: DateLike, end: DateLike) -> list[dict]:
        return await self.repositories.call_log.get_call_logs_for_date_range(start, end)

    async def get_recent_call_logs(self, limit: int = 20) -> list[dict]:
        return await self.repositories.call_log.get_recent_call_logs(limit)

    async def get_call_logs_by_type(self, call_type: str, limit: int = 50) -> list[dict]:
        return await self.repositories.call_log.get_call_logs_by_type(call_type, limit)

    async def get_call_logs_by_contact(self, contact_name: str, limit: int = 50) -> list[dict]:
        return await self.repositories.call_log.get_call_logs_by_contact(contact_name, limit)

    async def mark_call_log_as_analyzed(self, call_log_id: int) -> ExecuteResult:
        return await self.repositories.call_log.mark_call_log_as_analyzed(call_log_id)

    async def get_unanalyzed_call_logs(self, limit: int = 100) -> list[dict]:
        return await self.repositories.call_log.get_unanalyzed_call_logs(limit)

    async def get_call_stats(self, day: DateLike) -> dict:
        return await self.repositories.call_log.get_call_stats(day)

    async def get_top_contacts(self, start: DateLike, end: DateLike, limit: int = 10) -> list[dict]:
        return await self.repositories.call_log.get_top_contacts(start, end, limit)

    async def delete_call_log(self, call_log_id: int) -> ExecuteResult:
        return await self.repositories.call_log.delete_call_log(call_log_id)

    async def update_call_log_contact(
        self, call_log_id: int, contact_name: Optional[str]
    ) -> ExecuteResult:
        return await self.repositories.call_log.update_call_log_contact(call_log_id, contact_name)
