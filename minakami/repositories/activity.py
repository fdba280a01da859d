"""
Activity repository: the `activities` table.

start_time is stored in epoch milliseconds; `metadata` is a JSON dict.
find_activity_by_strava_id is the de-duplication check Strava importers
must run before add_activity (there is no unique constraint on strava_id).
"""
from __future__ import annotations

from typing import Any, Optional

from minakami.core.dates import DateLike, day_bounds, to_epoch_ms
from minakami.db.connection import ExecuteResult
from minakami.models.activity import Activity
from minakami.repositories.base import BaseRepository, Fields, as_dict, jdump, jload

_COLUMNS = set(Activity.__table__.columns.keys()) - {"id"}


def _decode(row: Optional[dict]) -> Optional[dict]:
    if row is not None:
        row["metadata"] = jload(row.get("metadata"))
    return row


class ActivityRepository(BaseRepository):
    table = "activities"

    async def add_activity(self, activity: Fields) -> ExecuteResult:
        a = as_dict(activity)
        with self._tracked("addActivity"):
            return await self.connection.execute(
                """
                INSERT INTO activities (
                    type, start_time, end_time, duration, details, source, metadata,
                    calories, distance, sport_type, strava_id, heart_rate_avg,
                    heart_rate_max, elevation_gain
                ) VALUES (
                    :type, :start_time, :end_time, :duration, :details, :source, :metadata,
                    :calories, :distance, :sport_type, :strava_id, :heart_rate_avg,
                    :heart_rate_max, :elevation_gain
                )
                """,
                {
                    "type": a.get("type"),
                    "start_time": a.get("start_time"),
                    "end_time": a.get("end_time"),
                    "duration": a.get("duration"),
                    "details": a.get("details"),
                    "source": a.get("source") or "manual",
                    "metadata": jdump(a.get("metadata")),
                    "calories": a.get("calories") or 0,
                    "distance": a.get("distance") or 0,
                    "sport_type": a.get("sport_type"),
                    "strava_id": a.get("strava_id"),
                    "heart_rate_avg": a.get("heart_rate_avg"),
                    "heart_rate_max": a.get("heart_rate_max"),
                    "elevation_gain": a.get("elevation_gain") or 0,
                },
            )

    async def get_activities_for_date_range(self, start: DateLike, end: DateLike) -> list[dict]:
        with self._tracked("getActivitiesForDateRange"):
            rows = await self.connection.query_all(
                """
                SELECT * FROM activities
                WHERE start_time >= :start AND start_time <= :end
                ORDER BY start_time DESC
                """,
                {"start": to_epoch_ms(start), "end": to_epoch_ms(end)},
            )
        return [_decode(r) for r in rows]

    async def get_activities_for_date(self, day: DateLike) -> list[dict]:
        start, end = day_bounds(day)
        return await self.get_activities_for_date_range(start, end)

    async def get_recent_activities(self, limit: int = 10) -> list[dict]:
        with self._tracked("getRecentActivities"):
            rows = await self.connection.query_all(
                "SELECT * FROM activities ORDER BY start_time DESC LIMIT :limit",
                {"limit": limit},
            )
        return [_decode(r) for r in rows]

    async def get_activity_by_id(self, activity_id: int) -> Optional[dict]:
        with self._tracked("getActivityById"):
            row = await self.connection.query_one(
                "SELECT * FROM activities WHERE id = :id", {"id": activity_id}
            )
        return _decode(row)

    async def update_activity(self, activity_id: int, updates: Fields) -> ExecuteResult:
        """Partial update. `metadata` is re-encoded; unknown keys are rejected."""
        values: dict[str, Any] = as_dict(updates, exclude_unset=True)
        if not values:
            return ExecuteResult(insert_id=None, rows_affected=0)
        if "metadata" in values:
            values["metadata"] = jdump(values["metadata"])

        with self._tracked("updateActivity"):
            sql, params = self._build_update(activity_id, values, _COLUMNS)
            return await self.connection.execute(sql, params)

    async def delete_activity(self, activity_id: int) -> ExecuteResult:
        with self._tracked("deleteActivity"):
            return await self.connection.execute(
                "DELETE FROM activities WHERE id = :id", {"id": activity_id}
            )

    async def get_activities_by_type(self, activity_type: str, limit: int = 50) -> list[dict]:
        with self._tracked("getActivitiesByType"):
            rows = await self.connection.query_all(
                """
                SELECT * FROM activities
                WHERE type = :type
                ORDER BY start_time DESC
                LIMIT :limit
                """,
                {"type": activity_type, "limit": limit},
            )
        return [_decode(r) for r in rows]

    async def get_activities_by_source(self, source: str, limit: int = 50) -> list[dict]:
        with self._tracked("getActivitiesBySource"):
            rows = await self.connection.query_all(
                """
                SELECT * FROM activities
                WHERE source = :source
                ORDER BY start_time DESC
                LIMIT :limit
                """,
                {"source": source, "limit": limit},
            )
        return [_decode(r) for r in rows]

    async def get_strava_activities(self) -> list[dict]:
        return await self.get_activities_by_source("strava")

    async def find_activity_by_strava_id(self, strava_id: str) -> Optional[dict]:
        with self._tracked("findActivityByStravaId"):
            row = await self.connection.query_one(
                "SELECT * FROM activities WHERE strava_id = :strava_id LIMIT 1",
                {"strava_id": str(strava_id)},
            )
        return _decode(row)

    async def get_activity_stats(self, start: DateLike, end: DateLike) -> dict:
        with self._tracked("getActivityStats"):
            stats = await self.connection.query_one(
                """
                SELECT
                    COUNT(*) AS total_activities,
                    COALESCE(SUM(duration), 0) AS total_duration,
                    COALESCE(SUM(calories), 0) AS total_calories,
                    COALESCE(SUM(distance), 0) AS total_distance,
                    COALESCE(AVG(heart_rate_avg), 0) AS avg_heart_rate
                FROM activities
                WHERE start_time >= :start AND start_time <= :end
                """,
                {"start": to_epoch_ms(start), "end": to_epoch_ms(end)},
            )
        return stats or {
            "total_activities": 0,
            "total_duration": 0,
            "total_calories": 0,
            "total_distance": 0,
            "avg_heart_rate": 0,
        }
