"""
App usage repository: the `app_usage` table.

Queries are keyed on session_date (YYYY-MM-DD), not on the ms timestamp.
"""
from __future__ import annotations

from typing import Optional

from minakami.core.dates import DateLike, format_day, now_ms, shift_days
from minakami.db.connection import ExecuteResult
from minakami.repositories.base import BaseRepository, Fields, as_dict


class AppUsageRepository(BaseRepository):
    table = "app_usage"

    async def add_app_usage(self, usage: Fields) -> ExecuteResult:
        u = as_dict(usage)
        timestamp = u.get("timestamp")
        if timestamp is None:
            timestamp = now_ms()
        session_date = u.get("session_date")
        session_date = format_day(session_date) if session_date else format_day(timestamp)

        with self._tracked("addAppUsage"):
            return await self.connection.execute(
                """
                INSERT INTO app_usage (
                    app_name, package_name, category, duration, timestamp, session_date, source
                ) VALUES (
                    :app_name, :package_name, :category, :duration, :timestamp, :session_date, :source
                )
                """,
                {
                    "app_name": u.get("app_name"),
                    "package_name": u.get("package_name"),
                    "category": u.get("category"),
                    "duration": u.get("duration"),
                    "timestamp": timestamp,
                    "session_date": session_date,
                    "source": u.get("source") or "manual",
                },
            )

    async def get_app_usage_for_date(self, day: DateLike) -> list[dict]:
        with self._tracked("getAppUsageForDate"):
            return await self.connection.query_all(
                "SELECT * FROM app_usage WHERE session_date = :day ORDER BY duration DESC",
                {"day": format_day(day)},
            )

    async def get_app_usage_for_date_range(self, start: DateLike, end: DateLike) -> list[dict]:
        with self._tracked("getAppUsageForDateRange"):
            return await self.connection.query_all(
                """
                SELECT * FROM app_usage
                WHERE session_date >= :start AND session_date <= :end
                ORDER BY session_date DESC, duration DESC
                """,
                {"start": format_day(start), "end": format_day(end)},
            )

    async def get_top_apps_for_date(self, day: DateLike, limit: int = 10) -> list[dict]:
        with self._tracked("getTopAppsForDate"):
            return await self.connection.query_all(
                """
                SELECT
                    app_name,
                    package_name,
                    category,
                    SUM(duration) AS total_duration,
                    COUNT(*) AS session_count
                FROM app_usage
                WHERE session_date = :day
                GROUP BY app_name, package_name
                ORDER BY total_duration DESC
                LIMIT :limit
                """,
                {"day": format_day(day), "limit": limit},
            )

    async def get_app_usage_stats(self, day: DateLike) -> dict:
        params = {"day": format_day(day)}
        with self._tracked("getAppUsageStats"):
            stats = await self.connection.query_one(
                """
                SELECT
                    COUNT(DISTINCT app_name) AS unique_apps,
                    COALESCE(SUM(duration), 0) AS total_screen_time,
                    COUNT(*) AS total_sessions,
                    COALESCE(AVG(duration), 0) AS avg_session_duration
                FROM app_usage
                WHERE session_date = :day
                """,
                params,
            )
            categories = await self.connection.query_all(
                """
                SELECT
                    category,
                    SUM(duration) AS total_duration,
                    COUNT(*) AS session_count
                FROM app_usage
                WHERE session_date = :day AND category IS NOT NULL
                GROUP BY category
                ORDER BY total_duration DESC
                """,
                params,
            )

        return {
            "unique_apps": 0,
            "total_screen_time": 0,
            "total_sessions": 0,
            "avg_session_duration": 0,
            **(stats or {}),
            "category_breakdown": categories,
        }

    async def get_app_trends(
        self, app_name: str, days: int = 7, until: Optional[DateLike] = None
    ) -> list[dict]:
        """Per-day totals for one app over the last `days` days (until defaults to today)."""
        end_day = shift_days(until if until is not None else now_ms(), 0)
        start_day = shift_days(end_day, -days)
        with self._tracked("getAppTrends"):
            return await self.connection.query_all(
                """
                SELECT
                    session_date,
                    SUM(duration) AS total_duration,
                    COUNT(*) AS session_count
                FROM app_usage
                WHERE app_name = :app_name
                  AND session_date >= :start AND session_date <= :end
                GROUP BY session_date
                ORDER BY session_date ASC
                """,
                {"app_name": app_name, "start": start_day.isoformat(), "end": end_day.isoformat()},
            )

    async def delete_app_usage(self, usage_id: int) -> ExecuteResult:
        with self._tracked("deleteAppUsage"):
            return await self.connection.execute(
                "DELETE FROM app_usage WHERE id = :id", {"id": usage_id}
            )

    async def delete_app_usage_for_date(self, day: DateLike) -> ExecuteResult:
        with self._tracked("deleteAppUsageForDate"):
            return await self.connection.execute(
                "DELETE FROM app_usage WHERE session_date = :day", {"day": format_day(day)}
            )

    async def get_weekly_usage_stats(self, start: DateLike) -> list[dict]:
        """Per-day totals for the 7 days starting at `start`."""
        with self._tracked("getWeeklyUsageStats"):
            return await self.connection.query_all(
                """
                SELECT
                    session_date,
                    SUM(duration) AS daily_total,
                    COUNT(DISTINCT app_name) AS unique_apps,
                    COUNT(*) AS session_count
                FROM app_usage
                WHERE session_date >= :start AND session_date <= :end
                GROUP BY session_date
                ORDER BY session_date ASC
                """,
                {"start": format_day(start), "end": shift_days(start, 6).isoformat()},
            )
