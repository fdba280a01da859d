"""
Narrative repository: narrative_summaries, daily_summaries, user_daily_notes.

All three tables are keyed by a YYYY-MM-DD `date` string.

Both summary tables upsert with INSERT OR REPLACE on the unique date: a
second write for a date replaces the whole row, so callers must pass the
full field set every time.
"""
from __future__ import annotations

from typing import Optional

from minakami.core.dates import DateLike, format_day, now_ms
from minakami.db.connection import ExecuteResult
from minakami.repositories.base import BaseRepository, Fields, as_dict, jdump, jload

_DAILY_SUMMARY_SELECT = """
    SELECT ds.*, l.name AS location_name
    FROM daily_summaries ds
    LEFT JOIN locations l ON ds.most_visited_location = l.id
"""


def _decode_summary(row: Optional[dict]) -> Optional[dict]:
    if row is not None:
        row["summary_data"] = jload(row.get("summary_data"))
    return row


class NarrativeRepository(BaseRepository):
    table = "user_daily_notes"

    # ------------------------------------------------------------------
    # Narrative summaries
    # ------------------------------------------------------------------

    async def add_narrative_summary(self, day: DateLike, summary: str) -> ExecuteResult:
        with self._tracked("addNarrativeSummary"):
            return await self.connection.execute(
                "INSERT OR REPLACE INTO narrative_summaries (date, summary) VALUES (:date, :summary)",
                {"date": format_day(day), "summary": summary},
            )

    async def get_narrative_summary(self, day: DateLike) -> Optional[dict]:
        with self._tracked("getNarrativeSummary"):
            return await self.connection.query_one(
                "SELECT * FROM narrative_summaries WHERE date = :date",
                {"date": format_day(day)},
            )

    async def get_recent_narrative_summaries(self, limit: int = 7) -> list[dict]:
        with self._tracked("getRecentNarrativeSummaries"):
            return await self.connection.query_all(
                "SELECT * FROM narrative_summaries ORDER BY date DESC LIMIT :limit",
                {"limit": limit},
            )

    async def get_narrative_summaries_for_date_range(
        self, start: DateLike, end: DateLike
    ) -> list[dict]:
        with self._tracked("getNarrativeSummariesForDateRange"):
            return await self.connection.query_all(
                """
                SELECT * FROM narrative_summaries
                WHERE date >= :start AND date <= :end
                ORDER BY date ASC
                """,
                {"start": format_day(start), "end": format_day(end)},
            )

    # ------------------------------------------------------------------
    # Daily summaries
    # ------------------------------------------------------------------

    async def add_daily_summary(self, day: DateLike, summary_data: Fields) -> ExecuteResult:
        s = as_dict(summary_data)
        with self._tracked("addDailySummary"):
            return await self.connection.execute(
                """
                INSERT OR REPLACE INTO daily_summaries (
                    date, morning_activity, afternoon_activity, evening_activity, night_activity,
                    total_steps, total_active_time, most_visited_location, most_called_contact,
                    summary_data
                ) VALUES (
                    :date, :morning_activity, :afternoon_activity, :evening_activity, :night_activity,
                    :total_steps, :total_active_time, :most_visited_location, :most_called_contact,
                    :summary_data
                )
                """,
                {
                    "date": format_day(day),
                    "morning_activity": s.get("morning_activity"),
                    "afternoon_activity": s.get("afternoon_activity"),
                    "evening_activity": s.get("evening_activity"),
                    "night_activity": s.get("night_activity"),
                    "total_steps": s.get("total_steps") or 0,
                    "total_active_time": s.get("total_active_time") or 0,
                    "most_visited_location": s.get("most_visited_location"),
                    "most_called_contact": s.get("most_called_contact"),
                    "summary_data": jdump(s.get("summary_data")),
                },
            )

    async def get_daily_summary(self, day: DateLike) -> Optional[dict]:
        with self._tracked("getDailySummary"):
            row = await self.connection.query_one(
                _DAILY_SUMMARY_SELECT + " WHERE ds.date = :date",
                {"date": format_day(day)},
            )
        return _decode_summary(row)

    async def get_recent_daily_summaries(self, limit: int = 7) -> list[dict]:
        with self._tracked("getRecentDailySummaries"):
            rows = await self.connection.query_all(
                _DAILY_SUMMARY_SELECT + " ORDER BY ds.date DESC LIMIT :limit",
                {"limit": limit},
            )
        return [_decode_summary(r) for r in rows]

    # ------------------------------------------------------------------
    # User notes
    # ------------------------------------------------------------------

    async def add_user_note(
        self, day: DateLike, note_text: str, timestamp: Optional[int] = None
    ) -> ExecuteResult:
        with self._tracked("addUserNote"):
            return await self.connection.execute(
                """
                INSERT INTO user_daily_notes (date, note_text, timestamp)
                VALUES (:date, :note_text, :timestamp)
                """,
                {
                    "date": format_day(day),
                    "note_text": note_text,
                    "timestamp": now_ms() if timestamp is None else timestamp,
                },
            )

    async def get_user_note_by_id(self, note_id: int) -> Optional[dict]:
        with self._tracked("getUserNoteById"):
            return await self.connection.query_one(
                "SELECT * FROM user_daily_notes WHERE id = :id", {"id": note_id}
            )

    async def get_user_notes_for_date(self, day: DateLike) -> list[dict]:
        with self._tracked("getUserNotesForDate"):
            return await self.connection.query_all(
                "SELECT * FROM user_daily_notes WHERE date = :date ORDER BY timestamp DESC",
                {"date": format_day(day)},
            )

    async def get_recent_user_notes(self, limit: int = 20) -> list[dict]:
        with self._tracked("getRecentUserNotes"):
            return await self.connection.query_all(
                "SELECT * FROM user_daily_notes ORDER BY timestamp DESC LIMIT :limit",
                {"limit": limit},
            )

    async def update_user_note(self, note_id: int, note_text: str) -> ExecuteResult:
        with self._tracked("updateUserNote"):
            return await self.connection.execute(
                """
                UPDATE user_daily_notes
                SET note_text = :note_text, updated_at = CURRENT_TIMESTAMP
                WHERE id = :id
                """,
                {"note_text": note_text, "id": note_id},
            )

    async def delete_user_note(self, note_id: int) -> ExecuteResult:
        with self._tracked("deleteUserNote"):
            return await self.connection.execute(
                "DELETE FROM user_daily_notes WHERE id = :id", {"id": note_id}
            )

    async def search_notes(self, search_term: str, limit: int = 50) -> list[dict]:
        with self._tracked("searchNotes"):
            return await self.connection.query_all(
                """
                SELECT * FROM user_daily_notes
                WHERE note_text LIKE :pattern
                ORDER BY timestamp DESC
                LIMIT :limit
                """,
                {"pattern": f"%{search_term}%", "limit": limit},
            )

    async def get_summary_stats(self, start: DateLike, end: DateLike) -> dict:
        params = {"start": format_day(start), "end": format_day(end)}
        counts = {}
        with self._tracked("getSummaryStats"):
            for key, table in (
                ("narrative_summaries", "narrative_summaries"),
                ("daily_summaries", "daily_summaries"),
                ("user_notes", "user_daily_notes"),
            ):
                row = await self.connection.query_one(
                    f"SELECT COUNT(*) AS count FROM {table} WHERE date >= :start AND date <= :end",
                    params,
                )
                counts[key] = (row or {}).get("count") or 0
        return counts
