"""
Call log repository: the `call_logs` table.

call_date is epoch ms. is_analyzed is stored as 0/1 and returned as bool;
it flips to True once the analysis pipeline has consumed the row.
"""
from __future__ import annotations

from typing import Optional

from minakami.core.dates import DateLike, day_bounds, to_epoch_ms
from minakami.db.connection import ExecuteResult
from minakami.repositories.base import BaseRepository, Fields, as_dict


def _decode(row: Optional[dict]) -> Optional[dict]:
    if row is not None and "is_analyzed" in row:
        row["is_analyzed"] = bool(row["is_analyzed"])
    return row


class CallLogRepository(BaseRepository):
    table = "call_logs"

    async def add_call_log(self, call_log: Fields) -> ExecuteResult:
        c = as_dict(call_log)
        call_type = c.get("call_type")
        with self._tracked("addCallLog"):
            return await self.connection.execute(
                """
                INSERT INTO call_logs (
                    phone_number, contact_name, call_type, call_date, duration, is_analyzed
                ) VALUES (
                    :phone_number, :contact_name, :call_type, :call_date, :duration, :is_analyzed
                )
                """,
                {
                    "phone_number": c.get("phone_number"),
                    "contact_name": c.get("contact_name"),
                    "call_type": getattr(call_type, "value", call_type),
                    "call_date": c.get("call_date"),
                    "duration": c.get("duration"),
                    "is_analyzed": 1 if c.get("is_analyzed") else 0,
                },
            )

    async def get_call_log_by_id(self, call_log_id: int) -> Optional[dict]:
        with self._tracked("getCallLogById"):
            row = await self.connection.query_one(
                "SELECT * FROM call_logs WHERE id = :id", {"id": call_log_id}
            )
        return _decode(row)

    async def get_call_logs_for_date_range(self, start: DateLike, end: DateLike) -> list[dict]:
        with self._tracked("getCallLogsForDateRange"):
            rows = await self.connection.query_all(
                """
                SELECT * FROM call_logs
                WHERE call_date >= :start AND call_date <= :end
                ORDER BY call_date DESC
                """,
                {"start": to_epoch_ms(start), "end": to_epoch_ms(end)},
            )
        return [_decode(r) for r in rows]

    async def get_call_logs_for_date(self, day: DateLike) -> list[dict]:
        start, end = day_bounds(day)
        return await self.get_call_logs_for_date_range(start, end)

    async def get_recent_call_logs(self, limit: int = 20) -> list[dict]:
        with self._tracked("getRecentCallLogs"):
            rows = await self.connection.query_all(
                "SELECT * FROM call_logs ORDER BY call_date DESC LIMIT :limit",
                {"limit": limit},
            )
        return [_decode(r) for r in rows]

    async def get_call_logs_by_type(self, call_type: str, limit: int = 50) -> list[dict]:
        with self._tracked("getCallLogsByType"):
            rows = await self.connection.query_all(
                """
                SELECT * FROM call_logs
                WHERE call_type = :call_type
                ORDER BY call_date DESC
                LIMIT :limit
                """,
                {"call_type": getattr(call_type, "value", call_type), "limit": limit},
            )
        return [_decode(r) for r in rows]

    async def get_call_logs_by_contact(self, contact_name: str, limit: int = 50) -> list[dict]:
        with self._tracked("getCallLogsByContact"):
            rows = await self.connection.query_all(
                """
                SELECT * FROM call_logs
                WHERE contact_name = :contact_name
                ORDER BY call_date DESC
                LIMIT :limit
                """,
                {"contact_name": contact_name, "limit": limit},
            )
        return [_decode(r) for r in rows]

    async def mark_call_log_as_analyzed(self, call_log_id: int) -> ExecuteResult:
        with self._tracked("markCallLogAsAnalyzed"):
            return await self.connection.execute(
                "UPDATE call_logs SET is_analyzed = 1 WHERE id = :id", {"id": call_log_id}
            )

    async def get_unanalyzed_call_logs(self, limit: int = 100) -> list[dict]:
        with self._tracked("getUnanalyzedCallLogs"):
            rows = await self.connection.query_all(
                """
                SELECT * FROM call_logs
                WHERE is_analyzed = 0
                ORDER BY call_date DESC
                LIMIT :limit
                """,
                {"limit": limit},
            )
        return [_decode(r) for r in rows]

    async def get_call_stats(self, day: DateLike) -> dict:
        start, end = day_bounds(day)
        params = {"start": start, "end": end}
        with self._tracked("getCallStats"):
            stats = await self.connection.query_one(
                """
                SELECT
                    COUNT(*) AS total_calls,
                    COUNT(CASE WHEN call_type = 'outgoing' THEN 1 END) AS outgoing_calls,
                    COUNT(CASE WHEN call_type = 'incoming' THEN 1 END) AS incoming_calls,
                    COUNT(CASE WHEN call_type = 'missed' THEN 1 END) AS missed_calls,
                    COALESCE(SUM(duration), 0) AS total_talk_time,
                    COALESCE(AVG(duration), 0) AS avg_call_duration,
                    COUNT(DISTINCT contact_name) AS unique_contacts
                FROM call_logs
                WHERE call_date >= :start AND call_date <= :end
                """,
                params,
            )
            most_called = await self.connection.query_one(
                """
                SELECT contact_name, COUNT(*) AS call_count
                FROM call_logs
                WHERE call_date >= :start AND call_date <= :end
                  AND contact_name IS NOT NULL
                GROUP BY contact_name
                ORDER BY call_count DESC
                LIMIT 1
                """,
                params,
            )

        return {
            "total_calls": 0,
            "outgoing_calls": 0,
            "incoming_calls": 0,
            "missed_calls": 0,
            "total_talk_time": 0,
            "avg_call_duration": 0,
            "unique_contacts": 0,
            **(stats or {}),
            "most_called_contact": (most_called or {}).get("contact_name") or "None",
            "most_called_count": (most_called or {}).get("call_count") or 0,
        }

    async def get_top_contacts(self, start: DateLike, end: DateLike, limit: int = 10) -> list[dict]:
        with self._tracked("getTopContacts"):
            return await self.connection.query_all(
                """
                SELECT
                    contact_name,
                    COUNT(*) AS call_count,
                    SUM(duration) AS total_duration,
                    MAX(call_date) AS last_call_date,
                    COUNT(CASE WHEN call_type = 'outgoing' THEN 1 END) AS outgoing_count,
                    COUNT(CASE WHEN call_type = 'incoming' THEN 1 END) AS incoming_count,
                    COUNT(CASE WHEN call_type = 'missed' THEN 1 END) AS missed_count
                FROM call_logs
                WHERE call_date >= :start AND call_date <= :end
                  AND contact_name IS NOT NULL
                GROUP BY contact_name
                ORDER BY call_count DESC
                LIMIT :limit
                """,
                {"start": to_epoch_ms(start), "end": to_epoch_ms(end), "limit": limit},
            )

    async def delete_call_log(self, call_log_id: int) -> ExecuteResult:
        with self._tracked("deleteCallLog"):
            return await self.connection.execute(
                "DELETE FROM call_logs WHERE id = :id", {"id": call_log_id}
            )

    async def update_call_log_contact(
        self, call_log_id: int, contact_name: Optional[str]
    ) -> ExecuteResult:
        with self._tracked("updateCallLogContact"):
            return await self.connection.execute(
                "UPDATE call_logs SET contact_name = :contact_name WHERE id = :id",
                {"contact_name": contact_name, "id": call_log_id},
            )
