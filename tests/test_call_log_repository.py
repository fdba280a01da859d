"""
Tests for CallLogRepository: analysis flag, per-day stats, contacts.
"""
from datetime import datetime

import pytest
import pytest_asyncio

from minakami.models import CallType
from minakami.repositories import CallLogRepository


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


@pytest_asyncio.fixture()
async def repo(schema_ready):
    return CallLogRepository(schema_ready)


async def _call(repo, contact, call_type="outgoing", duration=60, when=None, **extra):
    fields = {
        "phone_number": "+33100000000",
        "contact_name": contact,
        "call_type": call_type,
        "call_date": when or _ms(2024, 3, 10, 10),
        "duration": duration,
    }
    fields.update(extra)
    return await repo.add_call_log(fields)


@pytest.mark.asyncio
class TestAnalysisFlag:
    async def test_new_rows_are_unanalyzed(self, repo):
        result = await _call(repo, "Ana")
        row = await repo.get_call_log_by_id(result.insert_id)
        assert row["is_analyzed"] is False

    async def test_mark_analyzed(self, repo):
        first = await _call(repo, "Ana")
        second = await _call(repo, "Ben")
        await repo.mark_call_log_as_analyzed(first.insert_id)

        assert (await repo.get_call_log_by_id(first.insert_id))["is_analyzed"] is True
        pending = await repo.get_unanalyzed_call_logs()
        assert [r["id"] for r in pending] == [second.insert_id]


@pytest.mark.asyncio
class TestQueries:
    async def test_day_bounds(self, repo):
        await _call(repo, "late", when=_ms(2024, 3, 10, 23, 59, 59))
        await _call(repo, "next", when=_ms(2024, 3, 11, 0, 0, 0))
        rows = await repo.get_call_logs_for_date("2024-03-10")
        assert [r["contact_name"] for r in rows] == ["late"]

    async def test_type_accepts_enum(self, repo):
        await _call(repo, "Ana", call_type=CallType.missed)
        await _call(repo, "Ben", call_type="incoming")
        rows = await repo.get_call_logs_by_type(CallType.missed)
        assert [r["contact_name"] for r in rows] == ["Ana"]
        assert rows[0]["call_type"] == "missed"

    async def test_by_contact_and_recent(self, repo):
        await _call(repo, "Ana", when=_ms(2024, 3, 10, 9))
        await _call(repo, "Ana", when=_ms(2024, 3, 10, 11))
        await _call(repo, "Ben", when=_ms(2024, 3, 10, 10))
        rows = await repo.get_call_logs_by_contact("Ana")
        assert [r["call_date"] for r in rows] == [_ms(2024, 3, 10, 11), _ms(2024, 3, 10, 9)]
        recent = await repo.get_recent_call_logs(limit=2)
        assert [r["contact_name"] for r in recent] == ["Ana", "Ben"]

    async def test_update_contact_and_delete(self, repo):
        result = await _call(repo, None)
        await repo.update_call_log_contact(result.insert_id, "Unknown caller")
        assert (await repo.get_call_log_by_id(result.insert_id))["contact_name"] == "Unknown caller"
        await repo.delete_call_log(result.insert_id)
        assert await repo.get_call_log_by_id(result.insert_id) is None


@pytest.mark.asyncio
class TestStats:
    async def test_empty_day(self, repo):
        stats = await repo.get_call_stats("2024-03-10")
        assert stats == {
            "total_calls": 0,
            "outgoing_calls": 0,
            "incoming_calls": 0,
            "missed_calls": 0,
            "total_talk_time": 0,
            "avg_call_duration": 0,
            "unique_contacts": 0,
            "most_called_contact": "None",
            "most_called_count": 0,
        }

    async def test_day_stats(self, repo):
        await _call(repo, "Ana", "outgoing", 120)
        await _call(repo, "Ana", "incoming", 60)
        await _call(repo, "Ben", "missed", 0)
        await _call(repo, "Ben", "outgoing", 30, when=_ms(2024, 3, 12, 10))
        stats = await repo.get_call_stats("2024-03-10")
        assert stats["total_calls"] == 3
        assert stats["outgoing_calls"] == 1
        assert stats["incoming_calls"] == 1
        assert stats["missed_calls"] == 1
        assert stats["total_talk_time"] == 180
        assert stats["avg_call_duration"] == pytest.approx(60.0)
        assert stats["unique_contacts"] == 2
        assert stats["most_called_contact"] == "Ana"
        assert stats["most_called_count"] == 2

    async def test_top_contacts(self, repo):
        await _call(repo, "Ana", "outgoing", 10)
        await _call(repo, "Ana", "missed", 0)
        await _call(repo, "Ben", "incoming", 50)
        await _call(repo, None, "incoming", 5)
        top = await repo.get_top_contacts(_ms(2024, 3, 10), _ms(2024, 3, 10, 23, 59, 59))
        assert [c["contact_name"] for c in top] == ["Ana", "Ben"]
        assert top[0]["call_count"] == 2
        assert top[0]["outgoing_count"] == 1
        assert top[0]["missed_count"] == 1
        assert top[1]["total_duration"] == 50
