"""
Tests for NarrativeRepository: per-day upserts, JSON summaries, notes.
"""
from datetime import date

import pytest
import pytest_asyncio

from minakami.repositories import LocationRepository, NarrativeRepository


@pytest_asyncio.fixture()
async def repo(schema_ready):
    return NarrativeRepository(schema_ready)


@pytest.mark.asyncio
class TestNarratives:
    async def test_upsert_replaces(self, repo, schema_ready):
        await repo.add_narrative_summary("2024-03-10", "first draft")
        await repo.add_narrative_summary(date(2024, 3, 10), "final")
        row = await repo.get_narrative_summary("2024-03-10")
        assert row["summary"] == "final"
        count = await schema_ready.query_one("SELECT COUNT(*) AS n FROM narrative_summaries")
        assert count["n"] == 1

    async def test_missing_day(self, repo):
        assert await repo.get_narrative_summary("2024-03-10") is None

    async def test_recent_and_range(self, repo):
        for day in ("2024-03-08", "2024-03-09", "2024-03-10", "2024-03-11"):
            await repo.add_narrative_summary(day, f"story {day}")
        recent = await repo.get_recent_narrative_summaries(limit=2)
        assert [r["date"] for r in recent] == ["2024-03-11", "2024-03-10"]
        ranged = await repo.get_narrative_summaries_for_date_range("2024-03-09", "2024-03-10")
        assert [r["date"] for r in ranged] == ["2024-03-09", "2024-03-10"]


@pytest.mark.asyncio
class TestDailySummaries:
    async def test_summary_data_round_trip_and_location_name(self, repo, schema_ready):
        place = await LocationRepository(schema_ready).add_location(
            {"latitude": 1.0, "longitude": 2.0, "timestamp": 1, "name": "Gym"}
        )
        await repo.add_daily_summary("2024-03-10", {
            "morning_activity": "run",
            "total_steps": 12000,
            "most_visited_location": place.insert_id,
            "summary_data": {"mood": "good", "tags": ["outdoor"]},
        })
        row = await repo.get_daily_summary("2024-03-10")
        assert row["summary_data"] == {"mood": "good", "tags": ["outdoor"]}
        assert row["location_name"] == "Gym"
        assert row["total_steps"] == 12000
        assert row["total_active_time"] == 0

    async def test_upsert_replaces_whole_row(self, repo):
        await repo.add_daily_summary("2024-03-10", {"morning_activity": "run", "total_steps": 5})
        await repo.add_daily_summary("2024-03-10", {"evening_activity": "read"})
        row = await repo.get_daily_summary("2024-03-10")
        assert row["morning_activity"] is None
        assert row["evening_activity"] == "read"
        assert row["total_steps"] == 0
        assert row["summary_data"] == {}
        assert row["location_name"] is None

    async def test_recent(self, repo):
        await repo.add_daily_summary("2024-03-09", {})
        await repo.add_daily_summary("2024-03-10", {})
        rows = await repo.get_recent_daily_summaries(limit=7)
        assert [r["date"] for r in rows] == ["2024-03-10", "2024-03-09"]
        assert all(r["summary_data"] == {} for r in rows)


@pytest.mark.asyncio
class TestNotes:
    async def test_add_and_list_for_day(self, repo):
        await repo.add_user_note("2024-03-10", "older", timestamp=1000)
        await repo.add_user_note("2024-03-10", "newer", timestamp=2000)
        await repo.add_user_note("2024-03-11", "other day", timestamp=3000)
        rows = await repo.get_user_notes_for_date("2024-03-10")
        assert [r["note_text"] for r in rows] == ["newer", "older"]

    async def test_update_and_delete(self, repo):
        result = await repo.add_user_note("2024-03-10", "draft")
        updated = await repo.update_user_note(result.insert_id, "edited")
        assert updated.rows_affected == 1
        row = await repo.get_user_note_by_id(result.insert_id)
        assert row["note_text"] == "edited"
        assert row["updated_at"] is not None

        await repo.delete_user_note(result.insert_id)
        assert await repo.get_user_note_by_id(result.insert_id) is None

    async def test_update_missing_note(self, repo):
        result = await repo.update_user_note(404, "nothing")
        assert result.rows_affected == 0

    async def test_search_and_recent(self, repo):
        await repo.add_user_note("2024-03-10", "Lunch with Ana", timestamp=1)
        await repo.add_user_note("2024-03-10", "Long run by the river", timestamp=2)
        await repo.add_user_note("2024-03-11", "Dinner with ana and Ben", timestamp=3)
        found = await repo.search_notes("ana")
        assert [r["note_text"] for r in found] == ["Dinner with ana and Ben", "Lunch with Ana"]
        assert len(await repo.get_recent_user_notes(limit=2)) == 2

    async def test_summary_stats(self, repo):
        await repo.add_narrative_summary("2024-03-10", "n")
        await repo.add_daily_summary("2024-03-10", {})
        await repo.add_daily_summary("2024-03-12", {})
        await repo.add_user_note("2024-03-10", "a")
        await repo.add_user_note("2024-03-11", "b")
        stats = await repo.get_summary_stats("2024-03-10", "2024-03-11")
        assert stats == {"narrative_summaries": 1, "daily_summaries": 1, "user_notes": 2}
