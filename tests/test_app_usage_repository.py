"""
Tests for AppUsageRepository: per-day keys, aggregates, trends.
"""
from datetime import datetime

import pytest
import pytest_asyncio

from minakami.repositories import AppUsageRepository


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


@pytest_asyncio.fixture()
async def repo(schema_ready):
    return AppUsageRepository(schema_ready)


async def _use(repo, app, duration, day="2024-03-10", category=None, **extra):
    fields = {
        "app_name": app,
        "package_name": f"com.example.{app.lower()}",
        "category": category,
        "duration": duration,
        "timestamp": _ms(2024, 3, 10, 12),
        "session_date": day,
    }
    fields.update(extra)
    return await repo.add_app_usage(fields)


@pytest.mark.asyncio
class TestAdd:
    async def test_session_date_derived_from_timestamp(self, repo):
        result = await repo.add_app_usage(
            {"app_name": "Maps", "duration": 60_000, "timestamp": _ms(2024, 3, 10, 23, 30)}
        )
        rows = await repo.get_app_usage_for_date("2024-03-10")
        assert [r["id"] for r in rows] == [result.insert_id]
        assert rows[0]["source"] == "manual"

    async def test_explicit_source_kept(self, repo):
        await _use(repo, "Chat", 1000, source="android_usage_stats")
        [row] = await repo.get_app_usage_for_date("2024-03-10")
        assert row["source"] == "android_usage_stats"


@pytest.mark.asyncio
class TestQueries:
    async def test_day_ordered_by_duration(self, repo):
        await _use(repo, "Short", 100)
        await _use(repo, "Long", 900)
        await _use(repo, "Other", 500, day="2024-03-11")
        rows = await repo.get_app_usage_for_date("2024-03-10")
        assert [r["app_name"] for r in rows] == ["Long", "Short"]

    async def test_range(self, repo):
        await _use(repo, "A", 100, day="2024-03-09")
        await _use(repo, "B", 100, day="2024-03-10")
        await _use(repo, "C", 100, day="2024-03-12")
        rows = await repo.get_app_usage_for_date_range("2024-03-09", "2024-03-10")
        assert [r["app_name"] for r in rows] == ["B", "A"]

    async def test_top_apps_grouped(self, repo):
        await _use(repo, "Chat", 100)
        await _use(repo, "Chat", 300)
        await _use(repo, "Maps", 250)
        top = await repo.get_top_apps_for_date("2024-03-10", limit=1)
        assert top == [{
            "app_name": "Chat",
            "package_name": "com.example.chat",
            "category": None,
            "total_duration": 400,
            "session_count": 2,
        }]


@pytest.mark.asyncio
class TestStats:
    async def test_empty_day(self, repo):
        stats = await repo.get_app_usage_stats("2024-03-10")
        assert stats == {
            "unique_apps": 0,
            "total_screen_time": 0,
            "total_sessions": 0,
            "avg_session_duration": 0,
            "category_breakdown": [],
        }

    async def test_stats_with_categories(self, repo):
        await _use(repo, "Chat", 100, category="social")
        await _use(repo, "Feed", 300, category="social")
        await _use(repo, "Docs", 200, category="productivity")
        await _use(repo, "Misc", 400)
        stats = await repo.get_app_usage_stats("2024-03-10")
        assert stats["unique_apps"] == 4
        assert stats["total_screen_time"] == 1000
        assert stats["total_sessions"] == 4
        assert stats["avg_session_duration"] == pytest.approx(250.0)
        assert [c["category"] for c in stats["category_breakdown"]] == ["social", "productivity"]
        assert stats["category_breakdown"][0]["total_duration"] == 400

    async def test_weekly_window(self, repo):
        await _use(repo, "A", 100, day="2024-03-04")
        await _use(repo, "A", 200, day="2024-03-10")
        await _use(repo, "B", 50, day="2024-03-10")
        await _use(repo, "A", 999, day="2024-03-11")
        week = await repo.get_weekly_usage_stats("2024-03-04")
        assert [d["session_date"] for d in week] == ["2024-03-04", "2024-03-10"]
        assert week[1]["daily_total"] == 250
        assert week[1]["unique_apps"] == 2

    async def test_trends(self, repo):
        await _use(repo, "Chat", 100, day="2024-03-01")
        await _use(repo, "Chat", 100, day="2024-03-08")
        await _use(repo, "Chat", 50, day="2024-03-10")
        await _use(repo, "Chat", 70, day="2024-03-10")
        trend = await repo.get_app_trends("Chat", days=7, until="2024-03-10")
        assert trend == [
            {"session_date": "2024-03-08", "total_duration": 100, "session_count": 1},
            {"session_date": "2024-03-10", "total_duration": 120, "session_count": 2},
        ]


@pytest.mark.asyncio
class TestDelete:
    async def test_delete_one_and_day(self, repo):
        first = await _use(repo, "A", 100)
        await _use(repo, "B", 100)
        await _use(repo, "C", 100, day="2024-03-11")

        await repo.delete_app_usage(first.insert_id)
        assert len(await repo.get_app_usage_for_date("2024-03-10")) == 1

        result = await repo.delete_app_usage_for_date("2024-03-10")
        assert result.rows_affected == 1
        assert await repo.get_app_usage_for_date("2024-03-10") == []
        assert len(await repo.get_app_usage_for_date("2024-03-11")) == 1
