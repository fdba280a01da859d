"""
Tests for the day digest read by the narrative generator.
"""
from datetime import datetime

import pytest

from minakami.services.digest import build_day_digest, save_narrative


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


@pytest.mark.asyncio
class TestDayDigest:
    async def test_empty_day(self, db):
        digest = await build_day_digest(db, "2024-03-10")
        assert digest["date"] == "2024-03-10"
        assert digest["activities"] == []
        assert digest["activity_stats"]["total_activities"] == 0
        assert digest["call_stats"]["most_called_contact"] == "None"
        assert digest["location_stats"]["most_visited_location"] == "None"
        assert digest["app_usage_stats"]["category_breakdown"] == []
        assert digest["narrative"] is None
        assert digest["daily_summary"] is None

    async def test_collects_the_day(self, db):
        await db.add_activity({"type": "walk", "start_time": _ms(2024, 3, 10, 9)})
        await db.add_activity({"type": "walk", "start_time": _ms(2024, 3, 11, 9)})
        await db.add_call_log({
            "phone_number": "1", "contact_name": "Ana", "call_type": "incoming",
            "call_date": _ms(2024, 3, 10, 13), "duration": 42,
        })
        await db.add_app_usage({"app_name": "Maps", "duration": 100, "session_date": "2024-03-10"})
        await db.add_user_note("2024-03-10", "Good day")
        await save_narrative(db, "2024-03-10", "  A calm walk.  ")

        digest = await build_day_digest(db, "2024-03-10")
        assert len(digest["activities"]) == 1
        assert digest["call_stats"]["total_calls"] == 1
        assert digest["top_contacts"][0]["contact_name"] == "Ana"
        assert digest["top_apps"][0]["app_name"] == "Maps"
        assert [n["note_text"] for n in digest["notes"]] == ["Good day"]
        assert digest["narrative"]["summary"] == "A calm walk."
