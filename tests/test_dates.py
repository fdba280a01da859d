"""
Unit tests for the date helpers (local-time day semantics).
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from minakami.core.dates import day_bounds, format_day, shift_days, to_epoch_ms, to_local_date


class TestDayBounds:
    def test_bounds_cover_the_local_day(self):
        start, end = day_bounds("2024-03-10")
        assert start == int(datetime(2024, 3, 10, 0, 0, 0).timestamp() * 1000)
        assert end == int(datetime(2024, 3, 10, 23, 59, 59).timestamp() * 1000)

    def test_any_value_inside_the_day_gives_the_same_bounds(self):
        noon = int(datetime(2024, 3, 10, 12).timestamp() * 1000)
        assert day_bounds(noon) == day_bounds(date(2024, 3, 10))
        assert day_bounds(datetime(2024, 3, 10, 23, 0)) == day_bounds("2024-03-10")


class TestConversions:
    def test_int_is_already_ms(self):
        assert to_epoch_ms(1_700_000_000_000) == 1_700_000_000_000

    def test_aware_datetime(self):
        dt = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert to_epoch_ms(dt) == 1_704_067_200_000

    def test_format_day(self):
        assert format_day(date(2024, 3, 10)) == "2024-03-10"
        assert format_day("2024-03-10T18:30:00") == "2024-03-10"
        assert format_day(datetime(2024, 3, 10, 18, 30)) == "2024-03-10"

    def test_aware_datetime_uses_local_calendar_day(self):
        dt = datetime(2024, 3, 10, 12, tzinfo=timezone.utc)
        assert to_local_date(dt) == dt.astimezone().date()

    def test_shift_days(self):
        assert shift_days("2024-02-28", 2) == date(2024, 3, 1)
        assert shift_days(date(2024, 3, 10), -7) == date(2024, 3, 10) - timedelta(days=7)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            format_day(True)

    def test_garbage_string_rejected(self):
        with pytest.raises(ValueError):
            format_day("yesterday")

    def test_trailing_z_is_utc(self):
        assert to_epoch_ms("2024-01-01T00:00:00Z") == 1_704_067_200_000
        assert to_epoch_ms(" 2024-01-01T00:00:00.500Z ") == 1_704_067_200_500
