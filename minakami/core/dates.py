"""
Date helpers shared by the repositories.

Two storage representations coexist:
  - activities, locations, call_logs  -> epoch milliseconds (INTEGER)
  - app_usage, summaries, notes       -> local calendar day "YYYY-MM-DD"

Naive datetimes and bare dates are interpreted in local time, which is also
how a "day" is defined: [00:00:00, 23:59:59] of the local calendar date.
"""
from __future__ import annotations

import time as _time
from datetime import date, datetime, time, timedelta
from typing import Union

DateLike = Union[date, datetime, str, int, float]

_DAY_START = time(0, 0, 0)
_DAY_END = time(23, 59, 59)


def now_ms() -> int:
    return int(_time.time() * 1000)


def to_datetime(value: DateLike) -> datetime:
    """Coerce a DateLike to a datetime (naive values are local time)."""
    if isinstance(value, bool):
        raise TypeError(f"Unsupported date value: {value!r}")
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, _DAY_START)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000)
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat only accepts a trailing Z from 3.11 on
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise TypeError(f"Unsupported date value: {value!r}")


def to_epoch_ms(value: DateLike) -> int:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    return int(to_datetime(value).timestamp() * 1000)


def to_local_date(value: DateLike) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    dt = to_datetime(value)
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.date()


def format_day(value: DateLike) -> str:
    """Canonical YYYY-MM-DD string for the local calendar day of `value`."""
    return to_local_date(value).isoformat()


def day_bounds(value: DateLike) -> tuple[int, int]:
    """Epoch-ms bounds of the local day: 00:00:00 and 23:59:59 inclusive."""
    day = to_local_date(value)
    start = datetime.combine(day, _DAY_START)
    end = datetime.combine(day, _DAY_END)
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


def shift_days(value: DateLike, days: int) -> date:
    return to_local_date(value) + timedelta(days=days)
