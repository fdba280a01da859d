from .activity import Activity
from .location import Location
from .call_log import CallLog, CallType
from .app_usage import AppUsage, UsageSource
from .narrative_summary import NarrativeSummary
from .daily_summary import DailySummary
from .user_daily_note import UserDailyNote

__all__ = [
    "Activity",
    "Location",
    "CallLog",
    "CallType",
    "AppUsage",
    "UsageSource",
    "NarrativeSummary",
    "DailySummary",
    "UserDailyNote",
]
