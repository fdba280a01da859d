from .activity import ActivityRepository
from .location import LocationRepository
from .app_usage import AppUsageRepository
from .narrative import NarrativeRepository
from .call_log import CallLogRepository

__all__ = [
    "ActivityRepository",
    "LocationRepository",
    "AppUsageRepository",
    "NarrativeRepository",
    "CallLogRepository",
]
