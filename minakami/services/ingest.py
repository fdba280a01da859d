"""
Ingest service: turns collector payloads into rows.

Public API
----------
convert_strava_activity(payload)               → dict            (activity fields)
import_strava_activities(db, activities)       → StravaImportResult
record_location_sample(db, sample, radius_m)   → LocationResult
import_call_logs(db, items)                    → BatchResult
import_app_usage(db, items)                    → BatchResult

Strava de-duplication is check-then-insert on strava_id; there is no unique
constraint behind it, so concurrent imports of the same payload can race.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from minakami.core.dates import to_epoch_ms
from minakami.core.errors import InvalidPayloadError
from minakami.db.facade import DatabaseService
from minakami.repositories.base import Fields, as_dict

logger = logging.getLogger(__name__)

DEFAULT_VISIT_RADIUS_M = 100


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class StravaImportResult:
    total_fetched: int = 0
    new_activities: int = 0
    skipped: int = 0
    ids: list[int] = field(default_factory=list)


@dataclass
class LocationResult:
    location_id: int
    created: bool


@dataclass
class BatchResult:
    total: int = 0
    inserted: int = 0
    ids: list[int] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Strava
# ---------------------------------------------------------------------------

def _field_error(payload: Mapping[str, Any], field_name: str, exc: Exception) -> InvalidPayloadError:
    return InvalidPayloadError(
        f"Strava activity {payload.get('id')} has an invalid {field_name}: {exc}",
        field=field_name,
    )


def convert_strava_activity(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Map a Strava API activity object onto activity fields.

    elapsed_time is seconds on the Strava side and ms on ours.
    """
    if payload.get("id") is None:
        raise InvalidPayloadError("Strava activity has no id.", field="id")
    if not payload.get("start_date"):
        raise InvalidPayloadError(
            f"Strava activity {payload['id']} has no start_date.", field="start_date"
        )

    try:
        start_ms = to_epoch_ms(payload["start_date"])
    except (ValueError, TypeError, OverflowError, OSError) as exc:
        raise _field_error(payload, "start_date", exc) from exc
    try:
        elapsed_ms = int(payload.get("elapsed_time") or 0) * 1000
    except (ValueError, TypeError) as exc:
        raise _field_error(payload, "elapsed_time", exc) from exc

    return {
        "type": "exercise",
        "start_time": start_ms,
        "end_time": start_ms + elapsed_ms,
        "duration": elapsed_ms,
        "details": payload.get("name"),
        "source": "strava",
        "metadata": {
            "strava_id": payload["id"],
            "description": payload.get("description"),
            "gear_id": payload.get("gear_id"),
            "trainer": payload.get("trainer"),
            "commute": payload.get("commute"),
        },
        "calories": payload.get("calories"),
        "distance": payload.get("distance"),
        "sport_type": payload.get("sport_type") or payload.get("type"),
        "strava_id": str(payload["id"]),
        "heart_rate_avg": payload.get("average_heartrate"),
        "heart_rate_max": payload.get("max_heartrate"),
        "elevation_gain": payload.get("total_elevation_gain"),
    }


async def import_strava_activities(
    db: DatabaseService,
    activities: Iterable[Mapping[str, Any]],
) -> StravaImportResult:
    # Reject the whole batch before writing anything if one activity is malformed.
    converted = [convert_strava_activity(payload) for payload in activities]

    result = StravaImportResult(total_fetched=len(converted))
    for fields in converted:
        if await db.find_activity_by_strava_id(fields["strava_id"]) is not None:
            result.skipped += 1
            continue
        written = await db.add_activity(fields)
        result.new_activities += 1
        if written.insert_id is not None:
            result.ids.append(written.insert_id)

    logger.info(
        "Strava import: %d fetched, %d new, %d skipped",
        result.total_fetched, result.new_activities, result.skipped,
    )
    return result


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------

async def record_location_sample(
    db: DatabaseService,
    sample: Fields,
    radius_m: float = DEFAULT_VISIT_RADIUS_M,
) -> LocationResult:
    """Count a visit to the nearest known place within `radius_m`, or add a new place."""
    s = as_dict(sample)
    nearby = await db.find_nearby_location(s["latitude"], s["longitude"], radius_m)
    if nearby is not None:
        await db.update_location_visit(nearby["id"], s.get("timestamp"))
        if s.get("name") and not nearby.get("name"):
            await db.update_location_name(nearby["id"], s["name"])
        return LocationResult(location_id=nearby["id"], created=False)

    written = await db.add_location(s)
    return LocationResult(location_id=written.insert_id, created=True)


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------

async def import_call_logs(db: DatabaseService, items: Iterable[Fields]) -> BatchResult:
    result = BatchResult()
    for item in items:
        result.total += 1
        written = await db.add_call_log(item)
        result.inserted += 1
        if written.insert_id is not None:
            result.ids.append(written.insert_id)
    return result


async def import_app_usage(db: DatabaseService, items: Iterable[Fields]) -> BatchResult:
    result = BatchResult()
    for item in items:
        result.total += 1
        written = await db.add_app_usage(item)
        result.inserted += 1
        if written.insert_id is not None:
            result.ids.append(written.insert_id)
    return result
