from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Optional, Union

from pydantic import BaseModel

from minakami.core.errors import QueryError
from minakami.db.connection import DatabaseConnection
from minakami.services.performance import NullPerformanceTracker, PerformanceTracker

logger = logging.getLogger(__name__)

Fields = Union[Mapping[str, Any], BaseModel]


def as_dict(fields: Fields, exclude_unset: bool = False) -> dict[str, Any]:
    """Accept either a plain mapping or a pydantic schema from the API layer."""
    if isinstance(fields, BaseModel):
        return fields.model_dump(exclude_unset=exclude_unset)
    return dict(fields)


def jdump(value: Any) -> str:
    """Serialise a JSON column. Absent or empty values become '{}'."""
    return json.dumps(value or {}, ensure_ascii=False, default=str)


def jload(raw: Optional[str]) -> dict[str, Any]:
    """Read a JSON object column. Anything that is not an object reads as {}."""
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (ValueError, TypeError):
        logger.warning("Unreadable JSON column value %r, returning {}", raw[:80])
        return {}
    if not isinstance(value, dict):
        logger.warning("JSON column value %r is not an object, returning {}", raw[:80])
        return {}
    return value


class BaseRepository:
    """Shared plumbing: a borrowed connection plus a performance tracker."""

    table: str = ""

    def __init__(
        self,
        connection: DatabaseConnection,
        tracker: Optional[PerformanceTracker] = None,
    ):
        self.connection = connection
        self.tracker: PerformanceTracker = tracker or NullPerformanceTracker()

    @contextmanager
    def _tracked(self, name: str) -> Iterator[None]:
        token = self.tracker.start_tracking(f"db.{name}")
        try:
            yield
        except Exception as exc:
            self.tracker.end_tracking(token, exc)
            raise
        self.tracker.end_tracking(token)

    def _build_update(self, row_id: int, updates: dict[str, Any], allowed: set[str]):
        """SET clause for a partial update, restricted to real column names."""
        unknown = sorted(set(updates) - allowed)
        if unknown:
            raise QueryError(
                f"UPDATE {self.table}",
                message=f"Unknown column(s) for {self.table}: {', '.join(unknown)}",
            )
        assignments = ", ".join(f"{key} = :{key}" for key in updates)
        sql = f"UPDATE {self.table} SET {assignments} WHERE id = :id"
        return sql, {**updates, "id": row_id}
