"""
Query timing hooks for the repositories.

Repositories always hold a tracker; when nobody wants measurements they get
NullPerformanceTracker, so no call site has to check for one.
"""
from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class PerformanceTracker(Protocol):
    def start_tracking(self, name: str) -> Any: ...

    def end_tracking(self, token: Any, error: Optional[BaseException] = None) -> None: ...


class NullPerformanceTracker:
    def start_tracking(self, name: str) -> Any:
        return None

    def end_tracking(self, token: Any, error: Optional[BaseException] = None) -> None:
        return None


@dataclass
class QueryMetric:
    name: str
    duration_ms: float
    ok: bool
    error: Optional[str] = None


@dataclass
class _Token:
    name: str
    started: float


class QueryTimer:
    """Keeps the most recent measurements and logs slow or failed queries."""

    def __init__(self, slow_query_threshold_ms: float = 1000.0, max_stored_metrics: int = 100):
        self.slow_query_threshold_ms = slow_query_threshold_ms
        self.metrics: deque[QueryMetric] = deque(maxlen=max_stored_metrics)

    def start_tracking(self, name: str) -> _Token:
        return _Token(name=name, started=time.perf_counter())

    def end_tracking(self, token: Any, error: Optional[BaseException] = None) -> None:
        if not isinstance(token, _Token):
            return
        duration_ms = (time.perf_counter() - token.started) * 1000
        metric = QueryMetric(
            name=token.name,
            duration_ms=duration_ms,
            ok=error is None,
            error=str(error) if error is not None else None,
        )
        self.metrics.append(metric)

        if error is not None:
            logger.warning("%s failed after %.1fms: %s", token.name, duration_ms, error)
        elif duration_ms > self.slow_query_threshold_ms:
            logger.warning("Slow query %s took %.1fms", token.name, duration_ms)

    def summary(self) -> dict:
        """Aggregate view of the stored measurements."""
        count = len(self.metrics)
        if count == 0:
            return {"count": 0, "failures": 0, "avg_ms": 0.0, "max_ms": 0.0, "slow": 0}
        durations = [m.duration_ms for m in self.metrics]
        return {
            "count": count,
            "failures": sum(1 for m in self.metrics if not m.ok),
            "avg_ms": sum(durations) / count,
            "max_ms": max(durations),
            "slow": sum(1 for d in durations if d > self.slow_query_threshold_ms),
        }
