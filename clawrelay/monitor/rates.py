"""Sliding-window request/cost monitor for the metered upstream API."""

from __future__ import annotations

import threading
import collections
from typing import Any
from datetime import datetime, timedelta
from collections.abc import Mapping, Callable

from clawrelay.state.rates import RateEvent, RateSnapshot
from clawrelay.config.limits import (
    RATE_RETENTION_S,
    STATUS_ERROR_MIN,
    RATE_WINDOW_LONG_S,
    HEADER_TOKEN_LIMIT,
    HEADER_TOKEN_RESET,
    RATE_WINDOW_SHORT_S,
    HEADER_REQUEST_LIMIT,
    HEADER_REQUEST_RESET,
    HEADER_TOKEN_REMAINING,
    HEADER_REQUEST_REMAINING,
    STATUS_TOO_MANY_REQUESTS,
)

NowFn = Callable[[], datetime]


def _is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


def _normalize_headers(headers: Mapping[Any, Any] | None) -> dict[str, str]:
    return {str(key).lower(): str(value) for key, value in (headers or {}).items()}


def _start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _start_of_week(now: datetime) -> datetime:
    return _start_of_day(now) - timedelta(days=now.weekday())


def _start_of_month(now: datetime) -> datetime:
    return _start_of_day(now).replace(day=1)


class RateMonitor:
    """Thread-safe event log with sliding-window aggregation.

    Callers record in real time, so the log stays ordered by timestamp.
    Header values are echoed verbatim; nothing here interprets rate-limit
    semantics.
    """

    def __init__(
        self,
        *,
        retention_s: float = RATE_RETENTION_S,
        now_fn: NowFn | None = None,
    ) -> None:
        self.retention = timedelta(seconds=max(0.0, float(retention_s)))
        self._now = now_fn or datetime.now
        self._events: collections.deque[RateEvent] = collections.deque()
        self._last_headers: dict[str, str] = {}
        self._lock = threading.Lock()

    def record(
        self,
        status_code: int,
        headers: Mapping[Any, Any] | None,
        endpoint: str,
        estimated_cost_usd: float = 0.0,
        at: datetime | None = None,
    ) -> None:
        at = at or self._now()
        billed = max(0.0, float(estimated_cost_usd)) if _is_success(status_code) else 0.0
        event = RateEvent(at=at, status_code=int(status_code), endpoint=endpoint, billed_cost_usd=billed)
        normalized = _normalize_headers(headers)
        with self._lock:
            self._events.append(event)
            self._last_headers = normalized
            self._prune(at)

    def snapshot(self, now: datetime | None = None) -> RateSnapshot:
        now = now or self._now()
        with self._lock:
            self._prune(now)
            events = list(self._events)
            headers = dict(self._last_headers)

        if not events:
            return RateSnapshot()

        minute_cutoff = now - timedelta(seconds=RATE_WINDOW_SHORT_S)
        hour_cutoff = now - timedelta(seconds=RATE_WINDOW_LONG_S)
        day_start = _start_of_day(now)
        week_start = _start_of_week(now)
        month_start = _start_of_month(now)

        last = events[-1]
        last_error = next((e for e in reversed(events) if e.status_code >= STATUS_ERROR_MIN), None)
        last_429 = next((e for e in reversed(events) if e.status_code == STATUS_TOO_MANY_REQUESTS), None)

        return RateSnapshot(
            requests_last_60_seconds=sum(1 for e in events if e.at >= minute_cutoff),
            requests_last_60_minutes=sum(1 for e in events if e.at >= hour_cutoff),
            last_status_code=last.status_code,
            last_error_status_code=last_error.status_code if last_error else None,
            last_429_at=last_429.at if last_429 else None,
            last_request_at=last.at,
            last_endpoint=last.endpoint,
            request_limit=headers.get(HEADER_REQUEST_LIMIT),
            request_remaining=headers.get(HEADER_REQUEST_REMAINING),
            request_reset=headers.get(HEADER_REQUEST_RESET),
            token_limit=headers.get(HEADER_TOKEN_LIMIT),
            token_remaining=headers.get(HEADER_TOKEN_REMAINING),
            token_reset=headers.get(HEADER_TOKEN_RESET),
            estimated_cost_last_request_usd=last.billed_cost_usd,
            estimated_cost_today_usd=sum(e.billed_cost_usd for e in events if e.at >= day_start),
            estimated_cost_week_usd=sum(e.billed_cost_usd for e in events if e.at >= week_start),
            estimated_cost_month_usd=sum(e.billed_cost_usd for e in events if e.at >= month_start),
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _prune(self, now: datetime) -> None:
        cutoff = now - self.retention
        events = self._events
        while events and events[0].at < cutoff:
            events.popleft()


__all__ = ["RateMonitor"]
