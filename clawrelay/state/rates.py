"""Rate monitor value types (dataclasses only)."""

from __future__ import annotations

from datetime import datetime
from dataclasses import field, dataclass


@dataclass(frozen=True, slots=True)
class RateEvent:
    at: datetime
    status_code: int
    endpoint: str
    billed_cost_usd: float


@dataclass(frozen=True, slots=True)
class RateSnapshot:
    requests_last_60_seconds: int = 0
    requests_last_60_minutes: int = 0
    last_status_code: int | None = None
    last_error_status_code: int | None = None
    last_429_at: datetime | None = None
    last_request_at: datetime | None = None
    last_endpoint: str | None = None
    request_limit: str | None = None
    request_remaining: str | None = None
    request_reset: str | None = None
    token_limit: str | None = None
    token_remaining: str | None = None
    token_reset: str | None = None
    estimated_cost_last_request_usd: float | None = None
    estimated_cost_today_usd: float = 0.0
    estimated_cost_week_usd: float = 0.0
    estimated_cost_month_usd: float = 0.0


@dataclass(frozen=True, slots=True)
class RateRecord:
    """One metered upstream call reported by a caller."""

    status_code: int
    endpoint: str
    headers: dict[str, str] = field(default_factory=dict)
    estimated_cost_usd: float | None = None
    stt_duration_s: float | None = None
    tts_characters: int | None = None
    tts_model: str = ""


__all__ = ["RateEvent", "RateRecord", "RateSnapshot"]
