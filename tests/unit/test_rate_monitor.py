from __future__ import annotations

import threading
from datetime import datetime, timedelta

import pytest

from clawrelay.monitor import RateMonitor, CostEstimator
from clawrelay.state import RateRecord, RateSnapshot
from clawrelay.state.settings import CostSettings
from clawrelay.runtime.settings import load_cost_settings

# A Wednesday; the ISO week started on Monday 2026-10-19.
NOW = datetime(2026, 10, 21, 12, 0, 0)


def _monitor() -> RateMonitor:
    return RateMonitor(now_fn=lambda: NOW)


def test_snapshot_empty_monitor() -> None:
    assert _monitor().snapshot() == RateSnapshot()


def test_snapshot_windows_and_calendar_costs() -> None:
    monitor = _monitor()
    monitor.record(200, {}, "/v1/audio/speech", 1.0, at=datetime(2026, 9, 30, 10, 0))
    monitor.record(200, {}, "/v1/audio/speech", 0.5, at=datetime(2026, 10, 5, 10, 0))
    monitor.record(200, {}, "/v1/audio/speech", 0.25, at=datetime(2026, 10, 19, 9, 0))
    monitor.record(200, {}, "/v1/audio/speech", 0.125, at=datetime(2026, 10, 21, 8, 0))
    monitor.record(429, {}, "/v1/audio/speech", 9.0, at=datetime(2026, 10, 21, 11, 30))
    monitor.record(200, {}, "/v1/audio/transcriptions", 0.0625, at=datetime(2026, 10, 21, 11, 59, 30))

    snap = monitor.snapshot()

    assert snap.requests_last_60_seconds == 1
    assert snap.requests_last_60_minutes == 2
    assert snap.last_status_code == 200
    assert snap.last_error_status_code == 429
    assert snap.last_429_at == datetime(2026, 10, 21, 11, 30)
    assert snap.last_request_at == datetime(2026, 10, 21, 11, 59, 30)
    assert snap.last_endpoint == "/v1/audio/transcriptions"
    assert snap.estimated_cost_last_request_usd == pytest.approx(0.0625)
    assert snap.estimated_cost_today_usd == pytest.approx(0.1875)
    assert snap.estimated_cost_week_usd == pytest.approx(0.4375)
    assert snap.estimated_cost_month_usd == pytest.approx(0.9375)


def test_only_successful_calls_are_billed() -> None:
    monitor = _monitor()
    monitor.record(500, {}, "/v1/audio/speech", 3.0, at=NOW)
    monitor.record(200, {}, "/v1/audio/speech", -2.0, at=NOW)

    snap = monitor.snapshot()
    assert snap.estimated_cost_today_usd == 0.0
    assert snap.last_error_status_code == 500
    assert snap.last_429_at is None


def test_rate_limit_headers_are_echoed_from_latest_call() -> None:
    monitor = _monitor()
    monitor.record(200, {"X-RateLimit-Remaining-Requests": "1"}, "/a", at=NOW)
    monitor.record(
        200,
        {
            "X-RateLimit-Limit-Requests": "500",
            "X-RateLimit-Remaining-Requests": "499",
            "x-ratelimit-reset-requests": "120ms",
            "X-RateLimit-Limit-Tokens": "20000",
            "X-RateLimit-Remaining-Tokens": "19990",
            "X-RateLimit-Reset-Tokens": "30ms",
        },
        "/b",
        at=NOW,
    )

    snap = monitor.snapshot()
    assert snap.request_limit == "500"
    assert snap.request_remaining == "499"
    assert snap.request_reset == "120ms"
    assert snap.token_limit == "20000"
    assert snap.token_remaining == "19990"
    assert snap.token_reset == "30ms"


def test_events_older_than_retention_are_pruned() -> None:
    monitor = _monitor()
    monitor.record(200, {}, "/a", 1.0, at=NOW - timedelta(days=47))
    monitor.record(200, {}, "/a", 1.0, at=NOW - timedelta(days=1))

    assert len(monitor) == 1
    assert monitor.snapshot().last_request_at == NOW - timedelta(days=1)


def test_tts_cost_tiers_for_1000_characters(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CLAWRELAY_COST_TTS_BASELINE_USD_PER_1M_CHARS",
        "CLAWRELAY_COST_TTS_HD_USD_PER_1M_CHARS",
        "CLAWRELAY_COST_TTS_LOW_LATENCY_USD_PER_MINUTE",
        "CLAWRELAY_COST_TTS_CHARS_PER_MINUTE",
    ):
        monkeypatch.delenv(name, raising=False)
    estimator = CostEstimator(load_cost_settings())

    assert estimator.tts_estimate(1_000, "tts-1") == pytest.approx(0.015)
    assert estimator.tts_estimate(1_000, "tts-1-hd") == pytest.approx(0.03)
    assert estimator.tts_estimate(780, "gpt-4o-mini-tts") == pytest.approx(0.015)


def test_stt_cost_and_record_estimate(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLAWRELAY_COST_STT_USD_PER_MINUTE", "0.012")
    estimator = CostEstimator(load_cost_settings())

    assert estimator.stt_estimate(30) == pytest.approx(0.006)
    assert estimator.estimate_record(RateRecord(200, "/stt", stt_duration_s=60)) == pytest.approx(0.012)
    assert estimator.estimate_record(RateRecord(200, "/x", estimated_cost_usd=0.5, stt_duration_s=60)) == 0.5
    assert estimator.estimate_record(RateRecord(200, "/x")) == 0.0


def test_non_positive_cost_override_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CLAWRELAY_COST_TTS_HD_USD_PER_1M_CHARS", "-4")
    monkeypatch.setenv("CLAWRELAY_COST_STT_USD_PER_MINUTE", "garbage")

    rates = load_cost_settings()
    assert rates.tts_hd_usd_per_1m_chars == 30.0
    assert rates.stt_usd_per_minute == 0.006


def test_concurrent_writers_lose_no_events() -> None:
    monitor = _monitor()
    threads, per_thread = 8, 250

    def writer(index: int) -> None:
        for _ in range(per_thread):
            monitor.record(200, {"x-ratelimit-limit-requests": str(index)}, f"/v1/w{index}", 0.001)
            monitor.snapshot()

    workers = [threading.Thread(target=writer, args=(i,)) for i in range(threads)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    snap = monitor.snapshot()
    assert len(monitor) == threads * per_thread
    assert snap.requests_last_60_seconds == threads * per_thread
    assert snap.requests_last_60_minutes == threads * per_thread
    assert snap.estimated_cost_today_usd == pytest.approx(threads * per_thread * 0.001)


def test_low_latency_tts_with_zero_chars_per_minute_uses_default() -> None:
    estimator = CostEstimator(
        CostSettings(
            stt_usd_per_minute=0.006,
            tts_baseline_usd_per_1m_chars=15.0,
            tts_hd_usd_per_1m_chars=30.0,
            tts_low_latency_usd_per_minute=0.015,
            tts_chars_per_minute=0.0,
        )
    )
    assert estimator.tts_estimate(780, "gpt-4o-mini-tts") == pytest.approx(0.015)
