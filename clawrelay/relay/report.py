"""Plain-text diagnostics export."""

from __future__ import annotations

from datetime import datetime
from collections.abc import Sequence

from clawrelay.state.rates import RateSnapshot
from clawrelay.state.relay import RelayDiagnostics
from clawrelay.config.relay import REPORT_RECENT_ERRORS

NOT_AVAILABLE = "n/a"


def _or_na(value: object | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    return str(value)


def _relay_lines(diagnostics: RelayDiagnostics) -> list[str]:
    lines = [
        f"Relay mode: {diagnostics.mode}",
        f"Relay reachable: {'yes' if diagnostics.reachable else 'no'}",
    ]
    if diagnostics.mode == "gateway":
        lines.append(f"Gateway URL: {_or_na(diagnostics.gateway_url)}")
        lines.append(f"Gateway token: {'set' if diagnostics.has_token else 'missing'}")
    else:
        lines.append(f"CLI path: {_or_na(diagnostics.cli_path)}")
        lines.append(f"Runtime path: {_or_na(diagnostics.runtime_path)}")
    if diagnostics.detail:
        lines.append(f"Relay detail: {diagnostics.detail}")
    return lines


def _rate_lines(snapshot: RateSnapshot) -> list[str]:
    lines = [
        f"API req/min (60s): {snapshot.requests_last_60_seconds}",
        f"API req/hour (60m): {snapshot.requests_last_60_minutes}",
        f"API last status: {_or_na(snapshot.last_status_code)}",
        f"API last error status: {_or_na(snapshot.last_error_status_code)}",
        f"API last endpoint: {_or_na(snapshot.last_endpoint)}",
        f"API last 429: {_or_na(snapshot.last_429_at)}",
        f"API est. cost last request (USD): {snapshot.estimated_cost_last_request_usd or 0.0:.6f}",
        f"API est. cost today (USD): {snapshot.estimated_cost_today_usd:.6f}",
        f"API est. cost week (USD): {snapshot.estimated_cost_week_usd:.6f}",
        f"API est. cost month (USD): {snapshot.estimated_cost_month_usd:.6f}",
    ]
    if snapshot.request_remaining is not None and snapshot.request_limit is not None:
        lines.append(f"API request budget: {snapshot.request_remaining}/{snapshot.request_limit} remaining")
    if snapshot.token_remaining is not None and snapshot.token_limit is not None:
        lines.append(f"API token budget: {snapshot.token_remaining}/{snapshot.token_limit} remaining")
    return lines


def build_report(
    diagnostics: RelayDiagnostics,
    snapshot: RateSnapshot,
    cost_assumptions: str,
    recent_errors: Sequence[str],
    *,
    generated_at: datetime | None = None,
) -> str:
    generated_at = generated_at or datetime.now().astimezone()
    lines = ["ClawRelay Diagnostics", f"Generated: {generated_at.isoformat(timespec='seconds')}"]
    lines.extend(_relay_lines(diagnostics))
    lines.extend(_rate_lines(snapshot))
    lines.append(cost_assumptions)
    lines.append("")
    lines.append("Recent Errors:")
    tail = list(recent_errors)[-REPORT_RECENT_ERRORS:]
    if not tail:
        lines.append("- none")
    lines.extend(f"- {entry}" for entry in tail)
    return "\n".join(lines)


__all__ = ["build_report"]
