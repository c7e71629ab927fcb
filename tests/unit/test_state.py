from __future__ import annotations

from datetime import datetime

from clawrelay.state import GatewayPhase, RecentErrors, GatewaySession
from clawrelay.gateway import ChatEvent, AgentEvent, apply_run_event


def test_session_completion_is_idempotent() -> None:
    session = GatewaySession(active_run_id="run-1")
    session.advance(GatewayPhase.STREAMING)

    session.complete()
    session.complete()
    session.fail()

    assert session.completed
    assert session.phase is GatewayPhase.COMPLETED


def test_redundant_completion_signals() -> None:
    session = GatewaySession(active_run_id="run-1")
    apply_run_event(session, ChatEvent(run_id="run-1", state="final", text="done"))
    apply_run_event(session, AgentEvent(run_id="run-1", stream="lifecycle", phase="end"))

    assert session.completed
    assert session.accumulated_text == "done"


def test_aborted_run_with_text_completes() -> None:
    session = GatewaySession(active_run_id="run-1")
    apply_run_event(session, ChatEvent(run_id="run-1", state="delta", text="half"))
    apply_run_event(session, ChatEvent(run_id="run-1", state="aborted"))

    assert session.completed
    assert session.accumulated_text == "half"


def test_recent_errors_are_bounded_and_timestamped() -> None:
    errors = RecentErrors(max_entries=3)
    for i in range(5):
        errors.append(f"failure {i}", at=datetime(2026, 10, 19, 8, 30, i))

    entries = errors.entries()
    assert len(errors) == 3
    assert entries[0] == "[08:30:02] failure 2"
    assert entries[-1] == "[08:30:04] failure 4"
