"""Per-call gateway session state."""

from __future__ import annotations

import enum
from typing import Any
from dataclasses import field, dataclass


class GatewayPhase(enum.Enum):
    CONNECTING = "connecting"
    AWAITING_CHALLENGE = "awaiting_challenge"
    AUTHENTICATING = "authenticating"
    AWAITING_HELLO = "awaiting_hello"
    REQUEST_SENT = "request_sent"
    AWAITING_ACK = "awaiting_ack"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_PHASES = frozenset({GatewayPhase.COMPLETED, GatewayPhase.FAILED})


@dataclass(slots=True)
class GatewaySession:
    """Mutable state of one `chat.send` exchange. Never shared across calls."""

    phase: GatewayPhase = GatewayPhase.CONNECTING
    pending_request_id: str | None = None
    active_run_id: str | None = None
    accumulated_text: str = ""
    # "chat" once a chat event supplied text; assistant text never overrides it.
    text_source: str | None = None
    completed: bool = False
    early_events: list[Any] = field(default_factory=list)

    def advance(self, phase: GatewayPhase) -> None:
        if self.phase in TERMINAL_PHASES:
            return
        self.phase = phase

    def complete(self) -> None:
        """Mark the run finished. Repeated calls are no-ops."""
        if self.completed:
            return
        self.completed = True
        self.advance(GatewayPhase.COMPLETED)

    def fail(self) -> None:
        self.advance(GatewayPhase.FAILED)


__all__ = ["GatewayPhase", "GatewaySession", "TERMINAL_PHASES"]
