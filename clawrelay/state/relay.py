"""Relay request/result value types (dataclasses only)."""

from __future__ import annotations

from dataclasses import field, dataclass


@dataclass(frozen=True, slots=True)
class AttachmentRef:
    file_name: str
    path: str
    type_label: str
    size_bytes: int | None = None


@dataclass(frozen=True, slots=True)
class RelayRequest:
    text: str
    session_key: str
    agent_id: str
    attachments: tuple[AttachmentRef, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class RelayResult:
    text: str
    retry_count: int = 0
    duration_ms: int = 0


@dataclass(frozen=True, slots=True)
class RelayDiagnostics:
    """Read-only view of the configured transport, recomputed on demand."""

    mode: str
    reachable: bool
    cli_path: str | None = None
    runtime_path: str | None = None
    gateway_url: str | None = None
    has_token: bool = False
    detail: str | None = None


__all__ = ["AttachmentRef", "RelayDiagnostics", "RelayRequest", "RelayResult"]
