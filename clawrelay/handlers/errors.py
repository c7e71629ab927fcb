"""Error helpers for the HTTP surface."""

from __future__ import annotations

from typing import Any

from clawrelay.errors import (
    RelayError,
    NetworkError,
    AuthFailedError,
    RelayTimeoutError,
    ProcessFailedError,
    ProcessNotFoundError,
    ProtocolViolationError,
)

STATUS_BAD_REQUEST = 400
STATUS_BAD_GATEWAY = 502
STATUS_GATEWAY_TIMEOUT = 504

_STATUS_BY_ERROR: tuple[tuple[type[RelayError], int], ...] = (
    (RelayTimeoutError, STATUS_GATEWAY_TIMEOUT),
    (AuthFailedError, STATUS_BAD_GATEWAY),
    (NetworkError, STATUS_BAD_GATEWAY),
    (ProtocolViolationError, STATUS_BAD_GATEWAY),
    (ProcessFailedError, STATUS_BAD_GATEWAY),
    (ProcessNotFoundError, STATUS_BAD_GATEWAY),
)


def build_error_payload(kind: str, message: str, *, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"kind": kind, "message": message, "details": dict(details or {})}


def status_for_error(exc: RelayError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return STATUS_BAD_GATEWAY


def relay_error_payload(exc: RelayError) -> dict[str, Any]:
    details: dict[str, Any] = {}
    if isinstance(exc, RelayTimeoutError):
        details["seconds"] = exc.seconds
    elif isinstance(exc, ProcessFailedError):
        details["exit_code"] = exc.exit_code
    elif isinstance(exc, ProcessNotFoundError):
        details["checked"] = list(exc.checked)
    return build_error_payload(exc.kind, exc.message, details=details)


__all__ = [
    "STATUS_BAD_REQUEST",
    "build_error_payload",
    "relay_error_payload",
    "status_for_error",
]
