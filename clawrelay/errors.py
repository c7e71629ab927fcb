"""Shared error types for the relay subsystem."""

from __future__ import annotations

from typing import ClassVar
from dataclasses import field, dataclass


@dataclass(eq=False, slots=True)
class RelayError(Exception):
    """Base class for every failure a relay call can end with."""

    message: str
    kind: ClassVar[str] = "relay"

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False, slots=True)
class NetworkError(RelayError):
    """Socket, DNS or transport-layer failure."""

    kind: ClassVar[str] = "network"


@dataclass(eq=False, slots=True)
class RelayTimeoutError(RelayError):
    """A deadline elapsed at some protocol phase."""

    seconds: float = 0.0
    kind: ClassVar[str] = "timeout"


@dataclass(eq=False, slots=True)
class AuthFailedError(RelayError):
    """The gateway explicitly rejected the connect request."""

    kind: ClassVar[str] = "auth_failed"


@dataclass(eq=False, slots=True)
class ProtocolViolationError(RelayError):
    """Malformed, unparsable or out-of-sequence messages."""

    kind: ClassVar[str] = "protocol_violation"


@dataclass(eq=False, slots=True)
class ProcessNotFoundError(RelayError):
    """No candidate location resolved to an executable agent CLI."""

    checked: tuple[str, ...] = field(default_factory=tuple)
    kind: ClassVar[str] = "process_not_found"


@dataclass(eq=False, slots=True)
class ProcessFailedError(RelayError):
    """The agent CLI could not be launched or exited non-zero."""

    exit_code: int | None = None
    stderr: str = ""
    kind: ClassVar[str] = "process_failed"


__all__ = [
    "AuthFailedError",
    "NetworkError",
    "ProcessFailedError",
    "ProcessNotFoundError",
    "ProtocolViolationError",
    "RelayError",
    "RelayTimeoutError",
]
