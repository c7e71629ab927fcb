"""Retry classification for agent CLI failures.

This is a heuristic over human-readable error text, not a typed signal; it
is neither exhaustive nor precise.
"""

from __future__ import annotations

from clawrelay.config.relay import RETRYABLE_MARKERS


def is_retryable(message: str) -> bool:
    value = (message or "").lower()
    return any(marker in value for marker in RETRYABLE_MARKERS)


__all__ = ["is_retryable"]
