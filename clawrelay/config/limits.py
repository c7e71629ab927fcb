"""Rate monitor windows (constants only)."""

from __future__ import annotations

RATE_WINDOW_SHORT_S = 60.0
RATE_WINDOW_LONG_S = 60.0 * 60.0
# Events older than this are pruned from the log.
RATE_RETENTION_S = 60.0 * 60.0 * 24 * 45

# Echoed verbatim from the most recent call's response headers.
HEADER_REQUEST_LIMIT = "x-ratelimit-limit-requests"
HEADER_REQUEST_REMAINING = "x-ratelimit-remaining-requests"
HEADER_REQUEST_RESET = "x-ratelimit-reset-requests"
HEADER_TOKEN_LIMIT = "x-ratelimit-limit-tokens"
HEADER_TOKEN_REMAINING = "x-ratelimit-remaining-tokens"
HEADER_TOKEN_RESET = "x-ratelimit-reset-tokens"

STATUS_TOO_MANY_REQUESTS = 429
STATUS_ERROR_MIN = 400

__all__ = [
    "HEADER_REQUEST_LIMIT",
    "HEADER_REQUEST_REMAINING",
    "HEADER_REQUEST_RESET",
    "HEADER_TOKEN_LIMIT",
    "HEADER_TOKEN_REMAINING",
    "HEADER_TOKEN_RESET",
    "RATE_RETENTION_S",
    "RATE_WINDOW_LONG_S",
    "RATE_WINDOW_SHORT_S",
    "STATUS_ERROR_MIN",
    "STATUS_TOO_MANY_REQUESTS",
]
