"""Relay routing configuration (env names and defaults)."""

from __future__ import annotations

ENV_AGENT_ID = "CLAWRELAY_AGENT_ID"
ENV_SESSION_KEY = "CLAWRELAY_SESSION_KEY"

DEFAULT_AGENT_ID = "main"
DEFAULT_SESSION_KEY = "clawrelay-v1"
SESSION_KEY_PREFIX = "clawrelay-"

# Only the CLI path retries, and at most once.
MAX_CLI_ATTEMPTS = 2

# Lower-cased substrings of error text that mark a transient CLI failure.
RETRYABLE_MARKERS = (
    "timed out",
    "temporar",
    "resource temporarily unavailable",
    "connection reset",
    "network error",
)

ATTACHMENT_MANIFEST_HEADER = "Attached files:"
ATTACHMENT_MANIFEST_FOOTER = "Analyze these attachments and respond to the user request."

# Failures kept for the diagnostics export.
RECENT_ERRORS_MAX = 30
REPORT_RECENT_ERRORS = 12

__all__ = [
    "ATTACHMENT_MANIFEST_FOOTER",
    "ATTACHMENT_MANIFEST_HEADER",
    "DEFAULT_AGENT_ID",
    "DEFAULT_SESSION_KEY",
    "ENV_AGENT_ID",
    "ENV_SESSION_KEY",
    "MAX_CLI_ATTEMPTS",
    "RECENT_ERRORS_MAX",
    "REPORT_RECENT_ERRORS",
    "RETRYABLE_MARKERS",
    "SESSION_KEY_PREFIX",
]
