"""Local diagnostics server configuration."""

from __future__ import annotations

ENV_HOST = "CLAWRELAY_HOST"
ENV_PORT = "CLAWRELAY_PORT"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765

__all__ = ["DEFAULT_HOST", "DEFAULT_PORT", "ENV_HOST", "ENV_PORT"]
