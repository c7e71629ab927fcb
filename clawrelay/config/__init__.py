"""Configuration module exports (env names and defaults only)."""

from .relay import (
    DEFAULT_AGENT_ID,
    DEFAULT_SESSION_KEY,
)
from .process import CLI_BINARY_NAME
from .gateway import GW_PROTOCOL_VERSION

__all__ = [
    "CLI_BINARY_NAME",
    "DEFAULT_AGENT_ID",
    "DEFAULT_SESSION_KEY",
    "GW_PROTOCOL_VERSION",
]
