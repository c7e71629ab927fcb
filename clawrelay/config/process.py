"""Agent CLI configuration (env names, defaults and well-known locations)."""

from __future__ import annotations

ENV_CLI_PATH = "OPENCLAW_CLI_PATH"
ENV_CLI_HOME = "CLAWRELAY_CLI_HOME"
ENV_CLI_TIMEOUT_S = "CLAWRELAY_CLI_TIMEOUT_S"
ENV_CLI_PROBE_TIMEOUT_S = "CLAWRELAY_CLI_PROBE_TIMEOUT_S"

CLI_BINARY_NAME = "openclaw"
RUNTIME_BINARY_NAME = "node"

DEFAULT_CLI_TIMEOUT_S = 18.0
DEFAULT_CLI_PROBE_TIMEOUT_S = 10.0
LOGIN_SHELL_TIMEOUT_S = 5.0
# Time a terminated child gets to exit before it is killed.
TERMINATE_GRACE_S = 2.0

DEFAULT_LOGIN_SHELL = "/bin/zsh"
FALLBACK_LOGIN_SHELL = "/bin/sh"

# Relative to the home directory.
HOME_INSTALL_DIRS = (
    ".n/bin",
    ".local/bin",
    ".npm-global/bin",
    ".yarn/bin",
    "Library/pnpm",
    "bin",
)

SYSTEM_INSTALL_DIRS = (
    "/opt/homebrew/bin",
    "/opt/homebrew/sbin",
    "/usr/local/bin",
    "/usr/local/sbin",
    "/usr/bin",
    "/bin",
)

# Prepended to the child PATH; a GUI-launched parent lacks login-shell init.
HOME_PATH_DIRS = (
    ".n/bin",
    ".local/bin",
)

SYSTEM_PATH_DIRS = (
    "/opt/homebrew/bin",
    "/usr/local/bin",
    "/usr/bin",
    "/bin",
    "/usr/sbin",
    "/sbin",
)

AGENT_COMMAND = "agent"
STATUS_ARGUMENTS = ("status", "--json")

__all__ = [
    "AGENT_COMMAND",
    "CLI_BINARY_NAME",
    "DEFAULT_CLI_PROBE_TIMEOUT_S",
    "DEFAULT_CLI_TIMEOUT_S",
    "DEFAULT_LOGIN_SHELL",
    "ENV_CLI_HOME",
    "ENV_CLI_PATH",
    "ENV_CLI_PROBE_TIMEOUT_S",
    "ENV_CLI_TIMEOUT_S",
    "FALLBACK_LOGIN_SHELL",
    "HOME_INSTALL_DIRS",
    "HOME_PATH_DIRS",
    "LOGIN_SHELL_TIMEOUT_S",
    "RUNTIME_BINARY_NAME",
    "STATUS_ARGUMENTS",
    "SYSTEM_INSTALL_DIRS",
    "SYSTEM_PATH_DIRS",
    "TERMINATE_GRACE_S",
]
