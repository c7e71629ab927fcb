"""Locate the agent CLI executable."""

from __future__ import annotations

import os
import logging
import threading
import subprocess  # noqa: S404
from collections.abc import Mapping

from clawrelay.errors import ProcessNotFoundError
from clawrelay.config.process import (
    ENV_CLI_PATH,
    CLI_BINARY_NAME,
    HOME_INSTALL_DIRS,
    DEFAULT_LOGIN_SHELL,
    SYSTEM_INSTALL_DIRS,
    FALLBACK_LOGIN_SHELL,
    LOGIN_SHELL_TIMEOUT_S,
)

from .environment import resolve_home, is_executable

logger = logging.getLogger(__name__)


def candidate_executable_paths(
    environ: Mapping[str, str],
    home: str,
    *,
    override: str = "",
    binary_name: str = CLI_BINARY_NAME,
) -> list[str]:
    """Ordered locations to try: override, PATH entries, well-known install dirs."""
    candidates: list[str] = []

    explicit = override or environ.get(ENV_CLI_PATH) or ""
    if explicit:
        candidates.append(explicit)

    for directory in (environ.get("PATH") or "").split(os.pathsep):
        if directory:
            candidates.append(os.path.join(directory, binary_name))

    candidates.extend(os.path.join(home, rel, binary_name) for rel in HOME_INSTALL_DIRS)
    candidates.extend(os.path.join(directory, binary_name) for directory in SYSTEM_INSTALL_DIRS)
    return candidates


def _login_shell() -> str:
    shell = (os.getenv("SHELL") or "").strip()
    if shell and is_executable(shell):
        return shell
    if is_executable(DEFAULT_LOGIN_SHELL):
        return DEFAULT_LOGIN_SHELL
    return FALLBACK_LOGIN_SHELL


def resolve_from_login_shell(
    environ: Mapping[str, str],
    *,
    binary_name: str = CLI_BINARY_NAME,
    timeout_s: float = LOGIN_SHELL_TIMEOUT_S,
) -> str | None:
    try:
        proc = subprocess.run(  # noqa: S603
            [_login_shell(), "-lc", f"command -v {binary_name} 2>/dev/null || true"],
            capture_output=True,
            text=True,
            env=dict(environ),
            timeout=timeout_s,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        logger.debug("cli: login shell lookup failed", exc_info=True)
        return None

    if proc.returncode != 0:
        return None
    lines = [ln.strip() for ln in (proc.stdout or "").splitlines() if ln.strip()]
    # Shell init files may print banners; the lookup result is the last line.
    return lines[-1] if lines else None


class ExecutableResolver:
    """Resolve the CLI once and memoize the result until invalidated."""

    def __init__(
        self,
        *,
        path_override: str = "",
        home_override: str = "",
        environ: Mapping[str, str] | None = None,
        use_login_shell: bool = True,
    ) -> None:
        self.path_override = path_override
        self._environ = environ
        self.home = resolve_home(home_override, environ)
        self.use_login_shell = use_login_shell
        self._cached: str | None = None
        self._lock = threading.Lock()

    @property
    def cached_path(self) -> str | None:
        return self._cached

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None

    def resolve(self) -> str:
        cached = self._cached
        if cached is not None and is_executable(cached):
            return cached

        with self._lock:
            if self._cached is not None and is_executable(self._cached):
                return self._cached

            environ = os.environ if self._environ is None else self._environ
            candidates = candidate_executable_paths(environ, self.home, override=self.path_override)
            for candidate in candidates:
                if is_executable(candidate):
                    self._cached = candidate
                    logger.info("cli: resolved executable %s", candidate)
                    return candidate

            if self.use_login_shell:
                shell_path = resolve_from_login_shell(environ)
                if shell_path and is_executable(shell_path):
                    self._cached = shell_path
                    logger.info("cli: resolved executable via login shell %s", shell_path)
                    return shell_path
                candidates.append(f"login shell: command -v {CLI_BINARY_NAME}")

        raise ProcessNotFoundError(
            f"{CLI_BINARY_NAME} CLI not found. Install it or set {ENV_CLI_PATH} to the full executable path. "
            f"Checked {len(candidates)} locations.",
            checked=tuple(candidates),
        )


__all__ = ["ExecutableResolver", "candidate_executable_paths", "resolve_from_login_shell"]
