"""Child-process environment for the agent CLI."""

from __future__ import annotations

import os
from pathlib import Path
from collections.abc import Mapping

from clawrelay.config.process import HOME_PATH_DIRS, SYSTEM_PATH_DIRS


def is_executable(path: str) -> bool:
    return bool(path) and os.path.isfile(path) and os.access(path, os.X_OK)


def resolve_home(home_override: str = "", environ: Mapping[str, str] | None = None) -> str:
    if home_override:
        return str(Path(home_override).expanduser())
    environ = os.environ if environ is None else environ
    return environ.get("HOME") or str(Path.home())


def build_process_environment(
    executable_path: str,
    *,
    environ: Mapping[str, str] | None = None,
    home: str | None = None,
) -> dict[str, str]:
    """Return a copy of the environment with a PATH that can find the CLI's own runtime.

    A GUI-launched parent does not inherit a login shell's PATH, so the
    executable's directory and the usual local install prefixes go first.
    Duplicates and directories that do not exist are dropped.
    """
    env = dict(os.environ if environ is None else environ)
    home = home or resolve_home(environ=env)

    entries: list[str] = [os.path.dirname(executable_path)]
    entries.extend(os.path.join(home, rel) for rel in HOME_PATH_DIRS)
    entries.extend(SYSTEM_PATH_DIRS)
    entries.extend((env.get("PATH") or "").split(os.pathsep))

    seen: set[str] = set()
    normalized: list[str] = []
    for entry in entries:
        if not entry or entry in seen:
            continue
        seen.add(entry)
        if os.path.isdir(entry):
            normalized.append(entry)

    env["PATH"] = os.pathsep.join(normalized)
    env.setdefault("HOME", home)
    return env


def find_binary(name: str, path: str | None) -> str | None:
    if not path:
        return None
    for directory in path.split(os.pathsep):
        if not directory:
            continue
        candidate = os.path.join(directory, name)
        if is_executable(candidate):
            return candidate
    return None


__all__ = ["build_process_environment", "find_binary", "is_executable", "resolve_home"]
