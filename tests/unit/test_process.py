from __future__ import annotations

import os
import time
import stat
import asyncio
from pathlib import Path

import pytest

from clawrelay.errors import RelayTimeoutError, ProcessFailedError, ProcessNotFoundError
from clawrelay.process import (
    ProcessBridge,
    ExecutableResolver,
    find_binary,
    decode_agent_result,
    build_process_environment,
    candidate_executable_paths,
)


def _write_script(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def _bridge(script: Path, tmp_path: Path, **kwargs) -> ProcessBridge:
    resolver = ExecutableResolver(
        path_override=str(script),
        home_override=str(tmp_path / "home"),
        use_login_shell=False,
    )
    return ProcessBridge(resolver, **kwargs)


def test_candidate_paths_order() -> None:
    environ = {"PATH": "/a:/b", "OPENCLAW_CLI_PATH": "/x/openclaw"}
    candidates = candidate_executable_paths(environ, "/home/u")

    assert candidates[:3] == ["/x/openclaw", "/a/openclaw", "/b/openclaw"]
    assert candidates[3] == "/home/u/.n/bin/openclaw"
    assert "/home/u/.local/bin/openclaw" in candidates
    assert candidates.index("/home/u/bin/openclaw") < candidates.index("/opt/homebrew/bin/openclaw")
    assert candidates[-1] == "/bin/openclaw"


def test_candidate_paths_explicit_override_wins_over_env() -> None:
    environ = {"PATH": "", "OPENCLAW_CLI_PATH": "/env/openclaw"}
    candidates = candidate_executable_paths(environ, "/h", override="/cfg/openclaw")
    assert candidates[0] == "/cfg/openclaw"
    assert "/env/openclaw" not in candidates


def test_resolver_picks_first_path_match_and_caches(tmp_path: Path) -> None:
    first = _write_script(tmp_path / "one" / "openclaw", "exit 0")
    _write_script(tmp_path / "two" / "openclaw", "exit 0")
    resolver = ExecutableResolver(
        home_override=str(tmp_path / "home"),
        environ={"PATH": f"{first.parent}{os.pathsep}{tmp_path / 'two'}"},
        use_login_shell=False,
    )

    assert resolver.resolve() == str(first)
    assert resolver.cached_path == str(first)
    resolver.invalidate()
    assert resolver.cached_path is None


def test_resolver_skips_non_executable_files(tmp_path: Path) -> None:
    plain = tmp_path / "one" / "openclaw"
    plain.parent.mkdir()
    plain.write_text("not executable")
    real = _write_script(tmp_path / "two" / "openclaw", "exit 0")
    resolver = ExecutableResolver(
        home_override=str(tmp_path / "home"),
        environ={"PATH": f"{plain.parent}{os.pathsep}{real.parent}"},
        use_login_shell=False,
    )
    assert resolver.resolve() == str(real)


def test_resolver_not_found_lists_candidates(tmp_path: Path) -> None:
    resolver = ExecutableResolver(
        path_override=str(tmp_path / "missing" / "openclaw"),
        home_override=str(tmp_path / "home"),
        environ={"PATH": ""},
        use_login_shell=False,
    )
    if any(os.access(p, os.X_OK) for p in candidate_executable_paths({}, str(tmp_path / "home"))):
        pytest.skip("an openclaw binary is installed system-wide")

    with pytest.raises(ProcessNotFoundError) as exc:
        resolver.resolve()
    assert exc.value.checked[0] == str(tmp_path / "missing" / "openclaw")
    assert "OPENCLAW_CLI_PATH" in str(exc.value)


def test_process_environment_prepends_binary_dir(tmp_path: Path) -> None:
    bindir = tmp_path / "bin"
    other = tmp_path / "other"
    other.mkdir()
    exe = _write_script(bindir / "openclaw", "exit 0")
    home = tmp_path / "home"

    env = build_process_environment(
        str(exe),
        environ={"PATH": os.pathsep.join([str(other), str(bindir), "/definitely/missing"])},
        home=str(home),
    )
    entries = env["PATH"].split(os.pathsep)

    assert entries[0] == str(bindir)
    assert entries.count(str(bindir)) == 1
    assert str(other) in entries
    assert "/definitely/missing" not in entries
    assert env["HOME"] == str(home)


def test_process_environment_keeps_existing_home(tmp_path: Path) -> None:
    exe = _write_script(tmp_path / "bin" / "openclaw", "exit 0")
    env = build_process_environment(str(exe), environ={"HOME": "/users/me", "PATH": ""}, home="/other")
    assert env["HOME"] == "/users/me"


def test_find_binary(tmp_path: Path) -> None:
    node = _write_script(tmp_path / "bin" / "node", "exit 0")
    assert find_binary("node", os.pathsep.join(["/definitely/missing", str(node.parent)])) == str(node)
    assert find_binary("node", "") is None


@pytest.mark.asyncio
async def test_bridge_returns_stdout(tmp_path: Path) -> None:
    script = _write_script(
        tmp_path / "cli" / "openclaw",
        "echo 'booting agent'\necho '{\"result\":{\"payloads\":[{\"text\":\"hello\"}]}}'",
    )
    raw = await _bridge(script, tmp_path).run(["agent", "--json"])
    assert decode_agent_result(raw).first_non_empty_text == "hello"


@pytest.mark.asyncio
async def test_bridge_passes_arguments(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "cli" / "openclaw", 'printf "%s|" "$@"')
    raw = await _bridge(script, tmp_path).run(["agent", "--message", "two words"])
    assert raw == b"agent|--message|two words|"


@pytest.mark.asyncio
async def test_bridge_timeout_terminates_child(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "cli" / "openclaw", "exec sleep 10")
    bridge = _bridge(script, tmp_path, timeout_s=0.3)

    start = time.monotonic()
    with pytest.raises(RelayTimeoutError) as exc:
        await bridge.run(["agent"])
    assert time.monotonic() - start < 5.0
    assert "timed out" in str(exc.value)
    assert exc.value.seconds == pytest.approx(0.3)


@pytest.mark.asyncio
async def test_bridge_non_zero_exit(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "cli" / "openclaw", "echo 'session locked' >&2\nexit 3")

    with pytest.raises(ProcessFailedError) as exc:
        await _bridge(script, tmp_path).run(["agent"])
    assert exc.value.exit_code == 3
    assert exc.value.stderr == "session locked"
    assert "exit 3" in str(exc.value)


@pytest.mark.asyncio
async def test_bridge_timeout_is_not_held_open_by_forked_helper(tmp_path: Path) -> None:
    # Without exec, sh forks sleep, which inherits the output pipes.
    script = _write_script(tmp_path / "cli" / "openclaw", "sleep 6\necho done")
    bridge = _bridge(script, tmp_path, timeout_s=0.5, terminate_grace_s=0.5)

    start = time.monotonic()
    with pytest.raises(RelayTimeoutError):
        await bridge.run(["agent"])
    assert time.monotonic() - start < 3.0


@pytest.mark.asyncio
async def test_bridge_launch_error_is_process_failure(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "cli" / "openclaw", "exit 0")

    with pytest.raises(ProcessFailedError) as exc:
        await _bridge(script, tmp_path).run(["agent", "--message", "hi\x00there"])
    assert "failed to launch" in str(exc.value)


@pytest.mark.asyncio
async def test_bridge_cancel_terminates_child(tmp_path: Path) -> None:
    pid_file = tmp_path / "child.pid"
    script = _write_script(tmp_path / "cli" / "openclaw", 'echo $$ > "$2"\nsleep 10\necho late')
    bridge = _bridge(script, tmp_path, timeout_s=30.0, terminate_grace_s=0.5)

    task = asyncio.create_task(bridge.run(["agent", str(pid_file)]))
    for _ in range(250):
        if pid_file.exists() and pid_file.read_text().strip():
            break
        await asyncio.sleep(0.02)
    pid = int(pid_file.read_text().strip())

    start = time.monotonic()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert time.monotonic() - start < 3.0
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)
