"""Run one agent CLI invocation with a wall-clock timeout."""

from __future__ import annotations

import os
import signal
import asyncio
import logging
import threading
from contextlib import suppress
from collections.abc import Sequence

from clawrelay.errors import RelayError, ProcessFailedError, RelayTimeoutError
from clawrelay.config.process import TERMINATE_GRACE_S, DEFAULT_CLI_TIMEOUT_S

from .resolver import ExecutableResolver
from .environment import build_process_environment

logger = logging.getLogger(__name__)


class _ProcessOutcome:
    """Resolves the caller's future exactly once.

    Natural exit, the timeout timer and launch failure all race to settle the
    call; only the first claim wins.
    """

    def __init__(self, future: asyncio.Future[bytes]) -> None:
        self._future = future
        self._lock = threading.Lock()
        self._resolved = False
        self.timed_out = False

    @property
    def future(self) -> asyncio.Future[bytes]:
        return self._future

    @property
    def resolved(self) -> bool:
        return self._resolved

    def _claim(self) -> bool:
        with self._lock:
            if self._resolved or self._future.done():
                self._resolved = True
                return False
            self._resolved = True
            return True

    def succeed(self, data: bytes) -> bool:
        if not self._claim():
            return False
        self._future.set_result(data)
        return True

    def fail(self, exc: RelayError, *, timed_out: bool = False) -> bool:
        if not self._claim():
            return False
        self.timed_out = timed_out
        self._future.set_exception(exc)
        return True

    def abandon(self) -> bool:
        return self._claim()


class ProcessBridge:
    def __init__(
        self,
        resolver: ExecutableResolver,
        *,
        timeout_s: float = DEFAULT_CLI_TIMEOUT_S,
        terminate_grace_s: float = TERMINATE_GRACE_S,
    ) -> None:
        self.resolver = resolver
        self.timeout_s = float(timeout_s)
        self.terminate_grace_s = float(terminate_grace_s)

    async def resolve_executable(self) -> str:
        # Resolution may shell out to a login shell; keep it off the event loop.
        return await asyncio.to_thread(self.resolver.resolve)

    def environment_for(self, executable_path: str) -> dict[str, str]:
        return build_process_environment(executable_path, home=self.resolver.home)

    async def run(self, arguments: Sequence[str], *, timeout_s: float | None = None) -> bytes:
        """Run the CLI with `arguments` and return its raw standard output."""
        timeout_s = self.timeout_s if timeout_s is None else float(timeout_s)
        executable = await self.resolve_executable()
        env = self.environment_for(executable)

        loop = asyncio.get_running_loop()
        outcome = _ProcessOutcome(loop.create_future())

        try:
            proc = await asyncio.create_subprocess_exec(
                executable,
                *arguments,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
                start_new_session=True,
            )
        except (OSError, ValueError) as exc:
            outcome.abandon()
            raise ProcessFailedError(f"failed to launch agent CLI at {executable}: {exc}") from exc

        logger.debug("cli: started pid=%s args=%s", proc.pid, arguments[:1])
        collector = asyncio.create_task(self._collect(proc, outcome))
        timer = loop.call_later(timeout_s, self._on_timeout, proc, outcome, timeout_s)

        try:
            return await outcome.future
        except asyncio.CancelledError:
            outcome.abandon()
            logger.info("cli: call cancelled; terminating pid=%s", proc.pid)
            raise
        finally:
            timer.cancel()
            await self._reap(proc, collector)

    async def _collect(self, proc: asyncio.subprocess.Process, outcome: _ProcessOutcome) -> None:
        try:
            stdout, stderr = await proc.communicate()
        except Exception as exc:
            outcome.fail(ProcessFailedError(f"agent CLI I/O failed: {exc}"))
            return

        if outcome.resolved:
            return
        if proc.returncode == 0:
            outcome.succeed(stdout or b"")
            return

        detail = (stderr or b"").decode("utf-8", errors="replace").strip() or "unknown error"
        outcome.fail(
            ProcessFailedError(
                f"agent CLI failed (exit {proc.returncode}): {detail}",
                exit_code=proc.returncode,
                stderr=detail,
            )
        )

    @staticmethod
    def _on_timeout(proc: asyncio.subprocess.Process, outcome: _ProcessOutcome, timeout_s: float) -> None:
        error = RelayTimeoutError(f"agent CLI timed out after {timeout_s:g}s", seconds=timeout_s)
        if not outcome.fail(error, timed_out=True):
            return
        logger.warning("cli: timed out after %.1fs; terminating pid=%s", timeout_s, proc.pid)
        _signal_group(proc, signal.SIGTERM)

    async def _reap(self, proc: asyncio.subprocess.Process, collector: asyncio.Task[None]) -> None:
        # Signal the whole group; forked helpers hold the output pipes too.
        if not collector.done():
            _signal_group(proc, signal.SIGTERM)
            _, pending = await asyncio.wait({collector}, timeout=self.terminate_grace_s)
            if pending:
                logger.warning("cli: pid=%s ignored SIGTERM; killing", proc.pid)
                _signal_group(proc, signal.SIGKILL)
                _, pending = await asyncio.wait({collector}, timeout=self.terminate_grace_s)
            if pending:
                logger.warning("cli: pid=%s output still open after SIGKILL; abandoning", proc.pid)
                collector.cancel()
                await asyncio.wait({collector})
        if not collector.cancelled():
            with suppress(Exception):
                collector.result()


def _signal_group(proc: asyncio.subprocess.Process, sig: signal.Signals) -> None:
    with suppress(ProcessLookupError, PermissionError):
        os.killpg(proc.pid, sig)


__all__ = ["ProcessBridge"]
