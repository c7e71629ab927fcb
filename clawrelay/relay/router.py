"""Transport selection and the CLI retry policy."""

from __future__ import annotations

import time
import uuid
import logging
from dataclasses import replace
from collections.abc import Sequence

from clawrelay.errors import RelayError
from clawrelay.state.relay import RelayResult, AttachmentRef, RelayRequest, RelayDiagnostics
from clawrelay.config.relay import MAX_CLI_ATTEMPTS, SESSION_KEY_PREFIX
from clawrelay.gateway.client import GatewayClient
from clawrelay.config.process import AGENT_COMMAND, STATUS_ARGUMENTS
from clawrelay.process.output import decode_agent_result
from clawrelay.process.runner import ProcessBridge
from clawrelay.state.settings import RelaySettings
from clawrelay.process.resolver import ExecutableResolver

from .retry import is_retryable
from .compose import build_relay_text
from .diagnostics import cli_diagnostics, gateway_diagnostics

logger = logging.getLogger(__name__)

MODE_CLI = "cli"
MODE_GATEWAY = "gateway"


def _build_bridge(settings: RelaySettings) -> ProcessBridge:
    resolver = ExecutableResolver(
        path_override=settings.cli.path_override,
        home_override=settings.cli.home_override,
    )
    return ProcessBridge(resolver, timeout_s=settings.cli.timeout_s)


def agent_arguments(request: RelayRequest) -> list[str]:
    return [
        AGENT_COMMAND,
        "--agent",
        request.agent_id,
        "--session-id",
        request.session_key,
        "--message",
        build_relay_text(request.text, request.attachments),
        "--json",
    ]


class RelayRouter:
    """Send one turn over the configured transport.

    Gateway mode uses `GatewayClient` and never retries. CLI mode runs the
    agent CLI through `ProcessBridge` and retries once when the failure text
    looks transient.
    """

    def __init__(
        self,
        settings: RelaySettings,
        *,
        bridge: ProcessBridge | None = None,
        gateway: GatewayClient | None = None,
    ) -> None:
        self._settings = settings
        self._owns_bridge = bridge is None
        self._owns_gateway = gateway is None
        self._bridge = bridge or _build_bridge(settings)
        self._gateway = gateway or GatewayClient(settings.gateway)

    @property
    def settings(self) -> RelaySettings:
        return self._settings

    @property
    def mode(self) -> str:
        return MODE_GATEWAY if self._settings.gateway.enabled else MODE_CLI

    @property
    def bridge(self) -> ProcessBridge:
        return self._bridge

    @property
    def gateway(self) -> GatewayClient:
        return self._gateway

    def configure(self, settings: RelaySettings) -> None:
        previous = self._settings
        self._settings = settings

        if previous.cli != settings.cli:
            if self._owns_bridge:
                self._bridge = _build_bridge(settings)
            elif (
                previous.cli.path_override != settings.cli.path_override
                or previous.cli.home_override != settings.cli.home_override
            ):
                self._bridge.resolver.invalidate()

        if self._owns_gateway and previous.gateway != settings.gateway:
            self._gateway = GatewayClient(settings.gateway)

        logger.info("relay: reconfigured mode=%s agent=%s", self.mode, settings.agent_id)

    def rotate_session(self) -> str:
        session_key = f"{SESSION_KEY_PREFIX}{uuid.uuid4()}"
        self._settings = replace(self._settings, session_key=session_key)
        logger.info("relay: rotated session key")
        return session_key

    def build_request(self, text: str, attachments: Sequence[AttachmentRef] = ()) -> RelayRequest:
        return RelayRequest(
            text=text,
            session_key=self._settings.session_key,
            agent_id=self._settings.agent_id,
            attachments=tuple(attachments),
        )

    async def send(self, request: RelayRequest) -> RelayResult:
        if self._settings.gateway.enabled:
            return await self._gateway.send(request)
        return await self._send_cli(request)

    async def _send_cli(self, request: RelayRequest) -> RelayResult:
        start = time.perf_counter()
        arguments = agent_arguments(request)

        attempt = 0
        while True:
            attempt += 1
            try:
                raw = await self._bridge.run(arguments)
                result = decode_agent_result(raw)
                break
            except RelayError as exc:
                if attempt >= MAX_CLI_ATTEMPTS or not is_retryable(str(exc)):
                    raise
                logger.warning("relay: transient CLI failure (%s); retrying", exc.kind)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        retry_count = attempt - 1
        logger.info("relay: cli reply in %dms (retries=%d)", elapsed_ms, retry_count)
        return RelayResult(
            text=result.first_non_empty_text or "",
            retry_count=retry_count,
            duration_ms=elapsed_ms,
        )

    async def ping(self) -> bool:
        if self._settings.gateway.enabled:
            return await self._gateway.ping()
        try:
            await self._bridge.run(list(STATUS_ARGUMENTS), timeout_s=self._settings.cli.probe_timeout_s)
        except RelayError as exc:
            logger.debug("relay: cli status probe failed: %s", exc)
            return False
        return True

    async def diagnostics(self) -> RelayDiagnostics:
        if self._settings.gateway.enabled:
            return await gateway_diagnostics(self._gateway)
        return await cli_diagnostics(self._bridge, probe_timeout_s=self._settings.cli.probe_timeout_s)


__all__ = ["MODE_CLI", "MODE_GATEWAY", "RelayRouter", "agent_arguments"]
