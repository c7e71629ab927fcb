"""Read-only probes of the configured transport."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from clawrelay.errors import RelayError
from clawrelay.state.relay import RelayDiagnostics
from clawrelay.config.process import STATUS_ARGUMENTS, RUNTIME_BINARY_NAME
from clawrelay.process.environment import find_binary

if TYPE_CHECKING:
    from clawrelay.gateway.client import GatewayClient
    from clawrelay.process.runner import ProcessBridge

logger = logging.getLogger(__name__)


async def cli_diagnostics(bridge: ProcessBridge, *, probe_timeout_s: float) -> RelayDiagnostics:
    try:
        cli_path = await bridge.resolve_executable()
    except RelayError as exc:
        return RelayDiagnostics(mode="cli", reachable=False, detail=str(exc))

    env = bridge.environment_for(cli_path)
    runtime_path = find_binary(RUNTIME_BINARY_NAME, env.get("PATH"))

    try:
        await bridge.run(list(STATUS_ARGUMENTS), timeout_s=probe_timeout_s)
    except RelayError as exc:
        logger.debug("diagnostics: status probe failed: %s", exc)
        return RelayDiagnostics(
            mode="cli",
            reachable=False,
            cli_path=cli_path,
            runtime_path=runtime_path,
            detail=str(exc),
        )

    detail = None if runtime_path else f"{RUNTIME_BINARY_NAME} not found on the CLI's PATH"
    return RelayDiagnostics(
        mode="cli",
        reachable=True,
        cli_path=cli_path,
        runtime_path=runtime_path,
        detail=detail,
    )


async def gateway_diagnostics(client: GatewayClient) -> RelayDiagnostics:
    settings = client.settings
    url = settings.url.strip() or None
    has_token = bool(settings.token.strip())
    if url is None:
        return RelayDiagnostics(
            mode="gateway",
            reachable=False,
            has_token=has_token,
            detail="gateway URL is not configured",
        )

    reachable = await client.ping()
    return RelayDiagnostics(
        mode="gateway",
        reachable=reachable,
        gateway_url=url,
        has_token=has_token,
        detail=None if reachable else "gateway connect/handshake failed",
    )


__all__ = ["cli_diagnostics", "gateway_diagnostics"]
