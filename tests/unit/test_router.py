from __future__ import annotations

import stat
from typing import Any
from pathlib import Path
from dataclasses import replace

import pytest

from clawrelay.errors import RelayError, RelayTimeoutError, ProcessFailedError, ProcessNotFoundError
from clawrelay.state import (
    CliSettings,
    RelayResult,
    RelayRequest,
    AttachmentRef,
    RelaySettings,
    GatewaySettings,
)
from clawrelay.process import ProcessBridge, ExecutableResolver
from clawrelay.relay.router import RelayRouter

REPLY = b'{"result": {"payloads": [{"text": " pong "}]}}'


class FakeResolver:
    def __init__(self) -> None:
        self.invalidated = 0

    def invalidate(self) -> None:
        self.invalidated += 1


class FakeBridge:
    """Replays queued outcomes; an exception instance is raised instead of returned."""

    def __init__(self, *outcomes: Any, path: str = "/usr/local/bin/openclaw") -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[list[str], float | None]] = []
        self.resolver = FakeResolver()
        self.path = path

    async def run(self, arguments, *, timeout_s=None) -> bytes:
        self.calls.append((list(arguments), timeout_s))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def resolve_executable(self) -> str:
        if isinstance(self.path, Exception):
            raise self.path
        return self.path

    def environment_for(self, executable_path: str) -> dict[str, str]:
        return {"PATH": ""}


class FakeGatewayClient:
    def __init__(self, settings: GatewaySettings, *, outcome: Any = None, reachable: bool = True) -> None:
        self.settings = settings
        self.outcome = outcome
        self.reachable = reachable
        self.requests: list[RelayRequest] = []

    async def send(self, request: RelayRequest) -> RelayResult:
        self.requests.append(request)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome

    async def ping(self) -> bool:
        return self.reachable


def _settings(*, gateway: bool = False, url: str = "ws://gw:18789", token: str = "") -> RelaySettings:
    return RelaySettings(
        agent_id="main",
        session_key="clawrelay-v1",
        gateway=GatewaySettings(
            enabled=gateway,
            url=url,
            token=token,
            connect_timeout_s=10.0,
            ack_timeout_s=15.0,
            stream_timeout_s=120.0,
            read_poll_s=5.0,
        ),
        cli=CliSettings(path_override="", home_override="", timeout_s=18.0, probe_timeout_s=10.0),
    )


def _router(bridge: FakeBridge, *, gateway: FakeGatewayClient | None = None, **kwargs: Any) -> RelayRouter:
    settings = _settings(**kwargs)
    return RelayRouter(settings, bridge=bridge, gateway=gateway or FakeGatewayClient(settings.gateway))


@pytest.mark.asyncio
async def test_cli_send_builds_agent_command() -> None:
    bridge = FakeBridge(REPLY)
    router = _router(bridge)
    attachment = AttachmentRef(file_name="a.txt", path="/tmp/a.txt", type_label="text")

    result = await router.send(router.build_request("ping", [attachment]))

    assert result.text == "pong"
    assert result.retry_count == 0
    arguments, _ = bridge.calls[0]
    assert arguments[:5] == ["agent", "--agent", "main", "--session-id", "clawrelay-v1"]
    assert arguments[5] == "--message"
    assert arguments[6].startswith("ping\n\nAttached files:\n- a.txt [text] path: /tmp/a.txt")
    assert arguments[7] == "--json"


@pytest.mark.asyncio
async def test_cli_retries_once_on_transient_failure() -> None:
    bridge = FakeBridge(RelayTimeoutError("agent CLI timed out after 18s", seconds=18.0), REPLY)
    router = _router(bridge)

    result = await router.send(router.build_request("ping"))

    assert result.text == "pong"
    assert result.retry_count == 1
    assert len(bridge.calls) == 2
    assert bridge.calls[0][0] == bridge.calls[1][0]


@pytest.mark.asyncio
async def test_cli_gives_up_after_second_transient_failure() -> None:
    bridge = FakeBridge(
        ProcessFailedError("connection reset by peer", exit_code=1),
        ProcessFailedError("connection reset by peer", exit_code=1),
        REPLY,
    )
    router = _router(bridge)

    with pytest.raises(ProcessFailedError):
        await router.send(router.build_request("ping"))
    assert len(bridge.calls) == 2


@pytest.mark.asyncio
async def test_cli_does_not_retry_permanent_failure() -> None:
    bridge = FakeBridge(ProcessFailedError("agent CLI failed (exit 2): unknown agent", exit_code=2), REPLY)
    router = _router(bridge)

    with pytest.raises(ProcessFailedError):
        await router.send(router.build_request("ping"))
    assert len(bridge.calls) == 1


@pytest.mark.asyncio
async def test_cli_empty_payloads_yield_empty_text() -> None:
    router = _router(FakeBridge(b'{"result": {"payloads": []}}'))
    result = await router.send(router.build_request("ping"))
    assert result.text == ""


@pytest.mark.asyncio
async def test_gateway_mode_never_retries() -> None:
    settings = _settings(gateway=True)
    gateway = FakeGatewayClient(settings.gateway, outcome=RelayTimeoutError("Gateway relay timed out after 120s"))
    bridge = FakeBridge(REPLY)
    router = RelayRouter(settings, bridge=bridge, gateway=gateway)

    with pytest.raises(RelayTimeoutError):
        await router.send(router.build_request("ping"))
    assert len(gateway.requests) == 1
    assert bridge.calls == []


@pytest.mark.asyncio
async def test_gateway_mode_returns_gateway_result() -> None:
    settings = _settings(gateway=True)
    gateway = FakeGatewayClient(settings.gateway, outcome=RelayResult(text="from gateway", duration_ms=5))
    router = RelayRouter(settings, bridge=FakeBridge(), gateway=gateway)

    result = await router.send(router.build_request("ping"))
    assert result.text == "from gateway"
    assert gateway.requests[0].session_key == "clawrelay-v1"


def test_rotate_session_changes_future_requests() -> None:
    router = _router(FakeBridge())
    key = router.rotate_session()

    assert key.startswith("clawrelay-")
    assert key != "clawrelay-v1"
    assert router.build_request("x").session_key == key


def test_configure_invalidates_resolver_on_path_change() -> None:
    bridge = FakeBridge()
    router = _router(bridge)
    settings = router.settings

    router.configure(replace(settings, agent_id="other"))
    assert bridge.resolver.invalidated == 0
    assert router.build_request("x").agent_id == "other"

    router.configure(replace(settings, cli=replace(settings.cli, path_override="/opt/openclaw")))
    assert bridge.resolver.invalidated == 1


@pytest.mark.asyncio
async def test_ping_cli_uses_status_probe() -> None:
    bridge = FakeBridge(b"{}", ProcessFailedError("boom"))
    router = _router(bridge)

    assert await router.ping() is True
    assert bridge.calls[0] == (["status", "--json"], 10.0)
    assert await router.ping() is False


@pytest.mark.asyncio
async def test_cli_diagnostics_reachable() -> None:
    router = _router(FakeBridge(b'{"ok": true}'))
    report = await router.diagnostics()

    assert report.mode == "cli"
    assert report.reachable is True
    assert report.cli_path == "/usr/local/bin/openclaw"
    assert report.runtime_path is None
    assert "node" in (report.detail or "")


@pytest.mark.asyncio
async def test_cli_diagnostics_reports_missing_cli() -> None:
    bridge = FakeBridge(path=ProcessNotFoundError("openclaw CLI not found", checked=("/a",)))
    report = await _router(bridge).diagnostics()

    assert report.reachable is False
    assert report.cli_path is None
    assert "not found" in (report.detail or "")


@pytest.mark.asyncio
async def test_cli_diagnostics_reports_probe_failure() -> None:
    bridge = FakeBridge(RelayError("status probe exploded"))
    report = await _router(bridge).diagnostics()

    assert report.reachable is False
    assert report.cli_path == "/usr/local/bin/openclaw"
    assert report.detail == "status probe exploded"


@pytest.mark.asyncio
async def test_gateway_diagnostics() -> None:
    settings = _settings(gateway=True, token="t")
    router = RelayRouter(settings, bridge=FakeBridge(), gateway=FakeGatewayClient(settings.gateway, reachable=False))
    report = await router.diagnostics()

    assert report.mode == "gateway"
    assert report.gateway_url == "ws://gw:18789"
    assert report.has_token is True
    assert report.reachable is False


@pytest.mark.asyncio
async def test_cli_send_through_real_process(tmp_path: Path) -> None:
    script = tmp_path / "cli" / "openclaw"
    script.parent.mkdir()
    script.write_text("#!/bin/sh\necho '{\"result\":{\"payloads\":[{\"text\":\"hello\"}]}}'\n")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    resolver = ExecutableResolver(path_override=str(script), home_override=str(tmp_path), use_login_shell=False)
    router = RelayRouter(_settings(), bridge=ProcessBridge(resolver, timeout_s=5.0))

    result = await router.send(router.build_request("hi"))

    assert result.text == "hello"
    assert result.retry_count == 0
