"""Gateway relay: one WebSocket session per `chat.send` exchange.

Per call the session walks connect -> connect.challenge -> connect request ->
hello response -> chat.send -> ack (run id) -> chat/agent events for that
run. Only events carrying the active run id are considered; the gateway may
multiplex unrelated sessions on the same socket.
"""

from __future__ import annotations

import time
import asyncio
import logging
from typing import Any
from contextlib import suppress
from collections.abc import Callable

from clawrelay.errors import (
    RelayError,
    NetworkError,
    AuthFailedError,
    RelayTimeoutError,
    ProtocolViolationError,
)
from clawrelay.state.relay import RelayResult, RelayRequest
from clawrelay.state.gateway import GatewayPhase, GatewaySession
from clawrelay.relay.compose import build_relay_text
from clawrelay.state.settings import GatewaySettings
from clawrelay.config.gateway import (
    GW_METHOD_CONNECT,
    GW_AGENT_PHASE_END,
    GW_CHAT_STATE_FINAL,
    GW_METHOD_CHAT_SEND,
    GW_AGENT_STREAM_ASSISTANT,
    GW_AGENT_STREAM_LIFECYCLE,
    GW_CHAT_TERMINAL_ERROR_STATES,
)

from .messages import (
    ChatEvent,
    AgentEvent,
    InboundFrame,
    ChallengeEvent,
    GatewayResponse,
    parse_frame,
    describe_frame,
)
from .protocol import (
    encode_frame,
    new_request_id,
    origin_for_url,
    build_request_frame,
    compose_session_key,
    build_connect_params,
    normalize_gateway_url,
    build_chat_send_params,
)
from .transport import Connector, GatewayTransport, connect_websocket

logger = logging.getLogger(__name__)

TEXT_SOURCE_CHAT = "chat"
TEXT_SOURCE_AGENT = "agent"


class GatewayClient:
    def __init__(self, settings: GatewaySettings, *, connector: Connector | None = None) -> None:
        self.settings = settings
        self._connector = connector or connect_websocket

    async def send(self, request: RelayRequest) -> RelayResult:
        url = normalize_gateway_url(self.settings.url)
        start = time.perf_counter()
        session = GatewaySession()

        transport = await self._open(url)
        try:
            await self._handshake(transport, session)
            await self._dispatch_chat(transport, session, request)
            text = await self._stream_reply(transport, session)
        except RelayError:
            session.fail()
            raise
        except OSError as exc:
            session.fail()
            raise NetworkError(f"gateway transport error: {exc}") from exc
        finally:
            await self._close(transport)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info("gateway: run %s done in %dms (%d chars)", session.active_run_id, elapsed_ms, len(text))
        return RelayResult(text=text.strip(), retry_count=0, duration_ms=elapsed_ms)

    async def ping(self) -> bool:
        """Connect and authenticate only. Never raises."""
        try:
            transport = await self._open(normalize_gateway_url(self.settings.url))
        except Exception as exc:
            logger.debug("gateway: ping connect failed: %s", exc)
            return False

        try:
            await self._handshake(transport, GatewaySession())
        except Exception as exc:
            logger.debug("gateway: ping handshake failed: %s", exc)
            return False
        finally:
            await self._close(transport)
        return True

    async def _open(self, url: str) -> GatewayTransport:
        timeout_s = self.settings.connect_timeout_s
        try:
            async with asyncio.timeout(timeout_s):
                return await self._connector(url, origin=origin_for_url(url), open_timeout_s=timeout_s)
        except TimeoutError as exc:
            raise RelayTimeoutError(f"gateway connect timed out after {timeout_s:g}s", seconds=timeout_s) from exc
        except OSError as exc:
            raise NetworkError(f"gateway connect failed: {exc}") from exc

    @staticmethod
    async def _close(transport: GatewayTransport) -> None:
        with suppress(Exception):
            await transport.close()

    @staticmethod
    async def _send_frame(transport: GatewayTransport, frame: dict[str, Any]) -> None:
        await transport.send(encode_frame(frame))

    async def _poll(self, transport: GatewayTransport, deadline: float) -> InboundFrame | None:
        """Next frame, or None when the per-read poll elapsed without one."""
        remaining = deadline - asyncio.get_running_loop().time()
        wait_s = max(0.0, min(self.settings.read_poll_s, remaining))
        try:
            async with asyncio.timeout(wait_s):
                raw = await transport.recv()
        except TimeoutError:
            return None
        frame = parse_frame(raw)
        logger.debug("gateway: recv %s", describe_frame(frame))
        return frame

    async def _next_frame(self, transport: GatewayTransport, deadline: float, *, what: str) -> InboundFrame:
        loop = asyncio.get_running_loop()
        while loop.time() < deadline:
            frame = await self._poll(transport, deadline)
            if frame is not None:
                return frame
        raise RelayTimeoutError(f"gateway {what} timed out", seconds=self.settings.connect_timeout_s)

    async def _await_response(
        self,
        transport: GatewayTransport,
        request_id: str,
        deadline: float,
        *,
        what: str,
        timeout_s: float,
        on_other: Callable[[InboundFrame], None] | None = None,
    ) -> GatewayResponse:
        loop = asyncio.get_running_loop()
        while loop.time() < deadline:
            frame = await self._poll(transport, deadline)
            if frame is None:
                continue
            if isinstance(frame, GatewayResponse) and frame.id == request_id:
                return frame
            if on_other is not None:
                on_other(frame)
        raise RelayTimeoutError(f"gateway {what} timed out after {timeout_s:g}s", seconds=timeout_s)

    async def _handshake(self, transport: GatewayTransport, session: GatewaySession) -> None:
        timeout_s = self.settings.connect_timeout_s
        deadline = asyncio.get_running_loop().time() + timeout_s

        session.advance(GatewayPhase.AWAITING_CHALLENGE)
        first = await self._next_frame(transport, deadline, what="connect.challenge")
        if not isinstance(first, ChallengeEvent):
            raise ProtocolViolationError(f"expected connect.challenge, got {describe_frame(first)}")

        session.advance(GatewayPhase.AUTHENTICATING)
        connect_id = new_request_id()
        await self._send_frame(
            transport,
            build_request_frame(GW_METHOD_CONNECT, build_connect_params(self.settings.token), connect_id),
        )

        session.advance(GatewayPhase.AWAITING_HELLO)
        hello = await self._await_response(transport, connect_id, deadline, what="connect", timeout_s=timeout_s)
        if not hello.ok:
            raise AuthFailedError(f"Gateway auth failed: {hello.error_message or 'connect rejected'}")

    async def _dispatch_chat(
        self,
        transport: GatewayTransport,
        session: GatewaySession,
        request: RelayRequest,
    ) -> None:
        request_id = new_request_id()
        session.pending_request_id = request_id
        params = build_chat_send_params(
            session_key=compose_session_key(request.agent_id, request.session_key),
            message=build_relay_text(request.text, request.attachments),
            idempotency_key=request_id,
        )
        await self._send_frame(transport, build_request_frame(GW_METHOD_CHAT_SEND, params, request_id))
        session.advance(GatewayPhase.REQUEST_SENT)

        timeout_s = self.settings.ack_timeout_s
        deadline = asyncio.get_running_loop().time() + timeout_s
        session.advance(GatewayPhase.AWAITING_ACK)
        # Events for our run can race ahead of the ack; keep them for replay.
        ack = await self._await_response(
            transport,
            request_id,
            deadline,
            what="chat.send ack",
            timeout_s=timeout_s,
            on_other=session.early_events.append,
        )
        if not ack.ok:
            raise ProtocolViolationError(f"chat.send failed: {ack.error_message or 'rejected'}")

        run_id = ack.payload.get("runId")
        if not isinstance(run_id, str) or not run_id:
            raise ProtocolViolationError("chat.send ack carried no runId")
        session.active_run_id = run_id
        session.pending_request_id = None
        logger.debug("gateway: chat.send acknowledged run=%s", run_id)

    async def _stream_reply(self, transport: GatewayTransport, session: GatewaySession) -> str:
        session.advance(GatewayPhase.STREAMING)
        early, session.early_events = session.early_events, []
        for frame in early:
            apply_run_event(session, frame)

        timeout_s = self.settings.stream_timeout_s
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_s
        while not session.completed and loop.time() < deadline:
            frame = await self._poll(transport, deadline)
            if frame is not None:
                apply_run_event(session, frame)

        if session.completed:
            return session.accumulated_text
        if not session.accumulated_text:
            raise RelayTimeoutError(f"Gateway relay timed out after {timeout_s:g}s", seconds=timeout_s)

        logger.warning(
            "gateway: run %s incomplete after %.0fs; returning %d chars of partial text",
            session.active_run_id,
            timeout_s,
            len(session.accumulated_text),
        )
        session.complete()
        return session.accumulated_text


def apply_run_event(session: GatewaySession, frame: InboundFrame) -> None:
    """Fold one inbound frame into the session; frames for other runs are ignored."""
    if isinstance(frame, ChatEvent):
        if frame.run_id != session.active_run_id:
            return
        if frame.text:
            session.accumulated_text = frame.text
            session.text_source = TEXT_SOURCE_CHAT
        if frame.state == GW_CHAT_STATE_FINAL:
            session.complete()
        elif frame.state in GW_CHAT_TERMINAL_ERROR_STATES:
            if not session.accumulated_text:
                raise ProtocolViolationError(f"agent run {frame.state}: {frame.error_message or 'no reply'}")
            session.complete()
        return

    if isinstance(frame, AgentEvent):
        if frame.run_id != session.active_run_id:
            return
        if frame.stream == GW_AGENT_STREAM_LIFECYCLE and frame.phase == GW_AGENT_PHASE_END:
            session.complete()
        elif frame.stream == GW_AGENT_STREAM_ASSISTANT and frame.text and session.text_source != TEXT_SOURCE_CHAT:
            session.accumulated_text = frame.text
            session.text_source = TEXT_SOURCE_AGENT


__all__ = ["GatewayClient", "apply_run_event"]
