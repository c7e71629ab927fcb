"""Duplex-socket transport for the gateway client."""

from __future__ import annotations

import socket as _sock
from typing import Protocol
from contextlib import suppress
from collections.abc import Awaitable, Callable

import websockets
from websockets.exceptions import InvalidURI, ConnectionClosed, InvalidHandshake

from clawrelay.errors import NetworkError
from clawrelay.config.gateway import GATEWAY_MAX_MESSAGE_BYTES


class GatewayTransport(Protocol):
    async def send(self, text: str) -> None: ...

    async def recv(self) -> str | bytes: ...

    async def close(self) -> None: ...


Connector = Callable[..., Awaitable[GatewayTransport]]


def enable_tcp_nodelay(ws) -> None:
    """Best-effort enable TCP_NODELAY on a websockets connection transport."""
    transport = getattr(ws, "transport", None)
    if transport is not None:
        sock = transport.get_extra_info("socket")
        if sock is not None:
            with suppress(Exception):
                sock.setsockopt(_sock.IPPROTO_TCP, _sock.TCP_NODELAY, 1)


class WebSocketTransport:
    def __init__(self, ws) -> None:
        self._ws = ws

    async def send(self, text: str) -> None:
        try:
            await self._ws.send(text)
        except ConnectionClosed as exc:
            raise NetworkError(f"gateway connection closed: {exc}") from exc

    async def recv(self) -> str | bytes:
        try:
            return await self._ws.recv()
        except ConnectionClosed as exc:
            raise NetworkError(f"gateway connection closed: {exc}") from exc

    async def close(self) -> None:
        await self._ws.close()


async def connect_websocket(url: str, *, origin: str, open_timeout_s: float) -> WebSocketTransport:
    try:
        ws = await websockets.connect(
            url,
            origin=origin,
            open_timeout=open_timeout_s,
            max_size=GATEWAY_MAX_MESSAGE_BYTES,
        )
    except InvalidURI as exc:
        raise NetworkError(f"Invalid gateway URL: {url}") from exc
    except InvalidHandshake as exc:
        raise NetworkError(f"gateway handshake failed: {exc}") from exc
    enable_tcp_nodelay(ws)
    return WebSocketTransport(ws)


__all__ = ["Connector", "GatewayTransport", "WebSocketTransport", "connect_websocket", "enable_tcp_nodelay"]
