"""Gateway request framing and handshake parameters (protocol v3)."""

from __future__ import annotations

import sys
import uuid
from typing import Any
from urllib.parse import urlparse, urlunparse

import orjson

from clawrelay.errors import NetworkError
from clawrelay.config.gateway import (
    GW_KEY_ID,
    GW_KEY_TYPE,
    GW_CLIENT_ID,
    GW_KEY_METHOD,
    GW_KEY_PARAMS,
    GW_CLIENT_MODE,
    GW_CLIENT_ROLE,
    GW_CLIENT_VERSION,
    GW_TYPE_REQUEST,
    GW_CLIENT_SCOPES,
    GW_PROTOCOL_VERSION,
    GW_CLIENT_DISPLAY_NAME,
)

_WS_SCHEMES = {"ws": "ws", "wss": "wss", "http": "ws", "https": "wss"}
_ORIGIN_SCHEMES = {"ws": "http", "wss": "https"}


def normalize_gateway_url(url: str) -> str:
    """Return a ws:// or wss:// URL, mapping http(s) to its WebSocket scheme."""
    url = (url or "").strip()
    if not url:
        raise NetworkError("Gateway URL is not configured")
    parsed = urlparse(url)
    scheme = _WS_SCHEMES.get(parsed.scheme.lower())
    if scheme is None or not parsed.hostname:
        raise NetworkError(f"Invalid gateway URL: {url}")
    return urlunparse((scheme, parsed.netloc, parsed.path, parsed.params, parsed.query, parsed.fragment))


def origin_for_url(url: str) -> str:
    """Origin header for a gateway URL: scheme mapped to HTTP, host and explicit port kept."""
    parsed = urlparse(url)
    scheme = _ORIGIN_SCHEMES.get(parsed.scheme.lower(), parsed.scheme.lower() or "http")
    host = parsed.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if parsed.port is not None:
        host = f"{host}:{parsed.port}"
    return f"{scheme}://{host}"


def compose_session_key(agent_id: str, session_key: str) -> str:
    return f"agent:{agent_id}:{session_key}"


def new_request_id() -> str:
    return str(uuid.uuid4())


def build_request_frame(method: str, params: dict[str, Any], request_id: str) -> dict[str, Any]:
    return {
        GW_KEY_TYPE: GW_TYPE_REQUEST,
        GW_KEY_ID: request_id,
        GW_KEY_METHOD: method,
        GW_KEY_PARAMS: params,
    }


def build_connect_params(token: str) -> dict[str, Any]:
    params: dict[str, Any] = {
        "minProtocol": GW_PROTOCOL_VERSION,
        "maxProtocol": GW_PROTOCOL_VERSION,
        "client": {
            "id": GW_CLIENT_ID,
            "displayName": GW_CLIENT_DISPLAY_NAME,
            "version": GW_CLIENT_VERSION,
            "platform": sys.platform,
            "mode": GW_CLIENT_MODE,
        },
        "role": GW_CLIENT_ROLE,
        "scopes": list(GW_CLIENT_SCOPES),
    }
    token = (token or "").strip()
    if token:
        params["auth"] = {"token": token}
    return params


def build_chat_send_params(*, session_key: str, message: str, idempotency_key: str) -> dict[str, Any]:
    return {
        "sessionKey": session_key,
        "message": message,
        "idempotencyKey": idempotency_key,
    }


def encode_frame(frame: dict[str, Any]) -> str:
    return orjson.dumps(frame).decode("utf-8")


__all__ = [
    "build_chat_send_params",
    "build_connect_params",
    "build_request_frame",
    "compose_session_key",
    "encode_frame",
    "new_request_id",
    "normalize_gateway_url",
    "origin_for_url",
]
