"""Inbound gateway frames, decoded into a small tagged union.

Decoding is schema-tolerant: unknown fields are ignored and missing optional
fields become None, so newer gateways keep working.
"""

from __future__ import annotations

from typing import Any
from dataclasses import field, dataclass

import orjson

from clawrelay.errors import ProtocolViolationError
from clawrelay.config.gateway import (
    GW_KEY_ID,
    GW_KEY_OK,
    GW_KEY_TYPE,
    GW_KEY_ERROR,
    GW_KEY_EVENT,
    GW_EVENT_CHAT,
    GW_TYPE_EVENT,
    GW_KEY_PAYLOAD,
    GW_EVENT_AGENT,
    GW_TYPE_RESPONSE,
    GW_EVENT_CHALLENGE,
)


@dataclass(frozen=True, slots=True)
class GatewayResponse:
    id: str
    ok: bool
    payload: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class ChallengeEvent:
    nonce: str | None = None


@dataclass(frozen=True, slots=True)
class ChatEvent:
    run_id: str | None
    state: str | None = None
    text: str | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class AgentEvent:
    run_id: str | None
    stream: str | None = None
    phase: str | None = None
    text: str | None = None


@dataclass(frozen=True, slots=True)
class GatewayEvent:
    name: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class UnknownFrame:
    frame_type: str | None


InboundFrame = GatewayResponse | ChallengeEvent | ChatEvent | AgentEvent | GatewayEvent | UnknownFrame


def _str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _error_message(error: Any) -> str | None:
    if isinstance(error, str):
        return error
    if isinstance(error, dict):
        return _str(error.get("message")) or _str(error.get("code"))
    return None


def first_text_content(message: Any) -> str | None:
    """First `text`-typed content item of a chat message body."""
    if isinstance(message, str):
        return message
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        for item in content:
            if isinstance(item, dict) and item.get("type") == "text" and isinstance(item.get("text"), str):
                return item["text"]
    return _str(message.get("text"))


def _parse_response(msg: dict[str, Any]) -> GatewayResponse:
    request_id = _str(msg.get(GW_KEY_ID))
    if not request_id:
        raise ProtocolViolationError("gateway response missing 'id'")
    error_message = _error_message(msg.get(GW_KEY_ERROR))
    ok = msg.get(GW_KEY_OK)
    if not isinstance(ok, bool):
        ok = msg.get(GW_KEY_ERROR) is None
    return GatewayResponse(
        id=request_id,
        ok=ok,
        payload=_dict(msg.get(GW_KEY_PAYLOAD)),
        error_message=error_message,
    )


def _parse_event(msg: dict[str, Any]) -> InboundFrame:
    name = _str(msg.get(GW_KEY_EVENT)) or ""
    payload = _dict(msg.get(GW_KEY_PAYLOAD))

    if name == GW_EVENT_CHALLENGE:
        return ChallengeEvent(nonce=_str(payload.get("nonce")))

    if name == GW_EVENT_CHAT:
        return ChatEvent(
            run_id=_str(payload.get("runId")),
            state=_str(payload.get("state")),
            text=first_text_content(payload.get("message")),
            error_message=_str(payload.get("errorMessage")),
        )

    if name == GW_EVENT_AGENT:
        data = _dict(payload.get("data"))
        return AgentEvent(
            run_id=_str(payload.get("runId")),
            stream=_str(payload.get("stream")),
            phase=_str(data.get("phase")),
            text=_str(data.get("text")),
        )

    return GatewayEvent(name=name, payload=payload)


def parse_frame(raw: str | bytes) -> InboundFrame:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ProtocolViolationError(f"gateway sent invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ProtocolViolationError("gateway frame must be a JSON object")

    frame_type = _str(msg.get(GW_KEY_TYPE))
    if frame_type == GW_TYPE_RESPONSE:
        return _parse_response(msg)
    if frame_type == GW_TYPE_EVENT:
        return _parse_event(msg)
    return UnknownFrame(frame_type=frame_type)


def describe_frame(frame: InboundFrame) -> str:
    if isinstance(frame, GatewayResponse):
        return f"response id={frame.id}"
    if isinstance(frame, ChallengeEvent):
        return "event connect.challenge"
    if isinstance(frame, ChatEvent):
        return "event chat"
    if isinstance(frame, AgentEvent):
        return "event agent"
    if isinstance(frame, GatewayEvent):
        return f"event {frame.name or '<unnamed>'}"
    return f"frame type={frame.frame_type!r}"


__all__ = [
    "AgentEvent",
    "ChallengeEvent",
    "ChatEvent",
    "GatewayEvent",
    "GatewayResponse",
    "InboundFrame",
    "UnknownFrame",
    "describe_frame",
    "first_text_content",
    "parse_frame",
]
