from .client import GatewayClient, apply_run_event
from .messages import (
    ChatEvent,
    AgentEvent,
    GatewayEvent,
    InboundFrame,
    UnknownFrame,
    ChallengeEvent,
    GatewayResponse,
    parse_frame,
)
from .protocol import origin_for_url, compose_session_key, normalize_gateway_url
from .transport import GatewayTransport, WebSocketTransport, connect_websocket

__all__ = [
    "AgentEvent",
    "ChallengeEvent",
    "ChatEvent",
    "GatewayClient",
    "GatewayEvent",
    "GatewayResponse",
    "GatewayTransport",
    "InboundFrame",
    "UnknownFrame",
    "WebSocketTransport",
    "apply_run_event",
    "compose_session_key",
    "connect_websocket",
    "normalize_gateway_url",
    "origin_for_url",
    "parse_frame",
]
