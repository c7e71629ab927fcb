"""Gateway protocol configuration and constants."""

from __future__ import annotations

ENV_GATEWAY_ENABLED = "CLAWRELAY_GATEWAY_ENABLED"
ENV_GATEWAY_URL = "CLAWRELAY_GATEWAY_URL"
ENV_GATEWAY_TOKEN = "CLAWRELAY_GATEWAY_TOKEN"
ENV_GATEWAY_CONNECT_TIMEOUT_S = "CLAWRELAY_GATEWAY_CONNECT_TIMEOUT_S"
ENV_GATEWAY_ACK_TIMEOUT_S = "CLAWRELAY_GATEWAY_ACK_TIMEOUT_S"
ENV_GATEWAY_STREAM_TIMEOUT_S = "CLAWRELAY_GATEWAY_STREAM_TIMEOUT_S"
ENV_GATEWAY_READ_POLL_S = "CLAWRELAY_GATEWAY_READ_POLL_S"

DEFAULT_GATEWAY_ENABLED = False
DEFAULT_GATEWAY_CONNECT_TIMEOUT_S = 10.0
DEFAULT_GATEWAY_ACK_TIMEOUT_S = 15.0
DEFAULT_GATEWAY_STREAM_TIMEOUT_S = 120.0
DEFAULT_GATEWAY_READ_POLL_S = 5.0

GATEWAY_MAX_MESSAGE_BYTES = 16 * 1024 * 1024

# Frame keys
GW_KEY_TYPE = "type"
GW_KEY_ID = "id"
GW_KEY_METHOD = "method"
GW_KEY_PARAMS = "params"
GW_KEY_OK = "ok"
GW_KEY_PAYLOAD = "payload"
GW_KEY_ERROR = "error"
GW_KEY_EVENT = "event"

# Frame types
GW_TYPE_REQUEST = "req"
GW_TYPE_RESPONSE = "res"
GW_TYPE_EVENT = "event"

# Methods and events
GW_METHOD_CONNECT = "connect"
GW_METHOD_CHAT_SEND = "chat.send"
GW_EVENT_CHALLENGE = "connect.challenge"
GW_EVENT_CHAT = "chat"
GW_EVENT_AGENT = "agent"

GW_CHAT_STATE_FINAL = "final"
GW_CHAT_TERMINAL_ERROR_STATES = frozenset({"error", "aborted"})
GW_AGENT_STREAM_LIFECYCLE = "lifecycle"
GW_AGENT_STREAM_ASSISTANT = "assistant"
GW_AGENT_PHASE_END = "end"

# Handshake
GW_PROTOCOL_VERSION = 3
GW_CLIENT_ID = "clawrelay"
GW_CLIENT_DISPLAY_NAME = "ClawRelay"
GW_CLIENT_VERSION = "0.1.0"
GW_CLIENT_MODE = "backend"
GW_CLIENT_ROLE = "operator"
GW_CLIENT_SCOPES = ("operator.read", "operator.write")

__all__ = [
    "DEFAULT_GATEWAY_ACK_TIMEOUT_S",
    "DEFAULT_GATEWAY_CONNECT_TIMEOUT_S",
    "DEFAULT_GATEWAY_ENABLED",
    "DEFAULT_GATEWAY_READ_POLL_S",
    "DEFAULT_GATEWAY_STREAM_TIMEOUT_S",
    "ENV_GATEWAY_ACK_TIMEOUT_S",
    "ENV_GATEWAY_CONNECT_TIMEOUT_S",
    "ENV_GATEWAY_ENABLED",
    "ENV_GATEWAY_READ_POLL_S",
    "ENV_GATEWAY_STREAM_TIMEOUT_S",
    "ENV_GATEWAY_TOKEN",
    "ENV_GATEWAY_URL",
    "GATEWAY_MAX_MESSAGE_BYTES",
    "GW_AGENT_PHASE_END",
    "GW_AGENT_STREAM_ASSISTANT",
    "GW_AGENT_STREAM_LIFECYCLE",
    "GW_CHAT_STATE_FINAL",
    "GW_CHAT_TERMINAL_ERROR_STATES",
    "GW_CLIENT_DISPLAY_NAME",
    "GW_CLIENT_ID",
    "GW_CLIENT_MODE",
    "GW_CLIENT_ROLE",
    "GW_CLIENT_SCOPES",
    "GW_CLIENT_VERSION",
    "GW_EVENT_AGENT",
    "GW_EVENT_CHALLENGE",
    "GW_EVENT_CHAT",
    "GW_KEY_ERROR",
    "GW_KEY_EVENT",
    "GW_KEY_ID",
    "GW_KEY_METHOD",
    "GW_KEY_OK",
    "GW_KEY_PARAMS",
    "GW_KEY_PAYLOAD",
    "GW_KEY_TYPE",
    "GW_METHOD_CHAT_SEND",
    "GW_METHOD_CONNECT",
    "GW_PROTOCOL_VERSION",
    "GW_TYPE_EVENT",
    "GW_TYPE_REQUEST",
    "GW_TYPE_RESPONSE",
]
