"""Environment parsing for runtime settings.

Env names and defaults live in `clawrelay/config/*`; this module resolves them
into the frozen dataclasses the rest of the package receives explicitly.
"""

from __future__ import annotations

import os

from clawrelay.config.server import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT
from clawrelay.config.relay import (
    ENV_AGENT_ID,
    ENV_SESSION_KEY,
    DEFAULT_AGENT_ID,
    DEFAULT_SESSION_KEY,
)
from clawrelay.state.settings import (
    AppSettings,
    CliSettings,
    CostSettings,
    RelaySettings,
    ServerSettings,
    GatewaySettings,
)
from clawrelay.config.costs import (
    DEFAULT_STT_USD_PER_MINUTE,
    ENV_COST_STT_USD_PER_MINUTE,
    DEFAULT_TTS_CHARS_PER_MINUTE,
    ENV_COST_TTS_CHARS_PER_MINUTE,
    DEFAULT_TTS_HD_USD_PER_1M_CHARS,
    ENV_COST_TTS_HD_USD_PER_1M_CHARS,
    DEFAULT_TTS_BASELINE_USD_PER_1M_CHARS,
    ENV_COST_TTS_BASELINE_USD_PER_1M_CHARS,
    DEFAULT_TTS_LOW_LATENCY_USD_PER_MINUTE,
    ENV_COST_TTS_LOW_LATENCY_USD_PER_MINUTE,
)
from clawrelay.config.process import (
    ENV_CLI_HOME,
    ENV_CLI_PATH,
    ENV_CLI_TIMEOUT_S,
    DEFAULT_CLI_TIMEOUT_S,
    ENV_CLI_PROBE_TIMEOUT_S,
    DEFAULT_CLI_PROBE_TIMEOUT_S,
)
from clawrelay.config.gateway import (
    ENV_GATEWAY_URL,
    ENV_GATEWAY_TOKEN,
    ENV_GATEWAY_ENABLED,
    DEFAULT_GATEWAY_ENABLED,
    ENV_GATEWAY_READ_POLL_S,
    ENV_GATEWAY_ACK_TIMEOUT_S,
    DEFAULT_GATEWAY_READ_POLL_S,
    DEFAULT_GATEWAY_ACK_TIMEOUT_S,
    ENV_GATEWAY_STREAM_TIMEOUT_S,
    ENV_GATEWAY_CONNECT_TIMEOUT_S,
    DEFAULT_GATEWAY_STREAM_TIMEOUT_S,
    DEFAULT_GATEWAY_CONNECT_TIMEOUT_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _positive_float_env(name: str, default: float) -> float:
    value = _float_env(name, default)
    return value if value > 0 else default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _load_gateway_settings() -> GatewaySettings:
    return GatewaySettings(
        enabled=_bool_env(ENV_GATEWAY_ENABLED, DEFAULT_GATEWAY_ENABLED),
        url=_str_env(ENV_GATEWAY_URL, ""),
        token=_str_env(ENV_GATEWAY_TOKEN, ""),
        connect_timeout_s=_positive_float_env(ENV_GATEWAY_CONNECT_TIMEOUT_S, DEFAULT_GATEWAY_CONNECT_TIMEOUT_S),
        ack_timeout_s=_positive_float_env(ENV_GATEWAY_ACK_TIMEOUT_S, DEFAULT_GATEWAY_ACK_TIMEOUT_S),
        stream_timeout_s=_positive_float_env(ENV_GATEWAY_STREAM_TIMEOUT_S, DEFAULT_GATEWAY_STREAM_TIMEOUT_S),
        read_poll_s=_positive_float_env(ENV_GATEWAY_READ_POLL_S, DEFAULT_GATEWAY_READ_POLL_S),
    )


def _load_cli_settings() -> CliSettings:
    return CliSettings(
        path_override=_str_env(ENV_CLI_PATH, ""),
        home_override=_str_env(ENV_CLI_HOME, ""),
        timeout_s=_positive_float_env(ENV_CLI_TIMEOUT_S, DEFAULT_CLI_TIMEOUT_S),
        probe_timeout_s=_positive_float_env(ENV_CLI_PROBE_TIMEOUT_S, DEFAULT_CLI_PROBE_TIMEOUT_S),
    )


def load_relay_settings() -> RelaySettings:
    return RelaySettings(
        agent_id=_str_env(ENV_AGENT_ID, DEFAULT_AGENT_ID),
        session_key=_str_env(ENV_SESSION_KEY, DEFAULT_SESSION_KEY),
        gateway=_load_gateway_settings(),
        cli=_load_cli_settings(),
    )


def load_cost_settings() -> CostSettings:
    return CostSettings(
        stt_usd_per_minute=_positive_float_env(ENV_COST_STT_USD_PER_MINUTE, DEFAULT_STT_USD_PER_MINUTE),
        tts_baseline_usd_per_1m_chars=_positive_float_env(
            ENV_COST_TTS_BASELINE_USD_PER_1M_CHARS, DEFAULT_TTS_BASELINE_USD_PER_1M_CHARS
        ),
        tts_hd_usd_per_1m_chars=_positive_float_env(ENV_COST_TTS_HD_USD_PER_1M_CHARS, DEFAULT_TTS_HD_USD_PER_1M_CHARS),
        tts_low_latency_usd_per_minute=_positive_float_env(
            ENV_COST_TTS_LOW_LATENCY_USD_PER_MINUTE, DEFAULT_TTS_LOW_LATENCY_USD_PER_MINUTE
        ),
        tts_chars_per_minute=_positive_float_env(ENV_COST_TTS_CHARS_PER_MINUTE, DEFAULT_TTS_CHARS_PER_MINUTE),
    )


def _load_server_settings() -> ServerSettings:
    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_int_env(ENV_PORT, DEFAULT_PORT),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        relay=load_relay_settings(),
        costs=load_cost_settings(),
        server=_load_server_settings(),
    )


__all__ = ["load_cost_settings", "load_relay_settings", "load_settings"]
