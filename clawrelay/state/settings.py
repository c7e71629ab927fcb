"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GatewaySettings:
    enabled: bool
    url: str
    token: str
    connect_timeout_s: float
    ack_timeout_s: float
    stream_timeout_s: float
    read_poll_s: float


@dataclass(frozen=True, slots=True)
class CliSettings:
    path_override: str
    home_override: str
    timeout_s: float
    probe_timeout_s: float


@dataclass(frozen=True, slots=True)
class RelaySettings:
    agent_id: str
    session_key: str
    gateway: GatewaySettings
    cli: CliSettings


@dataclass(frozen=True, slots=True)
class CostSettings:
    stt_usd_per_minute: float
    tts_baseline_usd_per_1m_chars: float
    tts_hd_usd_per_1m_chars: float
    tts_low_latency_usd_per_minute: float
    tts_chars_per_minute: float


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    relay: RelaySettings
    costs: CostSettings
    server: ServerSettings


__all__ = [
    "AppSettings",
    "CliSettings",
    "CostSettings",
    "GatewaySettings",
    "RelaySettings",
    "ServerSettings",
]
