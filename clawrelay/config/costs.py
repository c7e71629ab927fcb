"""Upstream API cost assumptions (env names and defaults).

Defaults follow the published OpenAI audio pricing; every rate can be
overridden from the environment without code changes.
"""

from __future__ import annotations

ENV_COST_STT_USD_PER_MINUTE = "CLAWRELAY_COST_STT_USD_PER_MINUTE"
ENV_COST_TTS_BASELINE_USD_PER_1M_CHARS = "CLAWRELAY_COST_TTS_BASELINE_USD_PER_1M_CHARS"
ENV_COST_TTS_HD_USD_PER_1M_CHARS = "CLAWRELAY_COST_TTS_HD_USD_PER_1M_CHARS"
ENV_COST_TTS_LOW_LATENCY_USD_PER_MINUTE = "CLAWRELAY_COST_TTS_LOW_LATENCY_USD_PER_MINUTE"
ENV_COST_TTS_CHARS_PER_MINUTE = "CLAWRELAY_COST_TTS_CHARS_PER_MINUTE"

DEFAULT_STT_USD_PER_MINUTE = 0.006
DEFAULT_TTS_BASELINE_USD_PER_1M_CHARS = 15.0
DEFAULT_TTS_HD_USD_PER_1M_CHARS = 30.0
DEFAULT_TTS_LOW_LATENCY_USD_PER_MINUTE = 0.015
DEFAULT_TTS_CHARS_PER_MINUTE = 780.0

# Model prefixes selecting the TTS pricing tier; anything else is baseline.
TTS_LOW_LATENCY_MODEL_PREFIX = "gpt-4o-mini-tts"
TTS_HD_MODEL_PREFIX = "tts-1-hd"

CHARS_PER_MILLION = 1_000_000.0
SECONDS_PER_MINUTE = 60.0

__all__ = [
    "CHARS_PER_MILLION",
    "DEFAULT_STT_USD_PER_MINUTE",
    "DEFAULT_TTS_BASELINE_USD_PER_1M_CHARS",
    "DEFAULT_TTS_CHARS_PER_MINUTE",
    "DEFAULT_TTS_HD_USD_PER_1M_CHARS",
    "DEFAULT_TTS_LOW_LATENCY_USD_PER_MINUTE",
    "ENV_COST_STT_USD_PER_MINUTE",
    "ENV_COST_TTS_BASELINE_USD_PER_1M_CHARS",
    "ENV_COST_TTS_CHARS_PER_MINUTE",
    "ENV_COST_TTS_HD_USD_PER_1M_CHARS",
    "ENV_COST_TTS_LOW_LATENCY_USD_PER_MINUTE",
    "SECONDS_PER_MINUTE",
    "TTS_HD_MODEL_PREFIX",
    "TTS_LOW_LATENCY_MODEL_PREFIX",
]
