"""Cost estimates for metered speech calls."""

from __future__ import annotations

from clawrelay.state.rates import RateRecord
from clawrelay.state.settings import CostSettings
from clawrelay.config.costs import (
    CHARS_PER_MILLION,
    DEFAULT_TTS_CHARS_PER_MINUTE,
    SECONDS_PER_MINUTE,
    TTS_HD_MODEL_PREFIX,
    TTS_LOW_LATENCY_MODEL_PREFIX,
)


class CostEstimator:
    def __init__(self, rates: CostSettings) -> None:
        self.rates = rates

    def stt_estimate(self, duration_s: float) -> float:
        minutes = max(0.0, float(duration_s)) / SECONDS_PER_MINUTE
        return minutes * self.rates.stt_usd_per_minute

    def tts_estimate(self, characters: int, model: str) -> float:
        chars = float(max(0, int(characters)))
        if model.startswith(TTS_LOW_LATENCY_MODEL_PREFIX):
            chars_per_minute = self.rates.tts_chars_per_minute
            if chars_per_minute <= 0:
                chars_per_minute = DEFAULT_TTS_CHARS_PER_MINUTE
            minutes = chars / chars_per_minute
            return minutes * self.rates.tts_low_latency_usd_per_minute
        if model.startswith(TTS_HD_MODEL_PREFIX):
            return (chars / CHARS_PER_MILLION) * self.rates.tts_hd_usd_per_1m_chars
        return (chars / CHARS_PER_MILLION) * self.rates.tts_baseline_usd_per_1m_chars

    def estimate_record(self, record: RateRecord) -> float:
        """Explicit cost wins, then STT duration, then TTS characters."""
        if record.estimated_cost_usd is not None:
            return record.estimated_cost_usd
        if record.stt_duration_s is not None:
            return self.stt_estimate(record.stt_duration_s)
        if record.tts_characters is not None:
            return self.tts_estimate(record.tts_characters, record.tts_model)
        return 0.0

    def describe(self) -> str:
        r = self.rates
        return (
            f"Cost assumptions: STT/min={r.stt_usd_per_minute:.6f}, "
            f"TTS baseline/1M chars={r.tts_baseline_usd_per_1m_chars:.3f}, "
            f"TTS HD/1M chars={r.tts_hd_usd_per_1m_chars:.3f}, "
            f"TTS low-latency/min={r.tts_low_latency_usd_per_minute:.6f}, "
            f"chars/min={r.tts_chars_per_minute:.1f}"
        )


__all__ = ["CostEstimator"]
