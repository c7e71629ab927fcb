"""Bounded log of recent relay failures for the diagnostics export."""

from __future__ import annotations

import threading
import collections
from datetime import datetime

from clawrelay.config.relay import RECENT_ERRORS_MAX


class RecentErrors:
    def __init__(self, *, max_entries: int = RECENT_ERRORS_MAX) -> None:
        self._entries: collections.deque[str] = collections.deque(maxlen=max(1, int(max_entries)))
        self._lock = threading.Lock()

    def append(self, message: str, *, at: datetime | None = None) -> None:
        ts = (at or datetime.now()).strftime("%H:%M:%S")
        with self._lock:
            self._entries.append(f"[{ts}] {message}")

    def entries(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["RecentErrors"]
