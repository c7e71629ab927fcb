"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clawrelay.state.settings import AppSettings
    from clawrelay.relay.router import RelayRouter
    from clawrelay.monitor.rates import RateMonitor
    from clawrelay.monitor.costs import CostEstimator
    from clawrelay.state.recent_errors import RecentErrors


@dataclass(slots=True)
class RuntimeDeps:
    router: RelayRouter
    rate_monitor: RateMonitor
    cost_estimator: CostEstimator
    recent_errors: RecentErrors
    settings: AppSettings


__all__ = ["RuntimeDeps"]
