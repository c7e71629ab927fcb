"""Runtime dependency construction (relay router + rate monitor)."""

from __future__ import annotations

import logging

from clawrelay.state import RuntimeDeps, RecentErrors
from clawrelay.monitor import RateMonitor, CostEstimator
from clawrelay.relay.router import RelayRouter
from clawrelay.state.settings import AppSettings

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    router = RelayRouter(settings.relay)
    logger.info(
        "runtime: relay mode=%s agent=%s",
        "gateway" if settings.relay.gateway.enabled else "cli",
        settings.relay.agent_id,
    )
    return RuntimeDeps(
        router=router,
        rate_monitor=RateMonitor(),
        cost_estimator=CostEstimator(settings.costs),
        recent_errors=RecentErrors(),
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
