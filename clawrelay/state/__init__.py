from .rates import RateEvent, RateRecord, RateSnapshot
from .relay import AttachmentRef, RelayResult, RelayRequest, RelayDiagnostics
from .gateway import GatewayPhase, GatewaySession
from .runtime import RuntimeDeps
from .settings import (
    AppSettings,
    CliSettings,
    CostSettings,
    RelaySettings,
    ServerSettings,
    GatewaySettings,
)
from .recent_errors import RecentErrors

__all__ = [
    "AppSettings",
    "AttachmentRef",
    "CliSettings",
    "CostSettings",
    "GatewayPhase",
    "GatewaySession",
    "GatewaySettings",
    "RateEvent",
    "RateRecord",
    "RateSnapshot",
    "RecentErrors",
    "RelayDiagnostics",
    "RelayRequest",
    "RelayResult",
    "RelaySettings",
    "RuntimeDeps",
    "ServerSettings",
]
