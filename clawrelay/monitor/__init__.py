from .costs import CostEstimator
from .rates import RateMonitor

__all__ = ["CostEstimator", "RateMonitor"]
