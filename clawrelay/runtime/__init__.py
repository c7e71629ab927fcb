from .logging import configure_logging
from .settings import load_settings

__all__ = ["configure_logging", "load_settings"]
