from .retry import is_retryable
from .compose import manifest_line, build_relay_text

__all__ = ["build_relay_text", "is_retryable", "manifest_line"]
