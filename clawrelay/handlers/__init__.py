from .errors import status_for_error, relay_error_payload, build_error_payload
from .parser import parse_rate_record, parse_relay_body

__all__ = ["build_error_payload", "parse_rate_record", "parse_relay_body", "relay_error_payload", "status_for_error"]
