"""Relay conversational turns to an agent service and monitor metered API usage."""

__version__ = "0.1.0"
