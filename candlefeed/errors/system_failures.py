"""
System failure error classifications for the replay plumbing.

These exceptions represent programming or configuration mistakes rather
than bad market data.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ChannelClosedError(SystemFailureError):
    """An event was sent on a channel whose producing side is closed."""

    def __init__(self, message: str, event_kind: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.event_kind = event_kind


class ConfigurationError(SystemFailureError):
    """Replay configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
