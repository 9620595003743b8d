"""
Error classification for historical data loading and event replay.

Load errors are unrecoverable: a corrupt dataset aborts the run before any
engine activity starts. System failures cover misuse of the replay plumbing.
"""

from .data_quality import (
    DataLoadError,
    DecodeError,
    FileAccessError,
    TimestampError,
)
from .system_failures import (
    ChannelClosedError,
    ConfigurationError,
    SystemFailureError,
)

__all__ = [
    # Data Load Errors
    "DataLoadError",
    "FileAccessError",
    "DecodeError",
    "TimestampError",
    # System Failures
    "SystemFailureError",
    "ChannelClosedError",
    "ConfigurationError",
]
