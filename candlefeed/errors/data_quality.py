"""
Data load error classifications for historical candle ingestion.

Every error here is fatal for the whole load: there is no partial-success
mode, so a truncated or misordered replay can never start.
"""

from typing import Any, Optional


class DataLoadError(Exception):
    """Base class for failures while loading a historical dataset."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = False


class FileAccessError(DataLoadError):
    """Source file is missing or cannot be read."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class DecodeError(DataLoadError):
    """Source content is structurally invalid (bad JSON, bad CSV row, bad field)."""

    def __init__(self, message: str, source: Optional[str] = None,
                 line_number: Optional[int] = None,
                 raw_data: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.source = source
        self.line_number = line_number
        self.raw_data = raw_data


class TimestampError(DataLoadError):
    """Timestamp cannot be represented as a UTC instant."""

    def __init__(self, message: str, value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.value = value
