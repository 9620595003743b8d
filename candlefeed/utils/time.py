"""
Time utilities for converting source timestamps into UTC instants.

Market timestamps decoded from historical files are authoritative for
ordering. Wall-clock time is only used to stamp when an event entered the
pipeline.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from ..errors import TimestampError

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Current wall-clock time as a UTC datetime."""
    return datetime.now(timezone.utc)


def millis_to_utc(ts_ms: Any) -> datetime:
    """
    Convert an integer millisecond epoch into a UTC datetime.

    The conversion is exact: milliseconds are carried into the microsecond
    field, nothing is rounded through floating point.

    Args:
        ts_ms: Milliseconds since the Unix epoch

    Returns:
        Timezone-aware UTC datetime

    Raises:
        TimestampError: If the value is not an integer or falls outside the
            range datetime can represent
    """
    if isinstance(ts_ms, bool) or not isinstance(ts_ms, int):
        raise TimestampError(f"Epoch milliseconds must be an integer, got {ts_ms!r}", value=ts_ms)

    try:
        return UNIX_EPOCH + timedelta(milliseconds=ts_ms)
    except OverflowError as e:
        raise TimestampError(f"Epoch milliseconds out of range: {ts_ms}: {e}", value=ts_ms) from e


def parse_utc_timestamp(value: Any) -> datetime:
    """
    Parse an ISO 8601 timestamp carrying an explicit offset into UTC.

    A trailing 'Z' is accepted. Naive timestamps are rejected because the
    instant they name is ambiguous.

    Raises:
        TimestampError: If the value is not a string, cannot be parsed, or
            has no UTC offset
    """
    if not isinstance(value, str):
        raise TimestampError(f"Timestamp must be an ISO 8601 string, got {value!r}", value=value)

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise TimestampError(f"Invalid timestamp '{value}': {e}", value=value) from e

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        raise TimestampError(f"Timestamp '{value}' has no UTC offset", value=value)

    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as e:
        raise TimestampError(f"Timestamp '{value}' out of range in UTC: {e}", value=value) from e


def format_market_time(market_ts: datetime) -> str:
    """
    Format a market timestamp for logs and error messages.

    Renders the UTC instant at millisecond precision with a 'Z' suffix, the
    resolution exchange timestamps are decoded at.
    """
    return market_ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
