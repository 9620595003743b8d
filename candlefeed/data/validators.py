"""
Data validation for normalized candles and replay ordering.

This module checks the canonical candle invariants and the chronological
order a historical feed must be replayed in.
"""

import math
from collections.abc import Sequence

from ..errors import DecodeError
from .models import Candle, MarketEvent


def validate_candle(candle: Candle, source: str = None, line_number: int = None) -> None:
    """
    Validate a normalized candle against the OHLCV invariants.

    Raises:
        DecodeError: If a price is not finite, the OHLC prices are
            inconsistent, or volume or trade count is negative
    """
    prices = [candle.open, candle.high, candle.low, candle.close, candle.volume]
    if not all(math.isfinite(value) for value in prices):
        raise DecodeError(
            f"Candle values must be finite: O={candle.open}, H={candle.high}, "
            f"L={candle.low}, C={candle.close}, V={candle.volume}",
            source=source, line_number=line_number,
        )

    if candle.low > candle.high:
        raise DecodeError(f"Low {candle.low} must be <= high {candle.high}",
                          source=source, line_number=line_number)

    if candle.high < max(candle.open, candle.close) or candle.low > min(candle.open, candle.close):
        raise DecodeError(
            f"High/low prices inconsistent with open/close: O={candle.open}, "
            f"H={candle.high}, L={candle.low}, C={candle.close}",
            source=source, line_number=line_number,
        )

    if candle.volume < 0:
        raise DecodeError(f"Volume must be non-negative: {candle.volume}",
                          source=source, line_number=line_number)

    if candle.trade_count < 0:
        raise DecodeError(f"Trade count must be non-negative: {candle.trade_count}",
                          source=source, line_number=line_number)


def is_chronological(events: Sequence[MarketEvent]) -> bool:
    """True if exchange_time never decreases across the sequence."""
    return first_out_of_order(events) == -1


def first_out_of_order(events: Sequence[MarketEvent]) -> int:
    """Index of the first event older than its predecessor, -1 if ordered."""
    for i in range(1, len(events)):
        if events[i].exchange_time < events[i - 1].exchange_time:
            return i
    return -1
