"""
Normalization pipeline from decoded source records to market events.

This module maps raw JSON and Binance CSV records onto the canonical Candle,
wraps candles into MarketEvents for a caller-supplied market, and provides
the HistoricalCandleLoader that runs decode -> normalize -> wrap -> order for
a whole file.
"""

import math
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from ..errors import DecodeError, TimestampError
from ..logging.config import get_feed_logger, log_load_summary
from ..utils.time import format_market_time, millis_to_utc, parse_utc_timestamp, utc_now
from .models import BinanceCandle, Candle, Market, MarketEvent
from .parsers import (
    MALFORMED_ROW_ABORT,
    MALFORMED_ROW_SKIP,
    load_binance_csv,
    load_json_candles,
)
from .validators import first_out_of_order, validate_candle

logger = get_feed_logger(__name__)

ORDERING_SORT = "sort"
ORDERING_STRICT = "strict"
ORDERING_MODES = (ORDERING_SORT, ORDERING_STRICT)


def normalize_json_candle(record: dict[str, Any]) -> Candle:
    """
    Normalize a canonical-shaped JSON record into a Candle.

    The close time must already be a UTC instant (ISO 8601 with an offset);
    numeric fields are taken as-is.

    Raises:
        TimestampError: If close_time is not a representable UTC instant
        DecodeError: If a numeric field has the wrong type or the candle
            violates the OHLCV invariants
    """
    close_time = parse_utc_timestamp(record["close_time"])

    try:
        candle = Candle(
            close_time=close_time,
            open=_as_float(record["open"], "open"),
            high=_as_float(record["high"], "high"),
            low=_as_float(record["low"], "low"),
            close=_as_float(record["close"], "close"),
            volume=_as_float(record["volume"], "volume"),
            trade_count=_as_count(record["trade_count"], "trade_count"),
        )
    except KeyError as e:
        raise DecodeError(f"Missing candle field {e}", raw_data=str(record)[:100]) from e

    validate_candle(candle)
    return candle


def normalize_binance_candle(raw: BinanceCandle) -> Candle:
    """
    Project a Binance kline record onto the canonical Candle.

    close_time is decoded from epoch milliseconds exactly and
    number_of_trades becomes trade_count. open_time, quote_asset_volume,
    both taker-buy volumes and the ignore column are dropped.

    Raises:
        TimestampError: If close_time cannot be represented as a UTC instant
        DecodeError: If the candle violates the OHLCV invariants
    """
    candle = Candle(
        close_time=millis_to_utc(raw.close_time),
        open=raw.open,
        high=raw.high,
        low=raw.low,
        close=raw.close,
        volume=raw.volume,
        trade_count=raw.number_of_trades,
    )
    validate_candle(candle)
    return candle


def wrap_candle(candle: Candle, market: Market, *,
                received_time: Optional[datetime] = None) -> MarketEvent:
    """
    Wrap a candle into a MarketEvent for the given market.

    exchange_time is the candle close time; received_time is read from the
    wall clock unless supplied.
    """
    return MarketEvent(
        exchange_time=candle.close_time,
        received_time=received_time if received_time is not None else utc_now(),
        exchange=market.exchange,
        instrument=market.instrument,
        kind=candle,
    )


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Field '{name}' must be a number, got {value!r}")
    return float(value)


def _as_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Field '{name}' must be an integer, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise DecodeError(f"Field '{name}' must be an integer, got {value!r}")
        value = int(value)
    if value < 0:
        raise DecodeError(f"Field '{name}' must be non-negative, got {value}")
    return value


class HistoricalCandleLoader:
    """
    Loads a historical candle file into an ordered list of MarketEvents.

    The exchange and instrument are supplied by the caller, never discovered
    from the data. Any decode, timestamp or ordering failure aborts the whole
    load, except malformed CSV rows when on_malformed_row='skip'.
    """

    def __init__(self, market: Market, *,
                 on_malformed_row: str = MALFORMED_ROW_ABORT,
                 ordering: str = ORDERING_SORT):
        """
        Initialize the loader.

        Args:
            market: Exchange and instrument every event is tagged with
            on_malformed_row: 'abort' (default) or 'skip' for bad CSV rows
            ordering: 'sort' stably sorts unordered input by exchange time,
                'strict' rejects it
        """
        if ordering not in ORDERING_MODES:
            raise ValueError(f"ordering must be one of {ORDERING_MODES}, got {ordering!r}")

        self.market = market
        self.on_malformed_row = on_malformed_row
        self.ordering = ordering

    def load_json(self, path: Union[str, Path]) -> list[MarketEvent]:
        """Decode, normalize and wrap a JSON candle file."""
        source = str(path)
        records = load_json_candles(path)

        events = []
        for i, record in enumerate(records):
            try:
                candle = normalize_json_candle(record)
            except (DecodeError, TimestampError) as e:
                e.context.setdefault("index", i)
                if isinstance(e, DecodeError) and e.source is None:
                    e.source = source
                raise
            events.append(wrap_candle(candle, self.market))

        return self._finalize(events, source, "json")

    def load_csv(self, path: Union[str, Path]) -> list[MarketEvent]:
        """Decode, normalize and wrap a Binance kline CSV file."""
        source = str(path)
        records = load_binance_csv(path, on_malformed_row=self.on_malformed_row)

        events = []
        for i, record in enumerate(records):
            try:
                candle = normalize_binance_candle(record)
            except (DecodeError, TimestampError) as e:
                if self.on_malformed_row != MALFORMED_ROW_SKIP:
                    e.context.setdefault("index", i)
                    raise
                logger.warning("Skipping unnormalizable CSV record", source=source, index=i, error=str(e))
                continue
            events.append(wrap_candle(candle, self.market))

        return self._finalize(events, source, "csv")

    def load(self, path: Union[str, Path], source_format: str) -> list[MarketEvent]:
        """Load with the decoder named by source_format ('json' or 'csv')."""
        if source_format == "json":
            return self.load_json(path)
        if source_format == "csv":
            return self.load_csv(path)
        raise ValueError(f"Unknown source format: {source_format!r}")

    def _finalize(self, events: list[MarketEvent], source: str, source_format: str) -> list[MarketEvent]:
        """Enforce chronological order and log the load."""
        index = first_out_of_order(events)
        reordered = index != -1

        if reordered:
            if self.ordering == ORDERING_STRICT:
                raise DecodeError(
                    f"Events out of chronological order at index {index}: "
                    f"{format_market_time(events[index].exchange_time)} < "
                    f"{format_market_time(events[index - 1].exchange_time)}",
                    source=source,
                    context={"index": index},
                )
            logger.warning("Source not in chronological order, sorting by exchange time",
                           source=source, first_out_of_order=index)
            events = sorted(events, key=lambda event: event.exchange_time)

        log_load_summary(logger, source, source_format, len(events), reordered,
                         context={"market": str(self.market)})
        return events
