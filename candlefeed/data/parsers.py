"""
Source decoders for historical candle files.

This module reads candle files from disk and decodes them into raw records:
a JSON document holding a list of canonical-shaped candle objects, or a
headerless Binance kline CSV with the exchange's 12-column schema. Decoding
is all-or-nothing unless malformed CSV rows are explicitly allowed to be
skipped.
"""

import csv
import io
from pathlib import Path
from typing import Any, Union

import orjson

from ..errors import DecodeError, FileAccessError
from ..logging.config import get_feed_logger
from .models import BinanceCandle

logger = get_feed_logger(__name__)

# Keys every JSON candle object must carry
JSON_CANDLE_FIELDS = ("close_time", "open", "high", "low", "close", "volume", "trade_count")

# Binance kline CSV column order and the type each column decodes to
BINANCE_CSV_COLUMNS: tuple[tuple[str, type], ...] = (
    ("open_time", int),
    ("open", float),
    ("high", float),
    ("low", float),
    ("close", float),
    ("volume", float),
    ("close_time", int),
    ("quote_asset_volume", float),
    ("number_of_trades", int),
    ("taker_buy_base_asset_volume", float),
    ("taker_buy_quote_asset_volume", float),
    ("ignore", float),
)

MALFORMED_ROW_ABORT = "abort"
MALFORMED_ROW_SKIP = "skip"
MALFORMED_ROW_MODES = (MALFORMED_ROW_ABORT, MALFORMED_ROW_SKIP)


def read_source(path: Union[str, Path]) -> str:
    """
    Read a source file as UTF-8 text.

    Raises:
        FileAccessError: If the file is missing, is not a regular file, or
            cannot be read or decoded
    """
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileAccessError(f"Source file not found: {path}", path=str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(f"Cannot read source file {path}: {e}", path=str(path)) from e


def parse_json_candles(raw_data: Union[str, bytes], *, source: str = None) -> list[dict[str, Any]]:
    """
    Parse a JSON document holding a list of candle objects.

    Expected format:
    [
        {"close_time": "2022-01-01T00:00:00Z", "open": 100.0, "high": 105.0,
         "low": 95.0, "close": 102.0, "volume": 12.5, "trade_count": 431}
    ]

    Args:
        raw_data: Whole document contents
        source: Source name used in error messages

    Returns:
        Raw candle records in document order

    Raises:
        DecodeError: If the document does not parse, is not a list, or holds
            an element that is not a complete candle object
    """
    try:
        payload = orjson.loads(raw_data)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}", source=source, raw_data=_preview(raw_data)) from e

    if not isinstance(payload, list):
        raise DecodeError(
            f"JSON candle document must be a list, got {type(payload).__name__}",
            source=source, raw_data=_preview(raw_data),
        )

    for i, record in enumerate(payload):
        if not isinstance(record, dict):
            raise DecodeError(
                f"Invalid candle at index {i}: expected an object, got {type(record).__name__}",
                source=source, raw_data=str(record)[:100],
            )
        missing = [name for name in JSON_CANDLE_FIELDS if name not in record]
        if missing:
            raise DecodeError(
                f"Invalid candle at index {i}: missing fields {missing}",
                source=source, raw_data=str(record)[:100],
                context={"index": i, "missing_fields": missing},
            )

    return payload


def parse_binance_csv(raw_data: str, *, source: str = None,
                      on_malformed_row: str = MALFORMED_ROW_ABORT) -> list[BinanceCandle]:
    """
    Parse a headerless Binance kline CSV into raw records.

    Row format (12 columns):
        open_time, open, high, low, close, volume, close_time,
        quote_asset_volume, number_of_trades, taker_buy_base_asset_volume,
        taker_buy_quote_asset_volume, ignore

    Args:
        raw_data: Whole file contents
        source: Source name used in error and log messages
        on_malformed_row: 'abort' fails the whole load on the first bad row,
            'skip' logs and drops bad rows

    Returns:
        Raw Binance records in file order

    Raises:
        DecodeError: If a row is malformed and on_malformed_row is 'abort'
        ValueError: If on_malformed_row is not a known mode
    """
    if on_malformed_row not in MALFORMED_ROW_MODES:
        raise ValueError(f"on_malformed_row must be one of {MALFORMED_ROW_MODES}, got {on_malformed_row!r}")

    records = []
    skipped = 0
    reader = csv.reader(io.StringIO(raw_data))

    try:
        for row in reader:
            if not row or all(not field.strip() for field in row):
                continue

            try:
                records.append(_parse_binance_row(row, source=source, line_number=reader.line_num))
            except DecodeError as e:
                if on_malformed_row == MALFORMED_ROW_ABORT:
                    raise
                skipped += 1
                logger.warning(
                    "Skipping malformed CSV row",
                    source=source,
                    line_number=e.line_number,
                    error=str(e),
                )
    except csv.Error as e:
        raise DecodeError(f"Unreadable CSV at line {reader.line_num}: {e}",
                          source=source, line_number=reader.line_num) from e

    if skipped:
        logger.warning("Malformed CSV rows skipped", source=source, skipped=skipped, rows=len(records))

    return records


def _parse_binance_row(row: list[str], *, source: str = None, line_number: int = None) -> BinanceCandle:
    """Parse single Binance CSV row into a BinanceCandle."""
    if len(row) != len(BINANCE_CSV_COLUMNS):
        raise DecodeError(
            f"Expected {len(BINANCE_CSV_COLUMNS)} columns, got {len(row)} at line {line_number}",
            source=source, line_number=line_number, raw_data=",".join(row)[:100],
        )

    values = {}
    for (name, column_type), raw_value in zip(BINANCE_CSV_COLUMNS, row):
        try:
            values[name] = column_type(raw_value.strip())
        except ValueError as e:
            raise DecodeError(
                f"Invalid {name} '{raw_value}' at line {line_number}: {e}",
                source=source, line_number=line_number, raw_data=",".join(row)[:100],
            ) from e

    return BinanceCandle(**values)


def load_json_candles(path: Union[str, Path]) -> list[dict[str, Any]]:
    """Read and decode a JSON candle file."""
    return parse_json_candles(read_source(path), source=str(path))


def load_binance_csv(path: Union[str, Path],
                     on_malformed_row: str = MALFORMED_ROW_ABORT) -> list[BinanceCandle]:
    """Read and decode a Binance kline CSV file."""
    return parse_binance_csv(read_source(path), source=str(path), on_malformed_row=on_malformed_row)


def _preview(raw_data: Union[str, bytes]) -> str:
    if isinstance(raw_data, bytes):
        raw_data = raw_data.decode("utf-8", errors="replace")
    return raw_data[:100]
