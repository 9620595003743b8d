"""Pytest configuration and shared fixtures."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

from candlefeed.data.models import Candle, Market, MarketEvent


@pytest.fixture
def btc_usdt_market() -> Market:
    """Binance BTC/USDT spot market."""
    return Market.new("binance", ("btc", "usdt", "spot"))


@pytest.fixture
def binance_rows() -> list[str]:
    """Two consecutive 5m Binance kline rows closing at 00:00 and 00:05 UTC."""
    return [
        "1640995140000,100.0,105.0,95.0,102.0,12.5,1640995200000,1275.0,431,6.1,622.2,0",
        "1640995440000,103.0,108.0,98.0,106.0,8.25,1640995500000,858.0,377,4.0,416.0,0",
    ]


@pytest.fixture
def json_candles() -> list[dict[str, Any]]:
    """Canonical-shaped JSON candle objects, ascending close time."""
    return [
        {"close_time": "2022-01-01T00:00:00Z", "open": 100.0, "high": 105.0,
         "low": 95.0, "close": 102.0, "volume": 12.5, "trade_count": 431},
        {"close_time": "2022-01-01T01:00:00Z", "open": 102.0, "high": 110.0,
         "low": 101.0, "close": 109.5, "volume": 20.0, "trade_count": 512},
        {"close_time": "2022-01-01T02:00:00Z", "open": 109.5, "high": 111.0,
         "low": 104.0, "close": 105.0, "volume": 7.75, "trade_count": 198},
    ]


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[list[str]], Path]:
    """Write CSV rows to a temporary file and return its path."""
    def _write(rows: list[str], name: str = "klines.csv") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(rows) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a JSON document to a temporary file and return its path."""
    def _write(document: Any, name: str = "candles.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def make_event(btc_usdt_market: Market) -> Callable[[datetime], MarketEvent]:
    """Build a candle MarketEvent closing at the given time."""
    def _make(close_time: datetime, close: float = 100.0) -> MarketEvent:
        candle = Candle(
            close_time=close_time,
            open=close,
            high=close + 1.0,
            low=close - 1.0,
            close=close,
            volume=1.0,
            trade_count=1,
        )
        return MarketEvent(
            exchange_time=close_time,
            received_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
            exchange=btc_usdt_market.exchange,
            instrument=btc_usdt_market.instrument,
            kind=candle,
        )
    return _make
