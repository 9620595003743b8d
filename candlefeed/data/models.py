"""
Canonical data models for normalized historical market data.

This module defines immutable data structures that represent clean, validated
market data after normalization from raw exchange formats, plus the venue and
instrument identifiers attached to every market event.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class Candle:
    """Normalized OHLCV candle closed at a UTC instant."""
    close_time: datetime  # UTC bar close, the ordering key
    open: float
    high: float
    low: float
    close: float
    volume: float         # Base volume
    trade_count: int      # Trades in the bar


@dataclass(frozen=True)
class BinanceCandle:
    """
    One row of a headerless Binance kline CSV.

    Column order matches the exchange export; both times are epoch
    milliseconds.
    """
    open_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: int
    quote_asset_volume: float
    number_of_trades: int
    taker_buy_base_asset_volume: float
    taker_buy_quote_asset_volume: float
    ignore: float


class Side(str, Enum):
    """Aggressor side of a public trade."""
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class PublicTrade:
    """Single public trade print."""
    id: str
    price: float
    amount: float
    side: Side


@dataclass(frozen=True)
class OrderBookL1:
    """Best bid and ask of an order book."""
    last_update_time: datetime
    best_bid_price: float
    best_bid_amount: float
    best_ask_price: float
    best_ask_amount: float

    @property
    def mid_price(self) -> float:
        """Mid price between best bid/ask."""
        return (self.best_bid_price + self.best_ask_price) / 2.0


# Market data payloads a MarketEvent may carry. Only candles are decoded here.
DataKind = Union[Candle, PublicTrade, OrderBookL1]


@dataclass(frozen=True)
class Exchange:
    """Venue identifier, e.g. 'binance'."""
    name: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Exchange name must be non-empty")
        object.__setattr__(self, "name", self.name.strip().lower())

    def __str__(self) -> str:
        return self.name


class InstrumentKind(str, Enum):
    """Kind of tradable instrument."""
    SPOT = "spot"
    FUTURE_PERPETUAL = "future_perpetual"


@dataclass(frozen=True)
class Instrument:
    """
    Composite instrument identifier.

    Attributes:
        base: Base asset symbol (e.g. 'btc')
        quote: Quote asset symbol (e.g. 'usdt')
        kind: Instrument kind, spot unless stated otherwise
    """
    base: str
    quote: str
    kind: InstrumentKind = InstrumentKind.SPOT

    def __post_init__(self) -> None:
        if not self.base or not self.quote:
            raise ValueError(f"Instrument base and quote must be non-empty: {self.base!r}/{self.quote!r}")
        object.__setattr__(self, "base", self.base.lower())
        object.__setattr__(self, "quote", self.quote.lower())
        object.__setattr__(self, "kind", InstrumentKind(self.kind))

    @classmethod
    def from_tuple(cls, value: tuple) -> "Instrument":
        """Build from a (base, quote, kind) tuple; kind may be a string."""
        base, quote, kind = value
        return cls(base=base, quote=quote, kind=InstrumentKind(kind))

    def __str__(self) -> str:
        return f"{self.base}_{self.quote}_{self.kind.value}"


@dataclass(frozen=True)
class Market:
    """Exchange and instrument pair a trader is bound to."""
    exchange: Exchange
    instrument: Instrument

    @classmethod
    def new(cls, exchange: str, instrument: tuple) -> "Market":
        """Create a market from a venue name and a (base, quote, kind) tuple."""
        return cls(exchange=Exchange(exchange), instrument=Instrument.from_tuple(instrument))

    def __str__(self) -> str:
        return f"{self.exchange}:{self.instrument}"


@dataclass(frozen=True)
class MarketEvent:
    """Timestamped, venue and instrument tagged market data envelope."""
    exchange_time: datetime   # UTC instant the data is attributed to
    received_time: datetime   # UTC wall-clock time the event entered the pipeline
    exchange: Exchange
    instrument: Instrument
    kind: DataKind

    @property
    def candle(self) -> Optional[Candle]:
        """Candle payload, None for other data kinds."""
        return self.kind if isinstance(self.kind, Candle) else None
