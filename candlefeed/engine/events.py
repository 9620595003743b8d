"""
Events emitted by a trading engine during a replay.

The set of event kinds is closed: Event is a union of ten frozen
dataclasses, and consumers match on it exhaustively. Adding a kind means
extending the union, after which every exhaustive match is flagged by the
type checker until it handles the new kind.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from ..data.models import Exchange, Instrument, MarketEvent, Side
from ..utils.time import utc_now


class EventKind(str, Enum):
    """Name of each engine event kind."""
    MARKET = "Market"
    SIGNAL = "Signal"
    SIGNAL_FORCE_EXIT = "SignalForceExit"
    ORDER_NEW = "OrderNew"
    ORDER_UPDATE = "OrderUpdate"
    FILL = "Fill"
    POSITION_NEW = "PositionNew"
    POSITION_UPDATE = "PositionUpdate"
    POSITION_EXIT = "PositionExit"
    BALANCE = "Balance"


class Decision(str, Enum):
    """Trading decision a strategy signal or order expresses."""
    LONG = "long"
    CLOSE_LONG = "close_long"
    SHORT = "short"
    CLOSE_SHORT = "close_short"


class OrderType(str, Enum):
    MARKET = "market"
    LIMIT = "limit"


@dataclass(frozen=True)
class MarketUpdate:
    """Market event the engine consumed from its feed."""
    event: MarketEvent
    kind = EventKind.MARKET


@dataclass(frozen=True)
class Signal:
    """Strategy advisory signal with a strength per decision."""
    time: datetime
    exchange: Exchange
    instrument: Instrument
    signals: dict[Decision, float]
    market_close: float
    kind = EventKind.SIGNAL


@dataclass(frozen=True)
class SignalForceExit:
    """Instruction to exit any open position in a market."""
    exchange: Exchange
    instrument: Instrument
    time: datetime = field(default_factory=utc_now)
    kind = EventKind.SIGNAL_FORCE_EXIT


@dataclass(frozen=True)
class OrderNew:
    """Order generated by the portfolio from a signal."""
    time: datetime
    exchange: Exchange
    instrument: Instrument
    decision: Decision
    quantity: float
    market_close: float
    order_type: OrderType = OrderType.MARKET
    kind = EventKind.ORDER_NEW


@dataclass(frozen=True)
class OrderUpdate:
    """Update to a working order."""
    order_id: Optional[str] = None
    kind = EventKind.ORDER_UPDATE


@dataclass(frozen=True)
class Fill:
    """Execution of an order."""
    time: datetime
    exchange: Exchange
    instrument: Instrument
    decision: Decision
    quantity: float
    fill_value_gross: float
    fees: float = 0.0
    kind = EventKind.FILL


@dataclass(frozen=True)
class Position:
    """Open position state."""
    position_id: str
    exchange: Exchange
    instrument: Instrument
    side: Side
    quantity: float
    enter_avg_price_gross: float
    unrealised_profit_loss: float = 0.0
    realised_profit_loss: float = 0.0


@dataclass(frozen=True)
class PositionNew:
    """A position was opened."""
    position: Position
    kind = EventKind.POSITION_NEW


@dataclass(frozen=True)
class PositionUpdate:
    """Open position revalued at a new market price."""
    position_id: str
    update_time: datetime
    current_symbol_price: float
    current_value_gross: float
    unrealised_profit_loss: float
    kind = EventKind.POSITION_UPDATE


@dataclass(frozen=True)
class PositionExit:
    """A position was closed."""
    position_id: str
    exit_time: datetime
    exit_avg_price_gross: float
    realised_profit_loss: float
    kind = EventKind.POSITION_EXIT


@dataclass(frozen=True)
class Balance:
    """Portfolio cash balance."""
    time: datetime
    total: float
    available: float
    kind = EventKind.BALANCE


Event = Union[
    MarketUpdate,
    Signal,
    SignalForceExit,
    OrderNew,
    OrderUpdate,
    Fill,
    PositionNew,
    PositionUpdate,
    PositionExit,
    Balance,
]

EVENT_TYPES: tuple[type, ...] = (
    MarketUpdate,
    Signal,
    SignalForceExit,
    OrderNew,
    OrderUpdate,
    Fill,
    PositionNew,
    PositionUpdate,
    PositionExit,
    Balance,
)
