"""
Event sink loop draining engine events for observation.

The sink runs as its own asyncio task for the lifetime of an engine run. It
suspends only while waiting on the channel, handles each event exactly once
in emission order, and returns when the channel is closed and drained.
"""

from collections import Counter
from typing import Optional, Protocol, assert_never

from ..logging.config import get_sink_logger
from ..utils.time import format_market_time
from .channel import EventChannel
from .events import (
    Balance,
    Event,
    Fill,
    MarketUpdate,
    OrderNew,
    OrderUpdate,
    PositionExit,
    PositionNew,
    PositionUpdate,
    Signal,
    SignalForceExit,
)

logger = get_sink_logger(__name__)


class EventObserver(Protocol):
    """Receives each engine event drained by the sink."""

    def observe(self, event: Event) -> None:
        ...


class EventLogger:
    """Observer that logs every engine event and counts them by kind."""

    def __init__(self, event_logger=None):
        self.logger = event_logger or logger
        self.counts: Counter = Counter()

    def observe(self, event: Event) -> None:
        self.counts[event.kind.value] += 1

        match event:
            case MarketUpdate(event=market_event):
                self.logger.debug(
                    "Market event",
                    exchange=str(market_event.exchange),
                    instrument=str(market_event.instrument),
                    exchange_time=format_market_time(market_event.exchange_time),
                )
            case Signal():
                self.logger.info(
                    "Signal event",
                    instrument=str(event.instrument),
                    signals={decision.value: strength for decision, strength in event.signals.items()},
                    market_close=event.market_close,
                )
            case SignalForceExit():
                self.logger.debug("Signal force exit event", instrument=str(event.instrument))
            case OrderNew():
                self.logger.info(
                    "Order new event",
                    instrument=str(event.instrument),
                    decision=event.decision.value,
                    quantity=event.quantity,
                    order_type=event.order_type.value,
                )
            case OrderUpdate():
                self.logger.debug("Order update event", order_id=event.order_id)
            case Fill():
                self.logger.info(
                    "Fill event",
                    instrument=str(event.instrument),
                    decision=event.decision.value,
                    quantity=event.quantity,
                    fill_value_gross=event.fill_value_gross,
                    fees=event.fees,
                )
            case PositionNew(position=position):
                self.logger.info(
                    "Position new event",
                    position_id=position.position_id,
                    side=position.side.value,
                    quantity=position.quantity,
                    enter_avg_price_gross=position.enter_avg_price_gross,
                )
            case PositionUpdate():
                self.logger.info(
                    "Position update event",
                    position_id=event.position_id,
                    current_symbol_price=event.current_symbol_price,
                    unrealised_profit_loss=event.unrealised_profit_loss,
                )
            case PositionExit():
                self.logger.info(
                    "Position exit event",
                    position_id=event.position_id,
                    exit_avg_price_gross=event.exit_avg_price_gross,
                    realised_profit_loss=event.realised_profit_loss,
                )
            case Balance():
                self.logger.info("Balance event", total=event.total, available=event.available)
            case _:
                assert_never(event)


async def listen_to_engine_events(event_rx: EventChannel,
                                  observer: Optional[EventObserver] = None) -> int:
    """
    Drain engine events until the channel is closed and empty.

    Args:
        event_rx: Receiving side of the engine event channel
        observer: Observation action per event, an EventLogger by default

    Returns:
        Number of events observed
    """
    if observer is None:
        observer = EventLogger()

    observed = 0
    while (event := await event_rx.recv()) is not None:
        observer.observe(event)
        observed += 1

    logger.info("Engine event channel closed", events_observed=observed)
    return observed
