"""
Replay driver wiring a historical feed to a trading engine.

Orchestrates the replay pipeline:
Source File → Decode → Normalize → MarketFeed → Engine → EventChannel → Sink

The dataset is fully loaded and validated before the engine starts, so a
replay either runs against the complete dataset or does not run at all.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Awaitable, Optional, Protocol, Union

from .config.defaults import DefaultConfig
from .data.models import Market
from .data.normalizer import HistoricalCandleLoader
from .engine.channel import EventChannel
from .engine.events import MarketUpdate
from .engine.sink import EventObserver, listen_to_engine_events
from .errors import ConfigurationError
from .feed.historical import MarketFeed, MarketGenerator
from .logging.config import get_logger

logger = get_logger(__name__)


class Engine(Protocol):
    """Trading engine consuming a market generator and emitting events."""

    def run(self, feed: MarketGenerator, event_tx: EventChannel) -> Union[None, Awaitable[None]]:
        ...


class PassthroughEngine:
    """
    Engine that only replays the feed.

    Pulls every market event and emits it as a MarketUpdate, yielding to the
    event loop between events so the sink drains concurrently.
    """

    def __init__(self):
        self.events_processed = 0

    async def run(self, feed: MarketGenerator, event_tx: EventChannel) -> None:
        while not (result := feed.next()).is_finished:
            event_tx.send(MarketUpdate(event=result.event))
            self.events_processed += 1
            await asyncio.sleep(0)


@dataclass(frozen=True)
class ReplayResult:
    """Outcome of a replay run."""
    events_loaded: int
    events_observed: int
    events_dropped: int = 0


def load_feed(config: DefaultConfig) -> MarketFeed:
    """
    Load the configured source into a MarketFeed.

    Raises:
        ConfigurationError: If no source path is configured
        FileAccessError, DecodeError, TimestampError: If the dataset is
            unusable
    """
    if not config.source.path:
        raise ConfigurationError("No source path configured")

    market = Market.new(
        config.market.exchange,
        (config.market.base, config.market.quote, config.market.kind),
    )
    loader = HistoricalCandleLoader(
        market,
        on_malformed_row=config.source.on_malformed_row,
        ordering=config.source.ordering,
    )
    return MarketFeed(loader.load(config.source.path, config.source.format))


async def run_replay(config: DefaultConfig,
                     engine: Optional[Engine] = None,
                     observer: Optional[EventObserver] = None) -> ReplayResult:
    """
    Load the dataset, run the engine against it and drain its events.

    Args:
        config: Replay configuration
        engine: Engine to drive, a PassthroughEngine by default
        observer: Observation action for the event sink

    Returns:
        ReplayResult with load and sink counts
    """
    feed = load_feed(config)
    engine = engine or PassthroughEngine()

    event_channel = EventChannel(capacity=config.channel.capacity)
    sink_task = asyncio.create_task(listen_to_engine_events(event_channel, observer))

    logger.info("Replay started", events=len(feed), engine=type(engine).__name__)

    try:
        result = engine.run(feed, event_channel)
        if inspect.isawaitable(result):
            await result
    finally:
        event_channel.close()
        observed = await sink_task

    logger.info(
        "Replay finished",
        events_loaded=len(feed),
        events_observed=observed,
        events_dropped=event_channel.dropped,
    )

    return ReplayResult(
        events_loaded=len(feed),
        events_observed=observed,
        events_dropped=event_channel.dropped,
    )
