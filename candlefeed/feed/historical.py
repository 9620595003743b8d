"""
Pull-based historical market feed.

The consumer drives pacing: it asks for the next event only after it has
fully processed the previous one, which keeps historical replay
deterministic. The feed never rewinds and once exhausted stays exhausted.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..data.models import MarketEvent
from ..logging.config import get_feed_logger

logger = get_feed_logger(__name__)


class FeedStatus(str, Enum):
    """Outcome of a single pull from a market generator."""
    NEXT = "next"
    UNHEALTHY = "unhealthy"  # live generators only
    FINISHED = "finished"


@dataclass(frozen=True)
class Feed:
    """Result of pulling from a market generator."""
    status: FeedStatus
    event: Optional[MarketEvent] = None

    @classmethod
    def next(cls, event: MarketEvent) -> "Feed":
        """Feed result carrying the next event."""
        return cls(status=FeedStatus.NEXT, event=event)

    @classmethod
    def finished(cls) -> "Feed":
        """Feed result signalling exhaustion."""
        return cls(status=FeedStatus.FINISHED)

    @property
    def is_finished(self) -> bool:
        return self.status is FeedStatus.FINISHED


class MarketGenerator(ABC):
    """Source of market events pulled one at a time by an engine."""

    @abstractmethod
    def next(self) -> Feed:
        """Return the next event, or a finished Feed when there are no more."""
        raise NotImplementedError


class MarketFeed(MarketGenerator):
    """
    Historical market generator over a materialized event sequence.

    States: loaded with a cursor that only moves forward, then exhausted.
    Every pull after exhaustion reports FINISHED again.
    """

    def __init__(self, events: Iterable[MarketEvent]):
        self._events: list[MarketEvent] = list(events)
        self._cursor = 0
        self._finished_logged = False

    def next(self) -> Feed:
        if self._cursor >= len(self._events):
            if not self._finished_logged:
                self._finished_logged = True
                logger.info("Historical feed exhausted", events=len(self._events))
            return Feed.finished()

        event = self._events[self._cursor]
        self._cursor += 1
        return Feed.next(event)

    @property
    def remaining(self) -> int:
        """Number of events not yet pulled."""
        return len(self._events) - self._cursor

    @property
    def is_exhausted(self) -> bool:
        return self._cursor >= len(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[MarketEvent]:
        """Pull the remaining events until exhaustion, consuming the feed."""
        while True:
            feed = self.next()
            if feed.is_finished:
                return
            yield feed.event

    def __repr__(self) -> str:
        return f"MarketFeed(events={len(self._events)}, remaining={self.remaining})"
