"""
Single-producer, single-consumer event channel between an engine and a sink.

Sending is synchronous and never blocks the engine. The channel is unbounded
by default; with a capacity set, the oldest buffered event is dropped when a
new one arrives on a full buffer. Receiving suspends until an event is
buffered or the channel is closed.
"""

import asyncio
from collections import deque
from typing import AsyncIterator, Optional

from ..errors import ChannelClosedError
from ..logging.config import get_sink_logger
from .events import Event

logger = get_sink_logger(__name__)


class EventChannel:
    """
    FIFO channel of engine events.

    Must be used from a single asyncio event loop thread.
    """

    def __init__(self, capacity: Optional[int] = None):
        """
        Initialize the channel.

        Args:
            capacity: Maximum buffered events, None for unbounded. When full,
                the oldest buffered event is dropped.
        """
        if capacity is not None and capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")

        self.capacity = capacity
        self._buffer: deque = deque()
        self._ready = asyncio.Event()
        self._closed = False
        self.sent = 0
        self.dropped = 0

    def send(self, event: Event) -> None:
        """
        Buffer an event for the consumer.

        Raises:
            ChannelClosedError: If the channel has been closed
        """
        if self._closed:
            raise ChannelClosedError(
                f"Cannot send {event.kind.value} event on a closed channel",
                event_kind=event.kind.value,
            )

        if self.capacity is not None and len(self._buffer) >= self.capacity:
            dropped = self._buffer.popleft()
            self.dropped += 1
            logger.warning(
                "Event channel full, dropping oldest event",
                capacity=self.capacity,
                dropped_kind=dropped.kind.value,
                dropped_total=self.dropped,
            )

        self._buffer.append(event)
        self.sent += 1
        self._ready.set()

    def close(self) -> None:
        """Close the producing side. Buffered events remain receivable."""
        self._closed = True
        self._ready.set()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._buffer)

    async def recv(self) -> Optional[Event]:
        """
        Wait for the next event.

        Returns:
            The oldest buffered event, or None once the channel is closed and
            drained
        """
        while not self._buffer:
            if self._closed:
                return None
            self._ready.clear()
            await self._ready.wait()
        return self._buffer.popleft()

    def __aiter__(self) -> AsyncIterator[Event]:
        return self._drain()

    async def _drain(self) -> AsyncIterator[Event]:
        while True:
            event = await self.recv()
            if event is None:
                return
            yield event


def unbounded_channel() -> EventChannel:
    """Create an unbounded event channel."""
    return EventChannel()
