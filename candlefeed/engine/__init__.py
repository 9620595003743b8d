"""
Engine integration module.

Defines the closed set of events a trading engine emits, the channel they
travel on, and the asynchronous sink loop that drains them.
"""

from .channel import EventChannel, unbounded_channel
from .sink import EventLogger, EventObserver, listen_to_engine_events

__all__ = [
    "EventChannel",
    "EventLogger",
    "EventObserver",
    "listen_to_engine_events",
    "unbounded_channel",
]
