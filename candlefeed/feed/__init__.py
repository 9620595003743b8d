"""
Historical market feed module.

Serves a fully materialized, time-ordered sequence of market events to a
pull-based consumer.
"""

from .historical import Feed, FeedStatus, MarketFeed, MarketGenerator

__all__ = ["Feed", "FeedStatus", "MarketFeed", "MarketGenerator"]
