"""
Logging configuration and utilities for the candle replay pipeline.
"""
from .config import configure_logging, get_feed_logger, get_logger, get_sink_logger

__all__ = ["configure_logging", "get_logger", "get_feed_logger", "get_sink_logger"]
