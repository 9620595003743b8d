"""
Centralized logging configuration for the candle replay pipeline.

This module provides standardized logging configuration using structlog
for all components. Loaders, the historical feed and the event sink all log
through this configuration so replay runs produce one consistent stream.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",  # structlog will handle formatting
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_feed_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for data loading and historical feed activity.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the feed subsystem
    """
    return structlog.get_logger(name, subsystem="feed")


def get_sink_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for the engine event sink.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the event sink subsystem
    """
    return structlog.get_logger(name, subsystem="event_sink")


def log_load_summary(
    logger: FilteringBoundLogger,
    source: str,
    source_format: str,
    events: int,
    reordered: bool,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of loading a historical dataset with standardized format.

    Args:
        logger: Structlog logger instance
        source: Path or name of the source file
        source_format: Decoder used ('json' or 'csv')
        events: Number of market events produced
        reordered: Whether the events had to be sorted by exchange time
        context: Additional context data
    """
    bound_logger = logger.bind(
        source=source,
        source_format=source_format,
        events=events,
        reordered=reordered,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Historical dataset loaded")
