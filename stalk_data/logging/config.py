"""
Centralized logging configuration for the stock-data access layer.

All components log through structlog so cache decisions, fallbacks and
dropped symbols show up as structured events with consistent fields.
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
    # Level names map onto the stdlib constants
    log_level = getattr(logging, level.upper())

    # stdlib handler writes the already-rendered event line
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    # Shared processors: level filtering, logger name, level, exc info
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Optional enrichment
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    # Renderer must come last
    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    # Loggers are cached after first use, so configure before logging
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


def get_cache_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for symbol cache decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structlog logger carrying the cache subsystem binding
    """
    return get_logger(name).bind(subsystem="symbol_cache")


def log_cache_event(
    logger: FilteringBoundLogger,
    symbol: str,
    outcome: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a cache decision with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Symbol the decision was made for
        outcome: One of hit, miss, stored, evicted, discarded, invalidated
        context: Additional context data (entry age, ttl, ...)
    """
    bound_logger = logger.bind(symbol=symbol, cache_outcome=outcome)

    if context:
        bound_logger = bound_logger.bind(**context)

    if outcome == "discarded":
        bound_logger.info("Abandoned load discarded")
    else:
        bound_logger.debug("Cache decision")
