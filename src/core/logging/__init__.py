"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging with JSON output for production and
human-readable console output for development.

The logging configuration includes:
- ISO timestamps
- Log level inclusion
- JSON/Console output based on settings
- Logger caching
"""

import logging

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False):
    """
    Configures the application's logging system.

    structlog events are routed through the standard library so that uvicorn
    and SQLAlchemy output share the same level threshold.

    Args:
        log_level: Minimum level name (e.g. "INFO", "DEBUG").
        json_logs: Render events as JSON lines instead of console output.
    """
    logging.basicConfig(format="%(message)s", level=log_level.upper())

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Create a singleton logger instance for the application
logger = structlog.get_logger()

__all__ = ["configure_logging", "logger"]
