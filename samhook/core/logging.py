"""Structured logging configuration for samhook.

Uses structlog for JSON-formatted logging with context management. Nothing is
configured at import time; applications call configure_logging() if they want
samhook's setup.
"""

import logging
from typing import Optional

import structlog

from samhook.config import Config


def configure_logging(level: Optional[str] = None, json: Optional[bool] = None):
    """Configure structured logging.

    Args:
        level: Log level name (defaults to SAMHOOK_LOG_LEVEL)
        json: Render JSON lines instead of console output (defaults to SAMHOOK_LOG_JSON)

    Returns:
        Configured bound logger
    """
    level = (level or Config.log_level()).upper()
    json = Config.log_json() if json is None else json
    renderer = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger("samhook")


# Global logger instance (picks up whatever configuration is active)
logger = structlog.get_logger("samhook")


def get_logger():
    """Get the package logger instance."""
    return logger
