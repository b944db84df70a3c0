"""
Catchy Logging Setup
====================

Structured logging for the library and the applications embedding it.
Library modules log through structlog; this module wires structlog onto the
standard logging tree so the events land in the application's handlers.

Usage:
    from catchy_core.logging import configure_logging, get_logger

    # Setup at startup
    configure_logging(level="DEBUG", json_output=True)

    logger = get_logger(__name__)
    try_catch(send_report, max_retries=2).log_if_failure(logger, "report.send_failed")

Environment:
    CATCHY_LOG_LEVEL   Default level when none is passed (INFO)
    CATCHY_LOG_JSON    Render JSON instead of console lines (false)
"""

import logging
import os
import sys
from typing import Optional

import structlog

_TRUTHY = {"1", "true", "yes", "on"}


# =============================================================================
# Setup Functions
# =============================================================================

def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Whether to render JSON (for production)

    Returns:
        Configured root logger
    """
    if level is None:
        level = os.getenv("CATCHY_LOG_LEVEL", "INFO")
    if json_output is None:
        json_output = os.getenv("CATCHY_LOG_JSON", "").strip().lower() in _TRUTHY

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    root_logger.handlers.clear()

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
    ))
    root_logger.addHandler(handler)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
    processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    return root_logger


# =============================================================================
# Loggers
# =============================================================================

def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger with the given name."""
    return structlog.get_logger(name)
