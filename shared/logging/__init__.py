"""
Logging Module
==============

Structured logging using structlog with JSON output for production
and console output for development.

Usage:
    from shared.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Get logger for a module
    logger = get_logger(__name__)

    # Log with context
    logger.info("cost_drivers_extracted", count=5, method="deterministic")
    logger.warning("ai_extraction_failed", reason="invalid json")
"""

from shared.logging.logger import (
    bind_context,
    bound_context,
    clear_context,
    get_logger,
    setup_logging,
)


__all__ = [
    "get_logger",
    "setup_logging",
    "bind_context",
    "bound_context",
    "clear_context",
]
