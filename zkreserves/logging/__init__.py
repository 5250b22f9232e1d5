"""
Logging Module
==============

Structured logging using structlog with JSON output for production
and colored console output for development.

Usage:
    from zkreserves.logging import get_logger, setup_logging

    # Setup at application start
    setup_logging()

    # Get logger for a module
    logger = get_logger(__name__)

    # Log with context
    logger.info("proof_generated", entity_id="0xabc", band=2)
"""

from zkreserves.logging.logger import entity_log_context, get_logger, setup_logging


__all__ = [
    "entity_log_context",
    "get_logger",
    "setup_logging",
]
