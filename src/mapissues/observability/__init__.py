"""Observability module for mapissues.

Provides structured logging (structlog over the ``mapissues`` stdlib logger,
rich console, optional JSONL file).
"""

from mapissues.observability.logging import (
    LOGGER_NAME,
    close_file_logging,
    configure_logging,
    get_logger,
)

__all__ = [
    "LOGGER_NAME",
    "close_file_logging",
    "configure_logging",
    "get_logger",
]
