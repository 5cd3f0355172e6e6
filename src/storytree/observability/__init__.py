"""Observability module for storytree.

Provides structured logging for the reconciliation engine.
"""

from storytree.observability.logging import (
    LIBRARY_LOGGER_NAME,
    JSONLFileHandler,
    KeyValueFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "LIBRARY_LOGGER_NAME",
    "JSONLFileHandler",
    "KeyValueFormatter",
    "configure_logging",
    "get_logger",
]
