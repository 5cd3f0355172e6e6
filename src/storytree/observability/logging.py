"""Structured logging for storytree.

storytree is a library, so importing it never touches the host's logging
setup. ``get_logger`` returns a structlog logger bound to a standard
library logger under the ``storytree`` namespace; events flow through the
host's handlers like any other library's records, with the structlog key/value
context attached as record attributes.

Hosts that want storytree's own output opt in with ``configure_logging``,
which installs handlers on the ``storytree`` logger only:
- Console: a rich handler on stderr, level controlled by verbosity
- File: JSONL events appended to a file of the host's choosing
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 - Used at runtime for path operations
from typing import Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

LIBRARY_LOGGER_NAME = "storytree"

# Attributes every LogRecord carries; anything else came from structlog context.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.render_to_log_kwargs,
]

# Library convention: stay silent unless the host adds handlers.
logging.getLogger(LIBRARY_LOGGER_NAME).addHandler(logging.NullHandler())


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the structlog key/value context carried by ``record``."""
    return {
        key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
    }


class KeyValueFormatter(logging.Formatter):
    """Render the event name followed by its context as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = record_context(record)
        if not context:
            return message
        pairs = " ".join(f"{key}={value!r}" for key, value in context.items())
        return f"{message} {pairs}"


class JSONLFileHandler(logging.FileHandler):
    """File handler that writes one JSON object per record."""

    def emit(self, record: logging.LogRecord) -> None:
        """Write log record as JSON line."""
        try:
            entry = {
                "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            entry.update(record_context(record))

            line = json.dumps(entry, default=str) + "\n"
            if self.stream is None:
                self.stream = self._open()
            self.stream.write(line)
            self.stream.flush()
        except Exception:
            self.handleError(record)


def configure_logging(verbosity: int = 0, log_file: Path | None = None) -> None:
    """Install storytree's own handlers on the ``storytree`` logger.

    Calling this again replaces the handlers installed by the previous call.
    The root logger and the global structlog configuration are left alone.

    Args:
        verbosity: 0=WARNING (default), 1=INFO, 2+=DEBUG on the console.
        log_file: If given, every event at DEBUG and above is also appended
            to this file as JSONL. Parent directories are created.
    """
    logger = logging.getLogger(LIBRARY_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            continue
        logger.removeHandler(handler)
        handler.close()

    levels = {0: logging.WARNING, 1: logging.INFO}
    console_level = levels.get(verbosity, logging.DEBUG)

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
        level=console_level,
    )
    console_handler.setFormatter(KeyValueFormatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = JSONLFileHandler(str(log_file), mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if log_file is not None else console_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a storytree module.

    Has no configuration side effects; safe to call at import time.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound logger whose events are emitted through ``logging.getLogger(name)``.
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger
