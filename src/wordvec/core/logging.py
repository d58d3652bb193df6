"""
Logging utilities for the wordvec package.

Library modules only create loggers with ``get_logger(__name__)`` and emit
DEBUG diagnostics. Handlers are attached by the command-line tools through
``configure_logging``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO


PACKAGE_LOGGER = "wordvec"

# Extra fields that are copied into formatted log lines when present.
CONTEXT_FIELDS = ("path", "words", "embedding_size", "backend", "query")


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs JSON-structured log lines.

    Each log line includes:
    - Standard log fields (timestamp, level, message, logger)
    - Context fields passed via the 'extra' parameter
    """

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat()

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter that outputs human-readable log lines with context.

    Format: TIMESTAMP - LOGGER - LEVEL - MESSAGE [path=X words=Y]
    """

    def __init__(self, include_timestamp: bool = True):
        if include_timestamp:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            fmt = "%(name)s - %(levelname)s - %(message)s"
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        context_parts = []
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                context_parts.append(f"{field}={value}")

        if context_parts:
            return f"{base} [{' '.join(context_parts)}]"
        return base


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger instance for the wordvec package.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional logging level override

    Returns:
        Logger instance

    Example:
        >>> from wordvec.core.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("Loaded vectors", extra={"words": 3})
    """
    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level)

    return logger


def configure_logging(
    level: int = logging.INFO,
    structured: bool = False,
    include_timestamp: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Configure the ``wordvec`` package logger.

    Log output goes to stderr by default, so that query results written to
    stdout stay machine readable.

    Args:
        level: Logging level (default: INFO)
        structured: If True, output JSON-structured logs; if False, human-readable
        include_timestamp: Whether to include timestamp in log messages
        stream: Stream for the handler (default: sys.stderr)

    Returns:
        The handler attached to the package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    # Replace our own handler on repeated calls instead of stacking them.
    for existing in list(package_logger.handlers):
        if getattr(existing, "_wordvec_handler", False):
            package_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler._wordvec_handler = True

    if structured:
        formatter = StructuredFormatter(include_timestamp=include_timestamp)
    else:
        formatter = HumanReadableFormatter(include_timestamp=include_timestamp)

    handler.setFormatter(formatter)
    package_logger.addHandler(handler)
    return handler
