"""Logging setup for the minihttp process.

Every module logs through a child of the ``minihttp`` logger. This module
installs exactly one handler on that parent, either on stdout or on a rotating
file, and renders records as one JSON object per line unless plain text is
requested.
"""

import json
import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from minihttp.domain.correlation_id import CorrelationLoggerAdapter

LOGGER_NAME = "minihttp"
PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROTATE_AT_BYTES = 10 * 1024 * 1024
ROTATED_FILES_KEPT = 5
REDACTED = "[REDACTED]"

# Request lines and headers are logged verbatim, so anything that looks like a
# credential gets masked before it reaches a handler.
SENSITIVE_PATTERNS = (
    re.compile(r"(?i)(authorization|token|key|signature|password|secret|api[_-]?key)"),
    re.compile(r"\b[A-Fa-f0-9]{32,}\b"),
    re.compile(r"\b[A-Za-z0-9+/]{32,}={0,2}\b"),
)

# Client-supplied header values and error text; routes and paths are logged as is.
REDACTED_FIELDS = frozenset({"user_agent", "host", "error"})

# Attributes passed through ``extra=`` that end up in the JSON payload.
STRUCTURED_FIELDS = (
    "event",
    "client",
    "route",
    "method",
    "status",
    "path",
    "host",
    "user_agent",
    "bytes_in",
    "bytes_out",
    "error_type",
    "error",
    "port",
    "directory",
    "log_destination",
    "log_level",
    "log_format",
    "shutdown_grace_seconds",
    "remaining_workers",
    "signal",
    "destination",
    "use_json",
)


def redact_sensitive(value: str) -> str:
    """Return ``value`` unchanged, or a placeholder if it looks like a secret."""
    if value and any(pattern.search(value) for pattern in SENSITIVE_PATTERNS):
        return REDACTED
    return value


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Give records logged outside a connection a ``-`` correlation id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line with sorted keys."""

    def __init__(self, datefmt: Optional[str] = None):
        super().__init__(datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "-"),
            "component": getattr(record, "component", "unknown"),
        }
        for field in STRUCTURED_FIELDS:
            if not hasattr(record, field):
                continue
            value = getattr(record, field)
            if field in REDACTED_FIELDS and isinstance(value, str):
                value = redact_sensitive(value)
            payload[field] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=True)


def _resolve_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handler(
    destination: Optional[str], level: int, use_json: bool = True
) -> logging.Handler:
    """Create the stdout or rotating file handler for ``destination``."""
    handler: logging.Handler
    if destination is None or destination.lower() == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        log_path = Path(destination)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_path, maxBytes=ROTATE_AT_BYTES, backupCount=ROTATED_FILES_KEPT
        )

    formatter = (
        JsonFormatter(DATE_FORMAT)
        if use_json
        else logging.Formatter(PLAIN_FORMAT, DATE_FORMAT)
    )
    handler.setFormatter(formatter)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    return handler


def configure_logging(
    level: str = "INFO", destination: Optional[str] = None, use_json: bool = True
) -> CorrelationLoggerAdapter:
    """Install the single project handler and return an adapter for it.

    Calling this again replaces the previous handler, closing it first so a
    log file is not left open.
    """
    logger = logging.getLogger(LOGGER_NAME)
    numeric_level = _resolve_level(level)
    logger.setLevel(numeric_level)
    logger.propagate = False

    while logger.handlers:
        stale = logger.handlers[0]
        logger.removeHandler(stale)
        stale.close()
    logger.addHandler(_build_handler(destination, numeric_level, use_json))

    adapter = CorrelationLoggerAdapter(logger, {})
    adapter.info(
        "Logging configured",
        extra={
            "event": "logging_configured",
            "destination": destination or "stdout",
            "use_json": use_json,
        },
    )
    return adapter
