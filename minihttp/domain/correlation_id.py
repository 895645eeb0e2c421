"""Per-connection correlation ids.

Each worker thread opens a :func:`connection_scope` for the connection it
serves; everything logged through a :class:`CorrelationLoggerAdapter` inside
that scope carries the same id, which ties one connection's log lines
together in the JSON output.
"""

import contextlib
import contextvars
import logging
import uuid
from typing import Any, Iterator, MutableMapping, Optional

LOGGER_PREFIX = "minihttp."
NO_CORRELATION_ID = "-"

_connection_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "minihttp_connection_id", default=None
)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_correlation_id() -> Optional[str]:
    return _connection_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _connection_id.set(correlation_id)


def clear_correlation_id() -> None:
    _connection_id.set(None)


@contextlib.contextmanager
def connection_scope() -> Iterator[str]:
    """Bind a fresh id for the duration of the block and restore the previous one."""
    token = _connection_id.set(generate_correlation_id())
    try:
        yield _connection_id.get()
    finally:
        _connection_id.reset(token)


def component_name(logger_name: str) -> str:
    """``minihttp.transport.worker`` -> ``transport.worker``; others unchanged."""
    return logger_name.removeprefix(LOGGER_PREFIX)


class CorrelationLoggerAdapter(logging.LoggerAdapter):
    """Adds ``correlation_id`` and ``component`` to every record's extras."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {
            **(kwargs.get("extra") or {}),
            "correlation_id": get_correlation_id() or NO_CORRELATION_ID,
            "component": component_name(self.logger.name),
        }
        return msg, kwargs
