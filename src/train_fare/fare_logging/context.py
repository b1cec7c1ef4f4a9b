"""Per-task logging context for adding fields to log records.

Context lives in a ContextVar rather than thread-local storage so that
concurrent ``estimate()`` coroutines running on one event loop do not see
each other's fields.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_fields: ContextVar[dict[str, Any]] = ContextVar("fare_log_context", default={})


class LogContext:
    """Read access to the fields bound for the current task."""

    @classmethod
    def get(cls) -> dict[str, Any]:
        return dict(_fields.get())


class ContextFilter(logging.Filter):
    """Injects LogContext fields into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind fields for the duration of the block.

    Nested blocks extend the outer fields; leaving a block restores what was
    bound before it. Fields reach records only through ContextFilter (see
    setup_logging).
    """
    token = _fields.set({**_fields.get(), **kwargs})
    try:
        yield
    finally:
        _fields.reset(token)


@contextmanager
def log_request_context(request_id: str, **kwargs: Any) -> Iterator[None]:
    """Bind request_id (and correlation_id, defaulting to it) for one estimate."""
    correlation_id = kwargs.pop("correlation_id", request_id)
    with log_context(request_id=request_id, correlation_id=correlation_id, **kwargs):
        yield
