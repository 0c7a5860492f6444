"""
Contextual logging utilities for MDB_REPOSITORY.

Repository operations run inside log_context(collection_name=..., operation=...),
so every record emitted through get_logger() carries the collection and
operation it belongs to. Applications can nest their own fields, such as a
request correlation ID, around repository calls.

Usage:
    @app.middleware("http")
    async def correlate(request, call_next):
        with log_context(correlation_id=request.headers.get("x-request-id")):
            return await call_next(request)
"""

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "mdb_repository_log_context", default=None
)


@contextmanager
def log_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """
    Add fields to the logging context for the duration of the block.

    Fields are layered over the enclosing context; the previous context is
    restored on exit, including when the block raises. None values are
    ignored.
    """
    context = {**(_log_context.get() or {})}
    context.update({k: v for k, v in fields.items() if v is not None})
    token = _log_context.set(context)
    try:
        yield context
    finally:
        _log_context.reset(token)


def get_logging_context() -> dict[str, Any]:
    """Current context fields plus a timestamp."""
    return {"timestamp": datetime.now().isoformat(), **(_log_context.get() or {})}


def repository_operation(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Run a repository coroutine method inside its logging context.

    The context holds the repository's ``collection_name`` and the method
    name as ``operation``.
    """

    @wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        with log_context(collection_name=self.collection_name, operation=func.__name__):
            return await func(self, *args, **kwargs)

    return wrapper


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds the current logging context to every record."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**get_logging_context(), **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """Contextual logger for a module (typically called with __name__)."""
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    level: int = logging.INFO,
    success: bool = True,
    message: str | None = None,
    **fields: Any,
) -> None:
    """
    Log the outcome of a repository operation with structured fields.

    Args:
        logger: Logger or adapter to emit on
        operation: Operation name
        level: Log level
        success: Whether the operation succeeded
        message: Message to log (defaults to "Operation: ..." / "Operation failed: ...")
        **fields: Extra structured fields (error_code, status_code, ...)
    """
    if message is None:
        message = f"Operation: {operation}" if success else f"Operation failed: {operation}"

    extra = {**get_logging_context(), "operation": operation, "success": success, **fields}
    logger.log(level, message, extra=extra)
