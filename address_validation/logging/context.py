"""Request-scoped fields for structured logging.

Anything pushed here (request_id, provider, ...) is copied onto every record
by ContextualFilter. The store is a ContextVar, so concurrent requests on
different threads never see each other's fields.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Get the current logging context.

    Returns:
        Copy of the active fields; mutating it does not affect the context
    """
    return dict(LogContextVar.get())


def push_log_context(**fields: Any) -> Token:
    """Layer new fields over the active logging context.

    Later keys win over earlier ones. Use pop_log_context() with the returned
    token to restore the previous layer.

    Args:
        **fields: Key-value pairs to add to the logging context

    Returns:
        Token that restores the previous context state

    Example:
        >>> token = push_log_context(request_id="3f2a9c")
        >>> # ... every record now carries request_id ...
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to the layer before a push.

    Args:
        token: Token returned from push_log_context()

    Example:
        >>> token = push_log_context(provider="smarty")
        >>> # ... lookup ...
        >>> pop_log_context(token)
    """
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every logging context field.

    This is primarily useful for tests.
    """
    LogContextVar.set({})


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Scope fields to a with-block.

    The outer layer is restored on exit, including when an exception escapes.

    Args:
        **fields: Key-value pairs to add for the duration of the block

    Yields:
        Snapshot of the context inside the block

    Example:
        >>> with log_context(request_id="3f2a9c"):
        ...     logger.info("Validating address")  # record carries request_id
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
