# backend/finengine/utils/context.py
"""
Run context for log correlation.

Every log line written during one engine run carries the same correlation
ID, so a caller can grep a single evaluation out of interleaved logs.

Uses Python's contextvars, so concurrent runs in different threads or
asyncio tasks each see their own ID.

Note:
    Only the correlation ID lives here. The user whose data is being
    processed is always passed explicitly to the engine, never looked up
    from ambient context.

Usage:
    from finengine.utils.context import correlation_scope, get_correlation_id

    with correlation_scope() as run_id:
        engine.evaluate(dataset)   # all logs tagged with run_id
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# =============================================================================
# CONTEXT VARIABLES
# =============================================================================

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """
    Get the current run's correlation ID.

    Returns:
        The correlation ID, or None if not set.
    """
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current context.

    Args:
        correlation_id: Unique identifier for this run
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID."""
    _correlation_id_var.set(None)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation ID for the duration of a with-block.

    An existing ID is reused so nested scopes (a caller's request ID wrapping
    an engine run) keep one ID end to end. The previous value is restored on
    exit.

    Args:
        correlation_id: ID to bind. Defaults to the current ID, or a new uuid4.

    Yields:
        The bound correlation ID
    """
    bound = correlation_id or get_correlation_id() or uuid.uuid4().hex
    token = _correlation_id_var.set(bound)
    try:
        yield bound
    finally:
        _correlation_id_var.reset(token)
