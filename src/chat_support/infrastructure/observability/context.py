"""
Log context management for adding contextual information to structured logs.

Usage:
    from chat_support.infrastructure.observability.context import log_context

    with log_context(cycle=42):
        logger.info("queue drained")  # Includes cycle
"""
from typing import Any
from contextlib import contextmanager
import structlog


@contextmanager
def log_context(**kwargs: Any):
    """
    Context manager for adding context to logs.

    All key-value pairs passed to this context manager will be automatically
    included in all log entries made within the context.

    Args:
        **kwargs: Key-value pairs to add to log context
    """
    structlog.contextvars.bind_contextvars(**kwargs)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*kwargs.keys())


def bind_context(**kwargs: Any) -> None:
    """
    Bind context variables to the current context.

    Unlike log_context, this does not automatically unbind when done.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()


def get_current_context() -> dict:
    """Get the current log context as a dictionary."""
    return structlog.contextvars.get_contextvars()
