"""Logging, log context and metrics."""

from chat_support.infrastructure.observability.logging import (
    configure_logging,
    get_logger,
)
from chat_support.infrastructure.observability.context import (
    log_context,
    bind_context,
    clear_context,
    get_current_context,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "bind_context",
    "clear_context",
    "get_current_context",
]
