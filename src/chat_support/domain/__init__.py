"""Domain models, roster and exceptions."""

from chat_support.domain.exceptions import (
    AppError,
    ResourceError,
    NotFound,
    SessionNotFound,
    AgentNotFound,
    DuplicateSession,
)
from chat_support.domain.models import (
    Agent,
    ChatSession,
    Seniority,
    SessionStatus,
)

__all__ = [
    # Exceptions
    "AppError",
    "ResourceError",
    "NotFound",
    "SessionNotFound",
    "AgentNotFound",
    "DuplicateSession",
    # Entities
    "Agent",
    "ChatSession",
    "Seniority",
    "SessionStatus",
]
