"""
Exception hierarchy for the chat support service.

All exceptions inherit from AppError which provides:
- error_code: Machine-readable error code (from ErrorCode enum)
- status_code: HTTP status code for API responses
- message: Human-readable error message
- details: Optional dictionary with additional context
- suggested_action: Optional user-friendly suggestion for resolution

Store and service code raises these; the HTTP layer maps them to responses
through the handlers in api.middleware.errors. Not-found is an expected outcome and
the service layer reports it as a negative result; the HTTP routes raise
SessionNotFound to produce the 404 response.
"""

from typing import Any, Optional
from chat_support.api.schemas.errors import ErrorCode


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        error_code: Machine-readable error code (from ErrorCode enum)
        status_code: HTTP status code (default: 500)
        message: Human-readable error message
        details: Optional dictionary with additional error context
        suggested_action: Optional user-friendly suggestion for resolution
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"
    default_suggested_action: Optional[str] = None

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggested_action: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        self.suggested_action = suggested_action or self.default_suggested_action
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code.value}, "
            f"status_code={self.status_code}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary with error information
        """
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details

        if self.suggested_action:
            result["suggested_action"] = self.suggested_action

        return result


# ========================================
# Resource Errors (404, 409)
# ========================================


class ResourceError(AppError):
    """Base class for resource-related errors."""

    pass


class NotFound(ResourceError):
    """Resource not found."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"
    default_suggested_action = "Please check the resource ID and try again"


class SessionNotFound(NotFound):
    """Chat session does not exist or is no longer live."""

    error_code = ErrorCode.SESSION_NOT_FOUND
    default_message = "Session not found or inactive"
    default_suggested_action = "Start a new chat session"


class AgentNotFound(NotFound):
    """Agent not found."""

    error_code = ErrorCode.AGENT_NOT_FOUND
    default_message = "Agent not found"
    default_suggested_action = "Please verify the agent ID is correct"


class DuplicateSession(ResourceError):
    """A session with the same ID is already stored."""

    status_code = 409
    error_code = ErrorCode.DUPLICATE_RESOURCE
    default_message = "Session already exists"
