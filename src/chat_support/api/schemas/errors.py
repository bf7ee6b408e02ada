"""Error response schemas and error codes."""

from enum import Enum
from typing import Any
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """
    Standard error codes for API responses.

    Error codes are categorized by HTTP status code ranges:
    - 4xx: Client errors
    - 5xx: Server errors
    """

    # ===== Validation Errors (400) =====
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed (400)"""

    # ===== Not Found Errors (404) =====
    NOT_FOUND = "NOT_FOUND"
    """Resource not found (404)"""

    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    """Chat session not found or inactive (404)"""

    AGENT_NOT_FOUND = "AGENT_NOT_FOUND"
    """Agent not found (404)"""

    # ===== Conflict Errors (409) =====
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    """Resource already exists (409)"""

    # ===== Server Errors (500) =====
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Internal server error (500)"""


class FieldError(BaseModel):
    """
    Detailed error information for a specific field.

    Used in validation errors to provide field-level error details.
    """

    model_config = {"str_strip_whitespace": True}

    field: str = Field(
        ...,
        description="Field name or path (e.g., 'body.user_id')",
        examples=["body.user_id"]
    )
    message: str = Field(
        ...,
        description="Human-readable error message for this field",
        examples=["This field is required"]
    )
    code: str | None = Field(
        default=None,
        description="Optional machine-readable error code for this field",
        examples=["MISSING", "STRING_TOO_SHORT"]
    )
    value: Any | None = Field(
        default=None,
        description="The invalid value that was provided",
    )


class ErrorDetail(BaseModel):
    """
    Detailed error information.

    Example:
        ```python
        error = ErrorDetail(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found or inactive",
            context={"session_id": "5b0c..."},
        )
        ```
    """

    model_config = {"str_strip_whitespace": True}

    code: ErrorCode = Field(
        ...,
        description="Machine-readable error code",
        examples=[ErrorCode.SESSION_NOT_FOUND, ErrorCode.VALIDATION_ERROR]
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=[
            "Session not found or inactive",
            "Request validation failed",
        ]
    )
    details: list[FieldError] | None = Field(
        default=None,
        description="Field-level error details (primarily for validation errors)",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context (e.g., session IDs)",
    )

    @classmethod
    def from_validation_error(
        cls,
        validation_errors: list[dict[str, Any]]
    ) -> "ErrorDetail":
        """
        Create ErrorDetail from Pydantic validation errors.

        Args:
            validation_errors: List of Pydantic validation error dicts

        Returns:
            ErrorDetail with field-level validation errors
        """
        field_errors = []

        for err in validation_errors:
            field_path = ".".join(str(loc) for loc in err.get("loc", []))

            field_errors.append(
                FieldError(
                    field=field_path,
                    message=err.get("msg", "Validation error"),
                    code=err.get("type", "VALIDATION_ERROR").upper(),
                    value=err.get("input")
                )
            )

        return cls(
            code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            details=field_errors
        )
