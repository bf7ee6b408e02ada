"""API error schemas. Route models live in api.schemas.chat."""

from chat_support.api.schemas.errors import (
    ErrorCode,
    ErrorDetail,
    FieldError,
)

__all__ = [
    "ErrorCode",
    "ErrorDetail",
    "FieldError",
]
