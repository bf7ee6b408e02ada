"""
Error handling for FastAPI.

This module provides:
- Exception handler for all AppError subclasses
- Validation error handling with field-level details
- A generic fallback that hides internal details in production
- Request ID tracking in error responses

Usage:
    from fastapi import FastAPI
    from chat_support.api.middleware.errors import register_error_handlers

    app = FastAPI()
    register_error_handlers(app, settings)
"""

import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chat_support.api.schemas.errors import ErrorCode, ErrorDetail, FieldError
from chat_support.config.settings import Settings
from chat_support.domain.exceptions import AppError
from chat_support.infrastructure.observability.logging import get_logger


logger = get_logger(__name__)


def _get_request_id(request: Request) -> str:
    """
    Extract or generate request ID for error tracking.

    Args:
        request: FastAPI Request object

    Returns:
        Request ID string
    """
    if hasattr(request.state, "request_id"):
        return request.state.request_id

    request_id = request.headers.get("x-request-id")
    if request_id:
        return request_id

    return str(uuid.uuid4())


def _create_error_response(
    error_code: ErrorCode,
    message: str,
    request_id: str,
    status_code: int,
    details: Optional[list[FieldError]] = None,
    context: Optional[dict[str, Any]] = None,
    suggested_action: Optional[str] = None,
    is_production: bool = False,
) -> JSONResponse:
    """
    Create standardized error response.

    Args:
        error_code: Machine-readable error code
        message: Human-readable error message
        request_id: Request ID for tracing
        status_code: HTTP status code
        details: Optional field-level error details
        context: Optional additional context
        suggested_action: Optional user-friendly suggestion
        is_production: Whether running in production (hides internal details)

    Returns:
        JSONResponse with error information
    """
    if is_production and status_code >= 500:
        message = "An internal error occurred. Please try again later."
        context = None

    error_detail = ErrorDetail(
        code=error_code,
        message=message,
        details=details,
        context=context,
    )

    response_content: dict[str, Any] = {
        "error": error_detail.model_dump(mode="json", exclude_none=True),
        "request_id": request_id,
    }

    if suggested_action:
        response_content["suggested_action"] = suggested_action

    return JSONResponse(
        status_code=status_code,
        content=response_content,
    )


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Register all error handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Settings the application was built with
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        request_id = _get_request_id(request)

        if exc.status_code >= 500:
            logger.error(
                "Server error",
                error=str(exc),
                path=request.url.path,
                method=request.method,
                error_type=type(exc).__name__,
            )
        else:
            logger.debug(
                "Client error",
                error=str(exc),
                path=request.url.path,
                status_code=exc.status_code,
            )

        return _create_error_response(
            error_code=exc.error_code,
            message=exc.message,
            request_id=request_id,
            status_code=exc.status_code,
            context=exc.details if exc.details else None,
            suggested_action=exc.suggested_action,
            is_production=settings.is_production,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """
        Handle FastAPI request validation errors.

        Converts Pydantic validation errors to structured field-level errors.
        """
        request_id = _get_request_id(request)
        error_detail = ErrorDetail.from_validation_error(exc.errors())

        logger.info(
            "Validation error",
            path=request.url.path,
            method=request.method,
            field_count=len(error_detail.details or []),
        )

        return _create_error_response(
            error_code=error_detail.code,
            message=error_detail.message,
            request_id=request_id,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=error_detail.details,
            suggested_action="Please check your input and ensure all required fields are provided correctly",
            is_production=settings.is_production,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Safe fallback for unexpected errors."""
        request_id = _get_request_id(request)

        logger.exception(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
        )

        error_message = "An unexpected error occurred"
        context = None
        if not settings.is_production:
            error_message = f"An unexpected error occurred: {exc}"
            context = {"exception_type": type(exc).__name__}

        return _create_error_response(
            error_code=ErrorCode.INTERNAL_ERROR,
            message=error_message,
            request_id=request_id,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            context=context,
            suggested_action="Please try again later. If the problem persists, contact support",
            is_production=settings.is_production,
        )
