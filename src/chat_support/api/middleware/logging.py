"""
Request logging middleware with structured logging.

Logs method, path, status code and duration for every request except
health probes and the metrics scrape.
"""
import time
from typing import Set
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from chat_support.infrastructure.observability.logging import get_logger


logger = get_logger(__name__)


# Paths polled by probes and scrapers; logging them is noise.
QUIET_PATHS: Set[str] = {
    "/health",
    "/health/live",
    "/health/ready",
    "/metrics",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for structured request/response logging.

    Client polls arrive every second per waiting user, so successful polls
    are logged at debug level.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()

        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        log_context = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                "Request failed with exception",
                **log_context,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration * 1000, 2),
            )
            raise

        duration = time.time() - start_time
        duration_ms = round(duration * 1000, 2)

        response_context = {
            **log_context,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }

        if response.status_code >= 500:
            logger.error("Request completed with error", **response_context)
        elif response.status_code >= 400:
            logger.warning("Request completed with client error", **response_context)
        elif "/poll/" in request.url.path:
            logger.debug("Request completed", **response_context)
        else:
            logger.info("Request completed", **response_context)

        response.headers["X-Process-Time-Ms"] = str(duration_ms)

        return response
