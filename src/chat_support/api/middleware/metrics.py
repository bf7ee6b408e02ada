import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from chat_support.infrastructure.observability.metrics import (
    REQUEST_COUNT,
    REQUEST_LATENCY,
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request count and latency per route template."""

    def _endpoint_label(self, request: Request) -> str:
        # Use the route template so session IDs don't explode label cardinality.
        route = request.scope.get("route")
        path = getattr(route, "path", None)
        return path or "unmatched"

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start
        endpoint = self._endpoint_label(request)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).inc()

        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)

        return response
