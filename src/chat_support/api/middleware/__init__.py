"""FastAPI middleware components."""

from chat_support.api.middleware.request_id import (
    RequestIDMiddleware,
    get_request_id,
    set_request_id,
    get_correlation_id,
    set_correlation_id,
    add_request_id_to_log,
)

__all__ = [
    "RequestIDMiddleware",
    "get_request_id",
    "set_request_id",
    "get_correlation_id",
    "set_correlation_id",
    "add_request_id_to_log",
]
