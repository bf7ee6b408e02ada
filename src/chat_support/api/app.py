# src/chat_support/api/app.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from chat_support.api import v1
from chat_support.api.middleware.errors import register_error_handlers
from chat_support.api.middleware.logging import RequestLoggingMiddleware
from chat_support.api.middleware.metrics import MetricsMiddleware
from chat_support.api.middleware.request_id import RequestIDMiddleware
from chat_support.api.routes import health
from chat_support.config.settings import Settings, get_settings
from chat_support.container import ChatSupportContainer
from chat_support.infrastructure.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    container: ChatSupportContainer = app.state.container
    settings = container.settings

    # Startup
    configure_logging(settings)
    container.check_overflow_buffer()

    if settings.monitor_enabled:
        container.monitor.start()
    else:
        logger.warning("Chat monitoring loop disabled; queued chats will not be assigned")

    logger.info(
        "Chat support service started",
        version=settings.app_version,
        environment=settings.environment,
    )

    yield

    # Shutdown
    await container.monitor.stop(timeout=settings.monitor_interval_seconds * 5)
    logger.info("Chat support service stopped")


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ChatSupportContainer] = None,
) -> FastAPI:
    """
    Application factory.

    A prebuilt container (custom clock or stores) takes precedence over
    settings; its own settings are used.
    """
    if container is None:
        container = ChatSupportContainer.build(settings or get_settings())
    settings = container.settings

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
# Chat Support API

Queues incoming support chats and hands them to on-shift agents.

## Flow

1. `POST /api/v1/chat/start` queues a chat, or answers 400 when the queue is full
2. The client calls `POST /api/v1/chat/poll/{session_id}` every second;
   a session that misses 3 seconds of polls is dropped
3. A background loop assigns queued chats to agents, juniors first

## Capacity

Each agent handles up to 10 chats scaled by seniority. The queue holds 1.5x
the on-shift capacity; during office hours an overflow team and an extra
queue buffer kick in when the main queue is full.
        """,
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Health",
                "description": "Liveness, readiness and detailed health of the service and its monitoring loop.",
            },
            {
                "name": "Chat",
                "description": "Start and poll chat sessions, inspect queue status and the agent roster.",
            },
        ],
    )
    app.state.container = container

    # Middleware (order matters - added in reverse order of execution)
    # Request ID should be first so it's available to all other middleware
    app.add_middleware(RequestLoggingMiddleware)
    if settings.metrics_enabled:
        app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Error handlers
    register_error_handlers(app, settings)

    # ============================================================================
    # Routes
    # ============================================================================

    # Health and metrics (no versioning - kept at root level)
    app.include_router(health.router, tags=["Health"])

    # API v1 routes, all under /api/v1
    app.include_router(v1.router, prefix="/api/v1")

    return app
