"""Health check endpoints for Kubernetes probes and detailed diagnostics."""
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field

from chat_support.api.dependencies import Container, Monitor

# Application startup time for uptime calculation
_startup_time = time.time()

router = APIRouter()


# ===== Schemas =====


class HealthStatus(str, Enum):
    """Health status enumeration."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class LivenessResponse(BaseModel):
    """Liveness probe response."""
    status: str = Field("alive", description="Liveness status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ReadinessResponse(BaseModel):
    """Readiness probe response."""
    status: str = Field(..., description="Readiness status")
    monitor_running: bool = Field(..., description="Whether the monitoring loop is running")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class HealthResponse(BaseModel):
    """Detailed health check response."""
    status: HealthStatus = Field(..., description="Overall system health status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    uptime_seconds: float = Field(..., description="Application uptime in seconds")
    version: str = Field(..., description="Application version")
    queue_size: int = Field(..., description="Queued plus active sessions")
    agents_on_shift: int
    monitor_running: bool
    monitor_cycles: int = Field(..., description="Monitoring cycles completed since startup")
    last_cycle_at: Optional[datetime] = None


# ===== Endpoints =====


@router.get("/health/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe: the process is up and serving."""
    return LivenessResponse()


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ReadinessResponse}},
)
async def readiness(container: Container, response: Response) -> ReadinessResponse:
    """
    Readiness probe.

    Not ready while the monitoring loop is expected to run but is not
    running: without it, queued chats would never reach an agent.
    """
    running = container.monitor.is_running
    ready = running or not container.settings.monitor_enabled
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status="ready" if ready else "not_ready", monitor_running=running)


@router.get("/health", response_model=HealthResponse)
async def health(container: Container, monitor: Monitor) -> HealthResponse:
    """Detailed health with queue and loop diagnostics."""
    running = monitor.is_running
    if running or not container.settings.monitor_enabled:
        overall = HealthStatus.HEALTHY
    else:
        overall = HealthStatus.DEGRADED

    return HealthResponse(
        status=overall,
        uptime_seconds=round(time.time() - _startup_time, 2),
        version=container.settings.app_version,
        queue_size=container.sessions.queue_count(),
        agents_on_shift=len(container.policy.on_shift_agents()),
        monitor_running=running,
        monitor_cycles=monitor.cycles,
        last_cycle_at=monitor.last_cycle_at,
    )


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
