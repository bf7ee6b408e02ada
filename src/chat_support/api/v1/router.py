"""
API v1 router aggregator.

Routes included in v1:
    - /chat - Start, poll and inspect chat sessions; queue status; agent roster

Routes NOT versioned (kept at root level):
    - /health/* - Health check endpoints
    - /metrics - Prometheus scrape endpoint
"""

from fastapi import APIRouter

from chat_support.api.routes import chat


router = APIRouter()

# Chat routes: /api/v1/chat/*
router.include_router(
    chat.router,
    prefix="/chat",
    tags=["Chat"]
)


__all__ = ["router"]
