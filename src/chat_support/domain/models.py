# src/chat_support/domain/models.py
"""
Domain entities for the chat support queue.

Agents and sessions are plain pydantic models. Stores hand out copies, so a
caller changes an entity by mutating its copy and passing it back to the
store's ``update``.
"""
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Seniority(str, Enum):
    """Agent seniority level."""

    JUNIOR = "junior"
    MID_LEVEL = "mid_level"
    SENIOR = "senior"
    TEAM_LEAD = "team_lead"


# Share of a full 10-chat load each level is trusted with.
CAPACITY_MULTIPLIERS: dict[Seniority, float] = {
    Seniority.JUNIOR: 0.4,
    Seniority.MID_LEVEL: 0.6,
    Seniority.SENIOR: 0.8,
    Seniority.TEAM_LEAD: 0.5,
}

BASE_CONCURRENCY = 10


class SessionStatus(str, Enum):
    """Chat session lifecycle status."""

    QUEUED = "queued"
    ACTIVE = "active"
    INACTIVE = "inactive"


class Agent(BaseModel):
    """A human support agent."""

    agent_id: str
    name: str
    seniority: Seniority
    on_shift: bool = False
    active_session_ids: set[str] = Field(default_factory=set)

    @property
    def max_capacity(self) -> int:
        return math.floor(BASE_CONCURRENCY * CAPACITY_MULTIPLIERS[self.seniority])

    @property
    def load(self) -> int:
        return len(self.active_session_ids)

    @property
    def is_available(self) -> bool:
        return self.on_shift and self.load < self.max_capacity


class ChatSession(BaseModel):
    """A user's request for a chat, from admission until it expires."""

    session_id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    created_at: datetime = Field(default_factory=utcnow)
    last_poll_time: datetime = Field(default_factory=utcnow)
    status: SessionStatus = SessionStatus.QUEUED
    # Position at admission time; not renumbered as the queue drains.
    queue_position: int = 0
    assigned_agent_id: Optional[str] = None

    @property
    def is_live(self) -> bool:
        return self.status != SessionStatus.INACTIVE
