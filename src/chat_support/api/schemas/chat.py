"""Request and response models for the chat routes."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from chat_support.domain.models import Agent, ChatSession, Seniority, SessionStatus


class StartChatRequest(BaseModel):
    """Request model for starting a chat."""

    user_id: str = Field(
        ...,
        description="ID of the user asking for support",
        min_length=1,
        max_length=200,
        examples=["user-001"],
    )


class StartChatResponse(BaseModel):
    """Result of a start-chat request. Returned with 400 when the queue is full."""

    success: bool = Field(..., description="Whether the session was queued")
    session_id: Optional[str] = Field(None, description="New session ID on success")
    error_message: Optional[str] = Field(
        None,
        description="Why the request was rejected",
        examples=["Chat queue is full. Please try again later."],
    )
    queue_position: int = Field(
        0,
        description="Position in the queue at admission time; not updated afterwards",
        ge=0,
    )


class PollResponse(BaseModel):
    success: bool = True


class QueueStatusResponse(BaseModel):
    """Snapshot of queue load and capacity."""

    current_queue_size: int = Field(..., description="Queued plus active sessions")
    max_queue_size: int = Field(
        ..., description="Queue ceiling, including the overflow buffer while overflow is active"
    )
    total_capacity: int = Field(..., description="Concurrent chats the on-shift agents can hold")
    is_office_hours: bool
    overflow_active: bool


class ChatSessionResponse(BaseModel):
    session_id: str
    user_id: str
    created_at: datetime
    last_poll_time: datetime
    status: SessionStatus
    queue_position: int
    assigned_agent_id: Optional[str] = None

    @classmethod
    def from_session(cls, session: ChatSession) -> "ChatSessionResponse":
        return cls(**session.model_dump())


class SessionLookupResponse(BaseModel):
    found: bool
    session: Optional[ChatSessionResponse] = None


class AgentResponse(BaseModel):
    """Operator view of one agent."""

    agent_id: str
    name: str
    seniority: Seniority
    on_shift: bool
    load: int = Field(..., description="Sessions currently bound to the agent")
    max_capacity: int
    available: bool

    @classmethod
    def from_agent(cls, agent: Agent) -> "AgentResponse":
        return cls(
            agent_id=agent.agent_id,
            name=agent.name,
            seniority=agent.seniority,
            on_shift=agent.on_shift,
            load=agent.load,
            max_capacity=agent.max_capacity,
            available=agent.is_available,
        )
