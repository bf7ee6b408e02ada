"""Results returned by the chat support operations."""
from typing import Optional

from pydantic import BaseModel

from chat_support.domain.models import ChatSession


QUEUE_FULL_MESSAGE = "Chat queue is full. Please try again later."


class StartChatResult(BaseModel):
    success: bool
    session_id: Optional[str] = None
    error_message: Optional[str] = None
    queue_position: int = 0


class QueueStatus(BaseModel):
    current_queue_size: int
    # Includes the overflow buffer while overflow is active.
    max_queue_size: int
    # Summed capacity of every agent on shift, overflow included.
    total_capacity: int
    is_office_hours: bool
    overflow_active: bool


class SessionLookup(BaseModel):
    found: bool
    session: Optional[ChatSession] = None
