# src/chat_support/interfaces/repository.py
from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from chat_support.domain.models import Agent, ChatSession


class ISessionStore(ABC):
    """
    Storage for chat sessions and their FIFO admission order.

    Every method must be atomic with respect to every other method.
    Callers receive copies; to change a session, mutate the copy and pass it
    to update().
    """

    @abstractmethod
    def enqueue(self, session: ChatSession) -> None:
        """Store a new queued session and append it to the admission order."""
        pass

    @abstractmethod
    def get(self, session_id: str) -> ChatSession | None:
        """Get session by ID."""
        pass

    @abstractmethod
    def update(self, session: ChatSession) -> None:
        """Replace the stored session with the same ID. Raises SessionNotFound."""
        pass

    @abstractmethod
    def touch(self, session_id: str, polled_at: datetime) -> bool:
        """
        Set last_poll_time and nothing else, in one step.

        Returns False if the session is missing or inactive.
        """
        pass

    @abstractmethod
    def mark_active(self, session_id: str, agent_id: str) -> bool:
        """
        Move a queued session to active and bind it to ``agent_id``, leaving
        every other field as stored. Returns False if the session is missing
        or no longer queued.
        """
        pass

    @abstractmethod
    def remove(self, session_id: str) -> None:
        """Delete a session. Unknown IDs are ignored."""
        pass

    @abstractmethod
    def remove_if_stale(self, session_id: str, cutoff: datetime) -> ChatSession | None:
        """
        Delete a live session whose last poll is at or before ``cutoff``.

        The staleness check and the delete happen in one step, so a poll
        that lands first keeps the session. Returns the removed session, or
        None if nothing was removed.
        """
        pass

    @abstractmethod
    def queue_count(self) -> int:
        """Number of sessions that are queued or active."""
        pass

    @abstractmethod
    def dequeue_next_queued(self) -> ChatSession | None:
        """
        Pop the oldest session that is still queued.

        Stale entries (removed or no longer queued) are discarded on the
        way. A given session is returned to at most one caller.
        """
        pass

    @abstractmethod
    def requeue_front(self, session_id: str) -> None:
        """
        Put a session handed out by dequeue_next_queued back at the head of
        the admission order, for when no agent could take it.
        """
        pass

    @abstractmethod
    def list_active(self) -> Sequence[ChatSession]:
        """Queued and active sessions, oldest first."""
        pass

    @abstractmethod
    def pending_order_length(self) -> int:
        """Entries left in the admission order, including ones dequeue will skip."""
        pass


class IAgentStore(ABC):
    """Storage for the agent roster. Whole-record replace only."""

    @abstractmethod
    def list_all(self) -> Sequence[Agent]:
        """All agents."""
        pass

    @abstractmethod
    def list_available(self) -> Sequence[Agent]:
        """Agents on shift with spare capacity."""
        pass

    @abstractmethod
    def get(self, agent_id: str) -> Agent | None:
        """Get agent by ID."""
        pass

    @abstractmethod
    def update(self, agent: Agent) -> None:
        """Replace the stored agent with the same ID. Raises AgentNotFound."""
        pass
