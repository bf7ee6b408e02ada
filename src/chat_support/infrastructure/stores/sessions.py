"""
In-memory chat session store.

One lock guards both the session map and the admission order, so every
method is atomic with respect to every other one, and dequeue_next_queued
can never hand the same session to two callers.
"""
from collections import deque
from datetime import datetime
from threading import Lock
from typing import Deque, Dict, List, Optional

from chat_support.domain.exceptions import DuplicateSession, SessionNotFound
from chat_support.domain.models import ChatSession, SessionStatus
from chat_support.interfaces.repository import ISessionStore


class InMemorySessionStore(ISessionStore):
    """Session store backed by a dict plus a FIFO deque of session IDs."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: Dict[str, ChatSession] = {}
        self._queue_order: Deque[str] = deque()

    def enqueue(self, session: ChatSession) -> None:
        with self._lock:
            if session.session_id in self._sessions:
                raise DuplicateSession(details={"session_id": session.session_id})
            self._sessions[session.session_id] = session.model_copy(deep=True)
            if session.status == SessionStatus.QUEUED:
                self._queue_order.append(session.session_id)

    def get(self, session_id: str) -> Optional[ChatSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session else None

    def update(self, session: ChatSession) -> None:
        with self._lock:
            if session.session_id not in self._sessions:
                raise SessionNotFound(details={"session_id": session.session_id})
            self._sessions[session.session_id] = session.model_copy(deep=True)

    def touch(self, session_id: str, polled_at: datetime) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or not session.is_live:
                return False
            session.last_poll_time = polled_at
            return True

    def mark_active(self, session_id: str, agent_id: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.status != SessionStatus.QUEUED:
                return False
            session.status = SessionStatus.ACTIVE
            session.assigned_agent_id = agent_id
            return True

    def remove(self, session_id: str) -> None:
        with self._lock:
            # The ID may still sit in _queue_order; dequeue skips it.
            self._sessions.pop(session_id, None)

    def remove_if_stale(self, session_id: str, cutoff: datetime) -> Optional[ChatSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or not session.is_live or session.last_poll_time > cutoff:
                return None
            del self._sessions[session_id]
            return session

    def queue_count(self) -> int:
        with self._lock:
            return sum(1 for s in self._sessions.values() if s.is_live)

    def dequeue_next_queued(self) -> Optional[ChatSession]:
        with self._lock:
            while self._queue_order:
                session_id = self._queue_order.popleft()
                session = self._sessions.get(session_id)
                if session is not None and session.status == SessionStatus.QUEUED:
                    return session.model_copy(deep=True)
            return None

    def requeue_front(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.status != SessionStatus.QUEUED:
                return
            if session_id not in self._queue_order:
                self._queue_order.appendleft(session_id)

    def list_active(self) -> List[ChatSession]:
        with self._lock:
            live = [s.model_copy(deep=True) for s in self._sessions.values() if s.is_live]
        return sorted(live, key=lambda s: s.created_at)

    def pending_order_length(self) -> int:
        """Entries left in the admission order, stale ones included."""
        with self._lock:
            return len(self._queue_order)
