"""
Chat support operations exposed to the transport layer.

Queue-full and not-found are ordinary outcomes here and come back as
negative results; the HTTP layer decides which status code they map to.
"""
from typing import List

from chat_support.domain.models import Agent
from chat_support.domain.results import QueueStatus, SessionLookup, StartChatResult
from chat_support.interfaces.clock import IClock
from chat_support.interfaces.repository import IAgentStore, ISessionStore
from chat_support.services.admission import AdmissionController
from chat_support.services.shift_policy import ShiftPolicy


class ChatSupportService:
    """Start, poll and inspect chat sessions; report queue status."""

    def __init__(
        self,
        sessions: ISessionStore,
        agents: IAgentStore,
        policy: ShiftPolicy,
        admission: AdmissionController,
        clock: IClock,
    ):
        self._sessions = sessions
        self._agents = agents
        self._policy = policy
        self._admission = admission
        self._clock = clock

    def start_chat(self, user_id: str) -> StartChatResult:
        return self._admission.admit(user_id)

    def poll(self, session_id: str) -> bool:
        """Refresh the session's liveness. False if it is gone or inactive."""
        # Only last_poll_time is written, so a concurrent assignment is kept.
        return self._sessions.touch(session_id, self._clock.now())

    def get_queue_status(self) -> QueueStatus:
        on_shift = self._policy.on_shift_agents()
        overflow_active = any(a.agent_id in self._policy.overflow_team_ids for a in on_shift)

        max_queue_size = self._policy.max_main_queue_size()
        if overflow_active:
            max_queue_size += self._policy.overflow_queue_buffer

        return QueueStatus(
            current_queue_size=self._sessions.queue_count(),
            max_queue_size=max_queue_size,
            total_capacity=sum(a.max_capacity for a in on_shift),
            is_office_hours=self._policy.is_office_hours(),
            overflow_active=overflow_active,
        )

    def get_session(self, session_id: str) -> SessionLookup:
        session = self._sessions.get(session_id)
        return SessionLookup(found=session is not None, session=session)

    def list_agents(self) -> List[Agent]:
        return sorted(self._agents.list_all(), key=lambda a: a.agent_id)
