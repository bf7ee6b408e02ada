"""Agent ranking and agent-to-session binding."""
from threading import RLock
from typing import List

from chat_support.domain.models import Agent, Seniority
from chat_support.infrastructure.observability.logging import get_logger
from chat_support.infrastructure.observability.metrics import CHAT_ASSIGNMENTS_TOTAL
from chat_support.interfaces.repository import IAgentStore

logger = get_logger(__name__)


# Juniors take new chats first and seniors last, keeping senior staff free
# for escalations. Team leads sit between juniors and mid-level agents.
SENIORITY_PRIORITY: dict[Seniority, int] = {
    Seniority.JUNIOR: 1,
    Seniority.TEAM_LEAD: 2,
    Seniority.MID_LEVEL: 3,
    Seniority.SENIOR: 4,
}


def assignment_order(agent: Agent) -> tuple[int, int]:
    return SENIORITY_PRIORITY.get(agent.seniority, 99), agent.load


class AssignmentService:
    """
    Ranks available agents and binds sessions to them.

    assign() and release() are serialized by a lock so the availability
    re-check and the write happen as one step.
    """

    def __init__(self, agents: IAgentStore):
        self._agents = agents
        self._lock = RLock()

    def rank_available_agents(self) -> List[Agent]:
        """On-shift agents with spare capacity, in assignment priority order."""
        on_shift = [a for a in self._agents.list_all() if a.on_shift]
        return sorted((a for a in on_shift if a.is_available), key=assignment_order)

    def assign(self, session_id: str, agent_id: str) -> bool:
        """
        Bind a session to an agent.

        Returns False without writing anything if the agent is unknown or is
        no longer available; the caller should treat that agent as exhausted
        for the current cycle.
        """
        with self._lock:
            agent = self._agents.get(agent_id)
            if agent is None or not agent.is_available:
                logger.debug(
                    "Assignment skipped, agent unavailable",
                    session_id=session_id,
                    agent_id=agent_id,
                )
                return False
            agent.active_session_ids.add(session_id)
            self._agents.update(agent)

        CHAT_ASSIGNMENTS_TOTAL.labels(seniority=agent.seniority.value).inc()
        return True

    def release(self, session_id: str, agent_id: str) -> None:
        """Unbind a session from an agent. Safe to call more than once."""
        with self._lock:
            agent = self._agents.get(agent_id)
            if agent is None or session_id not in agent.active_session_ids:
                return
            agent.active_session_ids.discard(session_id)
            self._agents.update(agent)
