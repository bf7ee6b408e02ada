"""In-memory agent store."""
from threading import Lock
from typing import Dict, Iterable, List, Optional

from chat_support.domain.exceptions import AgentNotFound
from chat_support.domain.models import Agent
from chat_support.domain.roster import seed_agents
from chat_support.interfaces.repository import IAgentStore


class InMemoryAgentStore(IAgentStore):
    """
    Agent store backed by a dict keyed by agent ID.

    Starts from the seed roster unless an explicit list of agents is given.
    Agents are never added or removed after construction.
    """

    def __init__(self, agents: Optional[Iterable[Agent]] = None) -> None:
        self._lock = Lock()
        roster = seed_agents() if agents is None else agents
        self._agents: Dict[str, Agent] = {
            agent.agent_id: agent.model_copy(deep=True) for agent in roster
        }

    def list_all(self) -> List[Agent]:
        with self._lock:
            return [agent.model_copy(deep=True) for agent in self._agents.values()]

    def list_available(self) -> List[Agent]:
        with self._lock:
            return [
                agent.model_copy(deep=True)
                for agent in self._agents.values()
                if agent.is_available
            ]

    def get(self, agent_id: str) -> Optional[Agent]:
        with self._lock:
            agent = self._agents.get(agent_id)
            return agent.model_copy(deep=True) if agent else None

    def update(self, agent: Agent) -> None:
        with self._lock:
            if agent.agent_id not in self._agents:
                raise AgentNotFound(details={"agent_id": agent.agent_id})
            self._agents[agent.agent_id] = agent.model_copy(deep=True)
