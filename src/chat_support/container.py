"""
Component graph.

Builds every store, service and the monitoring loop from one Settings
object and passes store handles explicitly to each component. The API
keeps a single container on app.state.
"""
from dataclasses import dataclass
from typing import Optional

from chat_support.config.settings import Settings, get_settings
from chat_support.infrastructure.observability.logging import get_logger
from chat_support.infrastructure.stores import InMemoryAgentStore, InMemorySessionStore
from chat_support.interfaces import IAgentStore, IClock, ISessionStore, SystemClock
from chat_support.services import (
    AdmissionController,
    AssignmentService,
    ChatSupportService,
    ShiftPolicy,
)
from chat_support.workers.monitor import MonitoringLoop

logger = get_logger(__name__)


@dataclass
class ChatSupportContainer:
    settings: Settings
    clock: IClock
    sessions: ISessionStore
    agents: IAgentStore
    policy: ShiftPolicy
    assignment: AssignmentService
    admission: AdmissionController
    chat: ChatSupportService
    monitor: MonitoringLoop

    @classmethod
    def build(
        cls,
        settings: Optional[Settings] = None,
        *,
        clock: Optional[IClock] = None,
        sessions: Optional[ISessionStore] = None,
        agents: Optional[IAgentStore] = None,
    ) -> "ChatSupportContainer":
        settings = settings or get_settings()
        clock = clock or SystemClock()
        sessions = sessions or InMemorySessionStore()
        agents = agents or InMemoryAgentStore()

        policy = ShiftPolicy(
            agents,
            sessions,
            clock,
            queue_size_multiplier=settings.queue_size_multiplier,
            deactivation_ratio=settings.overflow_deactivation_ratio,
            overflow_queue_buffer=settings.overflow_queue_buffer,
        )
        assignment = AssignmentService(agents)
        admission = AdmissionController(sessions, policy, clock)
        chat = ChatSupportService(sessions, agents, policy, admission, clock)
        monitor = MonitoringLoop(
            sessions,
            policy,
            assignment,
            clock,
            interval=settings.monitor_interval_seconds,
            liveness_window=settings.session_liveness_seconds,
            release_agent_on_expiry=settings.release_agent_on_expiry,
        )
        return cls(
            settings=settings,
            clock=clock,
            sessions=sessions,
            agents=agents,
            policy=policy,
            assignment=assignment,
            admission=admission,
            chat=chat,
            monitor=monitor,
        )

    def check_overflow_buffer(self) -> bool:
        """
        Warn when the configured overflow buffer no longer matches 1.5x the
        overflow roster's capacity. Returns True when they match.
        """
        expected = self.policy.roster_overflow_buffer()
        configured = self.policy.overflow_queue_buffer
        if expected != configured:
            logger.warning(
                "Overflow queue buffer does not match overflow roster capacity",
                configured=configured,
                roster_derived=expected,
            )
            return False
        return True
