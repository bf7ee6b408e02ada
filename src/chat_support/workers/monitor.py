"""
Chat monitoring loop.

One background task that, once per interval:
1. Applies the shift policy (base team and overflow on/off)
2. Removes sessions whose client stopped polling
3. Drains the queue into available agents, at most one new chat per agent

The loop keeps no state of its own beyond counters; everything goes through
the same store contracts the request handlers use. A failing cycle is
logged and the next one runs on schedule. Stopping (via stop() or task
cancellation) is a normal exit.
"""

import asyncio
import contextlib
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from chat_support.domain.models import ChatSession, SessionStatus
from chat_support.infrastructure.observability.context import log_context
from chat_support.infrastructure.observability.logging import get_logger
from chat_support.infrastructure.observability.metrics import (
    CHAT_QUEUE_SIZE,
    CHAT_SESSIONS_EXPIRED_TOTAL,
    MONITOR_CYCLE_DURATION_SECONDS,
    MONITOR_CYCLE_ERRORS_TOTAL,
)
from chat_support.interfaces.clock import IClock
from chat_support.interfaces.repository import ISessionStore
from chat_support.services.assignment import AssignmentService
from chat_support.services.shift_policy import ShiftDecision, ShiftPolicy

logger = get_logger(__name__)


@dataclass
class CycleReport:
    """What one monitoring cycle did."""

    cycle: int
    decision: ShiftDecision
    expired: List[str] = field(default_factory=list)
    assigned: List[Tuple[str, str]] = field(default_factory=list)  # (session_id, agent_id)


class MonitoringLoop:
    """Periodic shift/expiry/assignment driver."""

    def __init__(
        self,
        sessions: ISessionStore,
        policy: ShiftPolicy,
        assignment: AssignmentService,
        clock: IClock,
        *,
        interval: float = 1.0,
        liveness_window: float = 3.0,
        release_agent_on_expiry: bool = False,
    ):
        self._sessions = sessions
        self._policy = policy
        self._assignment = assignment
        self._clock = clock
        self.interval = interval
        self.liveness_window = timedelta(seconds=liveness_window)
        self.release_agent_on_expiry = release_agent_on_expiry

        self._cycles = 0
        self._last_cycle_at: Optional[datetime] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    # --- introspection ---

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def last_cycle_at(self) -> Optional[datetime]:
        return self._last_cycle_at

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # --- cycle steps ---

    def _is_stale(self, session: ChatSession, now: datetime) -> bool:
        return now - session.last_poll_time >= self.liveness_window

    def expire_stale_sessions(self) -> List[str]:
        """
        Remove every queued or active session that has not polled within the
        liveness window. Sessions are removed outright, not marked inactive.
        """
        now = self._clock.now()
        cutoff = now - self.liveness_window
        expired: List[str] = []

        for session in self._sessions.list_active():
            if not self._is_stale(session, now):
                continue
            # Rechecked under the store lock; a poll that landed since the listing wins.
            current = self._sessions.remove_if_stale(session.session_id, cutoff)
            if current is None:
                continue

            expired.append(current.session_id)
            CHAT_SESSIONS_EXPIRED_TOTAL.labels(status=current.status.value).inc()

            if current.status == SessionStatus.ACTIVE and current.assigned_agent_id:
                if self.release_agent_on_expiry:
                    self._assignment.release(current.session_id, current.assigned_agent_id)
                else:
                    logger.warning(
                        "Expired active session still bound to agent",
                        session_id=current.session_id,
                        agent_id=current.assigned_agent_id,
                    )
            logger.warning(
                "Removed abandoned session due to polling timeout",
                session_id=current.session_id,
                status=current.status.value,
            )

        if expired:
            logger.info("Expired inactive sessions", count=len(expired))
        return expired

    def drain_queue(self) -> List[Tuple[str, str]]:
        """
        Give each available agent, in priority order, the next queued session.

        Stops as soon as the queue is empty. An agent that turns out to be
        unavailable at bind time is skipped and the same session is offered
        to the next agent; if nobody takes it, it goes back to the head of
        the queue.
        """
        assigned: List[Tuple[str, str]] = []
        pending: Optional[ChatSession] = None

        for agent in self._assignment.rank_available_agents():
            session = pending or self._sessions.dequeue_next_queued()
            if session is None:
                break

            if not self._assignment.assign(session.session_id, agent.agent_id):
                pending = session
                continue
            pending = None

            # Writes only the binding, so a poll since the dequeue is kept.
            if not self._sessions.mark_active(session.session_id, agent.agent_id):
                # Removed between dequeue and bind.
                self._assignment.release(session.session_id, agent.agent_id)
                continue

            assigned.append((session.session_id, agent.agent_id))
            logger.info(
                "Assigned session to agent",
                session_id=session.session_id,
                agent_id=agent.agent_id,
                agent_name=agent.name,
            )

        if pending is not None:
            self._sessions.requeue_front(pending.session_id)

        return assigned

    def run_cycle(self) -> CycleReport:
        """Run one full cycle synchronously. Errors propagate to the caller."""
        self._cycles += 1
        started = time.perf_counter()

        with log_context(cycle=self._cycles):
            decision = self._policy.update_shifts()
            expired = self.expire_stale_sessions()
            assigned = self.drain_queue()

        self._last_cycle_at = self._clock.now()
        CHAT_QUEUE_SIZE.set(self._sessions.queue_count())
        MONITOR_CYCLE_DURATION_SECONDS.observe(time.perf_counter() - started)

        return CycleReport(
            cycle=self._cycles,
            decision=decision,
            expired=expired,
            assigned=assigned,
        )

    # --- background task ---

    async def run(self) -> None:
        """Run cycles until stop() is called or the task is cancelled."""
        if self._stop_event is None:
            self._stop_event = asyncio.Event()

        logger.info("Chat monitoring loop starting", interval=self.interval)
        try:
            while not self._stop_event.is_set():
                try:
                    await asyncio.to_thread(self.run_cycle)
                except Exception:
                    MONITOR_CYCLE_ERRORS_TOTAL.inc()
                    logger.exception("Unhandled error in chat monitoring cycle")

                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
        except asyncio.CancelledError:
            logger.info("Chat monitoring loop cancelled")
            raise
        finally:
            logger.info("Chat monitoring loop stopped", cycles=self._cycles)

    def start(self) -> asyncio.Task:
        """Schedule run() on the running event loop."""
        if self.is_running:
            return self._task
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run(), name="chat-monitoring-loop")
        return self._task

    async def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the loop to stop and wait for it. Cancels it after ``timeout``."""
        if self._task is None:
            return
        if self._stop_event is not None:
            self._stop_event.set()
        try:
            await asyncio.wait_for(asyncio.shield(self._task), timeout=timeout)
        except asyncio.TimeoutError:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        finally:
            self._task = None
