"""
Admission control for incoming chat requests.

Admission only decides and enqueues. Agents are assigned exclusively by the
monitoring loop, in FIFO order, so two concurrent admissions can never both
claim the same agent slot.

The queue count is read without holding anything across the decision, so
concurrent admissions may each see the same count and both be admitted.
Slight over-admission is accepted in exchange for not serializing every
request behind one lock.
"""
from chat_support.domain.models import ChatSession
from chat_support.domain.results import QUEUE_FULL_MESSAGE, StartChatResult
from chat_support.infrastructure.observability.logging import get_logger
from chat_support.infrastructure.observability.metrics import CHAT_ADMISSIONS_TOTAL, CHAT_QUEUE_SIZE
from chat_support.interfaces.clock import IClock
from chat_support.interfaces.repository import ISessionStore
from chat_support.services.shift_policy import ShiftPolicy

logger = get_logger(__name__)


class AdmissionController:
    """Decides whether a start-chat request fits in the queue."""

    def __init__(self, sessions: ISessionStore, policy: ShiftPolicy, clock: IClock):
        self._sessions = sessions
        self._policy = policy
        self._clock = clock

    def _admission_route(self, current_queue_size: int) -> str | None:
        """Which allowance admits the request: "main", "overflow_buffer", or None."""
        max_main_queue_size = self._policy.max_main_queue_size()
        if current_queue_size < max_main_queue_size:
            return "main"
        if self._policy.is_office_hours():
            total_allowed = max_main_queue_size + self._policy.overflow_queue_buffer
            if current_queue_size < total_allowed:
                return "overflow_buffer"
        return None

    def admit(self, user_id: str) -> StartChatResult:
        current_queue_size = self._sessions.queue_count()
        route = self._admission_route(current_queue_size)

        if route is None:
            CHAT_ADMISSIONS_TOTAL.labels(outcome="rejected").inc()
            logger.warning(
                "Chat request rejected, queue full",
                user_id=user_id,
                queue_size=current_queue_size,
            )
            return StartChatResult(success=False, error_message=QUEUE_FULL_MESSAGE)

        now = self._clock.now()
        session = ChatSession(
            user_id=user_id,
            created_at=now,
            last_poll_time=now,
            queue_position=current_queue_size + 1,
        )
        self._sessions.enqueue(session)

        CHAT_ADMISSIONS_TOTAL.labels(outcome=route).inc()
        CHAT_QUEUE_SIZE.set(current_queue_size + 1)
        logger.info(
            "Chat session queued",
            session_id=session.session_id,
            user_id=user_id,
            queue_position=session.queue_position,
            admitted_via=route,
        )
        return StartChatResult(
            success=True,
            session_id=session.session_id,
            queue_position=session.queue_position,
        )
