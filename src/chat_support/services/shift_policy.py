"""
Shift and overflow policy.

This is the only place that knows the base-team hour windows and the
office-hours window. The two are separate on purpose: base teams cover the
whole day in three fixed blocks, while office hours (Mon-Fri 09:00-18:00
UTC) only bound when the overflow team may be brought in.

Overflow uses hysteresis. It switches on when the queue reaches the main
queue ceiling during office hours, and only switches off once the queue
drops below a lower deactivation threshold or office hours end. Between
the two thresholds the current state is held.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence

from chat_support.domain.models import Agent
from chat_support.domain.roster import BASE_TEAMS, OVERFLOW_TEAM
from chat_support.infrastructure.observability.logging import get_logger
from chat_support.infrastructure.observability.metrics import AGENTS_ON_SHIFT, OVERFLOW_ACTIVE
from chat_support.interfaces.clock import IClock
from chat_support.interfaces.repository import IAgentStore, ISessionStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class ShiftWindow:
    """Half-open UTC hour range [start_hour, end_hour) covered by one base team."""

    start_hour: int
    end_hour: int
    team: str

    def covers(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


BASE_TEAM_WINDOWS: tuple[ShiftWindow, ...] = (
    ShiftWindow(start_hour=8, end_hour=16, team="A"),
    ShiftWindow(start_hour=16, end_hour=24, team="B"),
    ShiftWindow(start_hour=0, end_hour=8, team="C"),
)

OFFICE_START_HOUR = 9
OFFICE_END_HOUR = 18
# datetime.weekday(): Monday == 0 ... Friday == 4
OFFICE_WEEKDAYS = frozenset(range(0, 5))

DEFAULT_QUEUE_SIZE_MULTIPLIER = 1.5
DEFAULT_DEACTIVATION_RATIO = 0.75
DEFAULT_OVERFLOW_QUEUE_BUFFER = 36


def base_team_for(moment: datetime) -> str:
    """Name of the base team on shift at ``moment`` (UTC)."""
    for window in BASE_TEAM_WINDOWS:
        if window.covers(moment.hour):
            return window.team
    raise ValueError(f"No base team covers hour {moment.hour}")


def is_office_hours_at(moment: datetime) -> bool:
    return (
        moment.weekday() in OFFICE_WEEKDAYS
        and OFFICE_START_HOUR <= moment.hour < OFFICE_END_HOUR
    )


def max_queue_size_for(base_capacity: int, multiplier: float = DEFAULT_QUEUE_SIZE_MULTIPLIER) -> int:
    return math.floor(base_capacity * multiplier)


def deactivation_threshold_for(max_queue_size: int, ratio: float = DEFAULT_DEACTIVATION_RATIO) -> int:
    return math.floor(max_queue_size * ratio)


def decide_overflow(
    currently_active: bool,
    office_hours: bool,
    queue_count: int,
    max_queue_size: int,
    deactivation_threshold: int,
) -> bool:
    """
    Next overflow state given the current one.

    OFF -> ON:  office hours and queue_count >= max_queue_size
    ON  -> OFF: queue_count < deactivation_threshold or outside office hours
    Anything else keeps the current state.
    """
    if currently_active:
        return office_hours and queue_count >= deactivation_threshold
    return office_hours and queue_count >= max_queue_size


@dataclass(frozen=True)
class ShiftDecision:
    """Outcome of one policy evaluation."""

    team: str
    office_hours: bool
    base_capacity: int
    max_queue_size: int
    deactivation_threshold: int
    queue_count: int
    overflow_was_active: bool
    overflow_active: bool
    on_shift_ids: frozenset[str]

    @property
    def overflow_changed(self) -> bool:
        return self.overflow_was_active != self.overflow_active


class ShiftPolicy:
    """
    Decides who is on shift and how large the queue may grow.

    Reads both stores through their contracts; writes only the agents'
    on_shift flag, and only from update_shifts().
    """

    def __init__(
        self,
        agents: IAgentStore,
        sessions: ISessionStore,
        clock: IClock,
        *,
        queue_size_multiplier: float = DEFAULT_QUEUE_SIZE_MULTIPLIER,
        deactivation_ratio: float = DEFAULT_DEACTIVATION_RATIO,
        overflow_queue_buffer: int = DEFAULT_OVERFLOW_QUEUE_BUFFER,
        base_teams: dict[str, Sequence[str]] = BASE_TEAMS,
        overflow_team: Sequence[str] = OVERFLOW_TEAM,
    ):
        self._agents = agents
        self._sessions = sessions
        self._clock = clock
        self.queue_size_multiplier = queue_size_multiplier
        self.deactivation_ratio = deactivation_ratio
        self.overflow_queue_buffer = overflow_queue_buffer
        self._base_teams = {name: frozenset(ids) for name, ids in base_teams.items()}
        self._overflow_team = frozenset(overflow_team)

    # --- time windows ---

    def is_office_hours(self) -> bool:
        return is_office_hours_at(self._clock.now())

    def current_base_team(self) -> str:
        return base_team_for(self._clock.now())

    def base_team_ids(self) -> frozenset[str]:
        return self._base_teams.get(self.current_base_team(), frozenset())

    @property
    def overflow_team_ids(self) -> frozenset[str]:
        return self._overflow_team

    # --- capacity ---

    def _base_capacity(self, all_agents: Sequence[Agent], team_ids: frozenset[str]) -> int:
        return sum(a.max_capacity for a in all_agents if a.agent_id in team_ids)

    def max_main_queue_size(self) -> int:
        """Queue ceiling from the current base team alone. Overflow never adds to it."""
        capacity = self._base_capacity(self._agents.list_all(), self.base_team_ids())
        return max_queue_size_for(capacity, self.queue_size_multiplier)

    def is_overflow_active(self) -> bool:
        return any(
            a.on_shift for a in self._agents.list_all() if a.agent_id in self._overflow_team
        )

    def effective_queue_capacity(self) -> int:
        """Main ceiling plus the overflow buffer while overflow is on shift."""
        ceiling = self.max_main_queue_size()
        if self.is_overflow_active():
            ceiling += self.overflow_queue_buffer
        return ceiling

    def on_shift_agents(self) -> List[Agent]:
        return [a for a in self._agents.list_all() if a.on_shift]

    def total_capacity(self) -> int:
        return sum(a.max_capacity for a in self.on_shift_agents())

    def roster_overflow_buffer(self) -> int:
        """Buffer implied by the overflow roster as it stands (1.5x its capacity)."""
        capacity = self._base_capacity(self._agents.list_all(), self._overflow_team)
        return max_queue_size_for(capacity, self.queue_size_multiplier)

    # --- evaluation ---

    def evaluate(self) -> ShiftDecision:
        """Compute the next shift state without writing anything."""
        now = self._clock.now()
        all_agents = self._agents.list_all()
        team = base_team_for(now)
        team_ids = self._base_teams.get(team, frozenset())
        office_hours = is_office_hours_at(now)

        base_capacity = self._base_capacity(all_agents, team_ids)
        max_queue_size = max_queue_size_for(base_capacity, self.queue_size_multiplier)
        threshold = deactivation_threshold_for(max_queue_size, self.deactivation_ratio)
        queue_count = self._sessions.queue_count()

        was_active = any(a.on_shift for a in all_agents if a.agent_id in self._overflow_team)
        overflow_active = decide_overflow(
            currently_active=was_active,
            office_hours=office_hours,
            queue_count=queue_count,
            max_queue_size=max_queue_size,
            deactivation_threshold=threshold,
        )

        on_shift_ids = team_ids | self._overflow_team if overflow_active else team_ids

        return ShiftDecision(
            team=team,
            office_hours=office_hours,
            base_capacity=base_capacity,
            max_queue_size=max_queue_size,
            deactivation_threshold=threshold,
            queue_count=queue_count,
            overflow_was_active=was_active,
            overflow_active=overflow_active,
            on_shift_ids=frozenset(on_shift_ids),
        )

    def update_shifts(self) -> ShiftDecision:
        """
        Apply the policy: on_shift is True for exactly the base team plus the
        overflow roster when active, False for everyone else. Only agents whose
        flag changes are written back.
        """
        decision = self.evaluate()

        changed = 0
        for agent in self._agents.list_all():
            should_be_on_shift = agent.agent_id in decision.on_shift_ids
            if agent.on_shift != should_be_on_shift:
                agent.on_shift = should_be_on_shift
                self._agents.update(agent)
                changed += 1

        if decision.overflow_changed:
            logger.info(
                "Overflow team activated" if decision.overflow_active else "Overflow team deactivated",
                queue_count=decision.queue_count,
                max_queue_size=decision.max_queue_size,
                deactivation_threshold=decision.deactivation_threshold,
                office_hours=decision.office_hours,
            )
        if changed:
            logger.info("Agent shifts updated", team=decision.team, agents_changed=changed)

        OVERFLOW_ACTIVE.set(1 if decision.overflow_active else 0)
        AGENTS_ON_SHIFT.set(len(decision.on_shift_ids))

        return decision
