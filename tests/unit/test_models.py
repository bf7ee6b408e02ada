# tests/unit/test_models.py
"""Unit tests for agents, sessions and the seed roster."""

import pytest

from chat_support.domain.models import Agent, ChatSession, Seniority, SessionStatus
from chat_support.domain.roster import BASE_TEAMS, OVERFLOW_TEAM, seed_agents


@pytest.mark.unit
class TestAgentCapacity:
    """Capacity is floor(10 x seniority multiplier)."""

    @pytest.mark.parametrize(
        "seniority, expected",
        [
            (Seniority.JUNIOR, 4),
            (Seniority.MID_LEVEL, 6),
            (Seniority.SENIOR, 8),
            (Seniority.TEAM_LEAD, 5),
        ],
    )
    def test_max_capacity(self, seniority, expected):
        agent = Agent(agent_id="a", name="A", seniority=seniority)
        assert agent.max_capacity == expected

    def test_off_shift_agent_is_not_available(self):
        agent = Agent(agent_id="a", name="A", seniority=Seniority.SENIOR)
        assert agent.is_available is False

    def test_full_agent_is_not_available(self):
        agent = Agent(
            agent_id="a",
            name="A",
            seniority=Seniority.JUNIOR,
            on_shift=True,
            active_session_ids={"s1", "s2", "s3", "s4"},
        )
        assert agent.load == 4
        assert agent.is_available is False

    def test_on_shift_agent_with_room_is_available(self):
        agent = Agent(
            agent_id="a",
            name="A",
            seniority=Seniority.JUNIOR,
            on_shift=True,
            active_session_ids={"s1"},
        )
        assert agent.is_available is True


@pytest.mark.unit
class TestChatSession:
    def test_defaults(self):
        session = ChatSession(user_id="user-1")

        assert session.status == SessionStatus.QUEUED
        assert session.assigned_agent_id is None
        assert session.created_at.tzinfo is not None
        assert session.is_live is True

    def test_session_ids_are_unique(self):
        assert ChatSession(user_id="u").session_id != ChatSession(user_id="u").session_id

    def test_inactive_session_is_not_live(self):
        session = ChatSession(user_id="u", status=SessionStatus.INACTIVE)
        assert session.is_live is False


@pytest.mark.unit
class TestSeedRoster:
    def test_roster_size_and_everyone_starts_off_shift(self):
        agents = seed_agents()
        assert len(agents) == 16
        assert not any(a.on_shift for a in agents)

    def test_team_capacities(self):
        by_id = {a.agent_id: a for a in seed_agents()}

        def capacity(ids):
            return sum(by_id[i].max_capacity for i in ids)

        assert capacity(BASE_TEAMS["A"]) == 21
        assert capacity(BASE_TEAMS["B"]) == 22
        assert capacity(BASE_TEAMS["C"]) == 12
        assert capacity(OVERFLOW_TEAM) == 24

    def test_overflow_team_is_all_juniors(self):
        by_id = {a.agent_id: a for a in seed_agents()}
        assert {by_id[i].seniority for i in OVERFLOW_TEAM} == {Seniority.JUNIOR}
