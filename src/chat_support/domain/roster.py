"""
Seed roster and team membership.

Teams are fixed lists of agent IDs. Which team is on shift at a given time
is decided by ShiftPolicy; this module only says who belongs to which team.
"""
from chat_support.domain.models import Agent, Seniority


TEAM_A: tuple[str, ...] = ("tl1", "m1", "m2", "j1")
TEAM_B: tuple[str, ...] = ("s1", "m3", "j2", "j3")
TEAM_C: tuple[str, ...] = ("m4", "m5")
OVERFLOW_TEAM: tuple[str, ...] = tuple(f"of{i}" for i in range(1, 7))

BASE_TEAMS: dict[str, tuple[str, ...]] = {
    "A": TEAM_A,
    "B": TEAM_B,
    "C": TEAM_C,
}


def seed_agents() -> list[Agent]:
    """Build the fixed roster every process starts with. All agents start off shift."""
    agents = [
        # Team A: 1 team lead, 2 mid-level, 1 junior
        Agent(agent_id="tl1", name="Team Lead 1", seniority=Seniority.TEAM_LEAD),
        Agent(agent_id="m1", name="Mid Level 1", seniority=Seniority.MID_LEVEL),
        Agent(agent_id="m2", name="Mid Level 2", seniority=Seniority.MID_LEVEL),
        Agent(agent_id="j1", name="Junior 1", seniority=Seniority.JUNIOR),
        # Team B: 1 senior, 1 mid-level, 2 juniors
        Agent(agent_id="s1", name="Senior 1", seniority=Seniority.SENIOR),
        Agent(agent_id="m3", name="Mid Level 3", seniority=Seniority.MID_LEVEL),
        Agent(agent_id="j2", name="Junior 2", seniority=Seniority.JUNIOR),
        Agent(agent_id="j3", name="Junior 3", seniority=Seniority.JUNIOR),
        # Team C: 2 mid-level
        Agent(agent_id="m4", name="Mid Level 4", seniority=Seniority.MID_LEVEL),
        Agent(agent_id="m5", name="Mid Level 5", seniority=Seniority.MID_LEVEL),
    ]
    agents.extend(
        Agent(agent_id=agent_id, name=f"Overflow Junior {i}", seniority=Seniority.JUNIOR)
        for i, agent_id in enumerate(OVERFLOW_TEAM, start=1)
    )
    return agents
