# tests/unit/test_monitor.py
"""Unit tests for the monitoring loop: expiry, queue draining and the background task."""

import asyncio

import pytest

from chat_support.container import ChatSupportContainer
from chat_support.domain.models import SessionStatus
from chat_support.infrastructure.stores import InMemorySessionStore
from chat_support.services.assignment import AssignmentService
from chat_support.workers.monitor import MonitoringLoop
from tests.conftest import FakeClock


class RefusingAssignment(AssignmentService):
    """Refuses to bind to the given agents, as if they filled up concurrently."""

    def __init__(self, agents, refuse):
        super().__init__(agents)
        self.refuse = set(refuse)

    def assign(self, session_id, agent_id):
        if agent_id in self.refuse:
            return False
        return super().assign(session_id, agent_id)


class VanishingAssignment(AssignmentService):
    """Removes the session right before binding, as if it expired mid-cycle."""

    def __init__(self, agents, sessions):
        super().__init__(agents)
        self.sessions = sessions

    def assign(self, session_id, agent_id):
        self.sessions.remove(session_id)
        return super().assign(session_id, agent_id)


def loop_with(container: ChatSupportContainer, assignment=None, **kwargs) -> MonitoringLoop:
    return MonitoringLoop(
        container.sessions,
        container.policy,
        assignment or container.assignment,
        container.clock,
        **kwargs,
    )


def start_chats(container: ChatSupportContainer, count: int) -> list[str]:
    return [container.chat.start_chat(f"user-{i}").session_id for i in range(count)]


@pytest.mark.unit
class TestRunCycle:
    def test_assigns_in_fifo_order_to_ranked_agents(self, container: ChatSupportContainer):
        ids = start_chats(container, 3)

        report = container.monitor.run_cycle()

        assert report.cycle == 1
        assert report.decision.team == "A"
        assert report.assigned == [(ids[0], "j1"), (ids[1], "tl1"), (ids[2], "m1")]

        session = container.sessions.get(ids[0])
        assert session.status == SessionStatus.ACTIVE
        assert session.assigned_agent_id == "j1"
        assert ids[0] in container.agents.get("j1").active_session_ids

    def test_each_agent_takes_at_most_one_new_chat_per_cycle(self, container: ChatSupportContainer):
        ids = start_chats(container, 5)

        first = container.monitor.run_cycle()
        assert len(first.assigned) == 4
        assert container.sessions.get(ids[4]).status == SessionStatus.QUEUED

        second = container.monitor.run_cycle()
        assert second.assigned == [(ids[4], "j1")]

    def test_empty_queue_assigns_nothing(self, container: ChatSupportContainer):
        report = container.monitor.run_cycle()

        assert report.assigned == []
        assert container.monitor.cycles == 1
        assert container.monitor.last_cycle_at == container.clock.now()

    def test_no_agents_on_shift_leaves_queue_untouched(self, container: ChatSupportContainer):
        ids = start_chats(container, 2)
        container.policy.update_shifts()
        for agent in container.agents.list_all():
            agent.on_shift = False
            container.agents.update(agent)

        assert container.monitor.drain_queue() == []
        assert container.sessions.dequeue_next_queued().session_id == ids[0]

    def test_errors_propagate_from_a_single_cycle(self, container: ChatSupportContainer, monkeypatch):
        def boom():
            raise RuntimeError("policy failure")

        monkeypatch.setattr(container.policy, "update_shifts", boom)

        with pytest.raises(RuntimeError):
            container.monitor.run_cycle()


@pytest.mark.unit
class TestDrainQueue:
    def test_refused_session_goes_to_the_next_agent(self, container: ChatSupportContainer):
        monitor = loop_with(container, RefusingAssignment(container.agents, {"j1"}))
        container.policy.update_shifts()
        [session_id] = start_chats(container, 1)

        assert monitor.drain_queue() == [(session_id, "tl1")]

    def test_session_refused_by_everyone_keeps_its_place(self, container: ChatSupportContainer):
        monitor = loop_with(container, RefusingAssignment(container.agents, {"j1", "tl1", "m1", "m2"}))
        container.policy.update_shifts()
        first, second = start_chats(container, 2)

        assert monitor.drain_queue() == []
        assert container.sessions.get(first).status == SessionStatus.QUEUED
        assert container.sessions.dequeue_next_queued().session_id == first
        assert container.sessions.dequeue_next_queued().session_id == second

    def test_session_removed_before_binding_releases_the_agent(self, container: ChatSupportContainer):
        monitor = loop_with(container, VanishingAssignment(container.agents, container.sessions))
        container.policy.update_shifts()
        start_chats(container, 1)

        assert monitor.drain_queue() == []
        assert all(a.load == 0 for a in container.agents.list_all())


@pytest.mark.unit
class TestExpiry:
    def test_session_expires_after_three_seconds_without_poll(self, container: ChatSupportContainer, clock: FakeClock):
        [session_id] = start_chats(container, 1)

        clock.advance(2.9)
        assert container.monitor.expire_stale_sessions() == []

        clock.advance(0.1)
        assert container.monitor.expire_stale_sessions() == [session_id]
        assert container.sessions.get(session_id) is None
        assert container.sessions.queue_count() == 0

    def test_polling_keeps_session_alive(self, container: ChatSupportContainer, clock: FakeClock):
        [session_id] = start_chats(container, 1)

        for _ in range(5):
            clock.advance(2)
            assert container.chat.poll(session_id) is True
            assert container.monitor.expire_stale_sessions() == []

    def test_expired_active_session_keeps_agent_slot_by_default(self, container: ChatSupportContainer, clock: FakeClock):
        [session_id] = start_chats(container, 1)
        container.monitor.run_cycle()

        clock.advance(3)
        container.monitor.expire_stale_sessions()

        assert container.sessions.get(session_id) is None
        assert session_id in container.agents.get("j1").active_session_ids

    def test_expired_active_session_releases_agent_when_enabled(self, container: ChatSupportContainer, clock: FakeClock):
        monitor = loop_with(container, release_agent_on_expiry=True)
        [session_id] = start_chats(container, 1)
        monitor.run_cycle()
        assert container.agents.get("j1").load == 1

        clock.advance(3)
        assert monitor.expire_stale_sessions() == [session_id]
        assert container.agents.get("j1").load == 0

    def test_expired_session_is_skipped_by_dequeue(self, container: ChatSupportContainer, clock: FakeClock):
        first, second = start_chats(container, 2)
        clock.advance(2)
        container.chat.poll(second)
        clock.advance(1)

        container.monitor.expire_stale_sessions()

        assert container.sessions.dequeue_next_queued().session_id == second


@pytest.mark.unit
class TestBackgroundTask:
    async def test_start_and_stop(self, container: ChatSupportContainer):
        monitor = loop_with(container, interval=0.01)

        monitor.start()
        assert monitor.is_running is True

        for _ in range(200):
            if monitor.cycles >= 2:
                break
            await asyncio.sleep(0.01)

        await monitor.stop(timeout=1.0)

        assert monitor.cycles >= 2
        assert monitor.is_running is False

    async def test_start_twice_returns_the_same_task(self, container: ChatSupportContainer):
        monitor = loop_with(container, interval=0.01)

        task = monitor.start()
        assert monitor.start() is task

        await monitor.stop(timeout=1.0)

    async def test_stop_without_start_is_a_no_op(self, container: ChatSupportContainer):
        await container.monitor.stop()
        assert container.monitor.is_running is False

    async def test_failing_cycle_does_not_stop_the_loop(self, container: ChatSupportContainer):
        class FlakyLoop(MonitoringLoop):
            calls = 0

            def run_cycle(self):
                self.calls += 1
                if self.calls == 1:
                    raise RuntimeError("transient failure")
                return super().run_cycle()

        monitor = FlakyLoop(
            container.sessions,
            container.policy,
            container.assignment,
            container.clock,
            interval=0.01,
        )
        monitor.start()

        for _ in range(200):
            if monitor.cycles >= 1:
                break
            await asyncio.sleep(0.01)

        await monitor.stop(timeout=1.0)

        assert monitor.calls >= 2
        assert monitor.cycles >= 1

    async def test_cancellation_stops_the_loop(self, container: ChatSupportContainer):
        monitor = loop_with(container, interval=10.0)
        task = monitor.start()
        await asyncio.sleep(0.05)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert monitor.is_running is False


class PollingAssignment(AssignmentService):
    """Lets the client poll after the session is dequeued but before it is bound."""

    def __init__(self, agents, chat):
        super().__init__(agents)
        self.chat = chat
        self.poll_results = []

    def assign(self, session_id, agent_id):
        self.poll_results.append(self.chat.poll(session_id))
        return super().assign(session_id, agent_id)


class HookedSessionStore(InMemorySessionStore):
    """Runs a callback inside touch() or right after list_active() reads."""

    before_touch = None
    after_list = None

    def touch(self, session_id, polled_at):
        if self.before_touch is not None:
            self.before_touch()
        return super().touch(session_id, polled_at)

    def list_active(self):
        sessions = super().list_active()
        if self.after_list is not None:
            self.after_list()
        return sessions


@pytest.mark.unit
class TestForegroundDuringCycle:
    """Polls interleaved with a monitoring cycle."""

    def test_poll_between_dequeue_and_bind_keeps_both_writes(self, container: ChatSupportContainer, clock: FakeClock):
        assignment = PollingAssignment(container.agents, container.chat)
        monitor = loop_with(container, assignment)
        [session_id] = start_chats(container, 1)
        clock.advance(1)

        assert monitor.run_cycle().assigned == [(session_id, "j1")]

        session = container.sessions.get(session_id)
        assert assignment.poll_results == [True]
        assert session.status == SessionStatus.ACTIVE
        assert session.assigned_agent_id == "j1"
        assert session.last_poll_time == clock.now()

    def test_cycle_during_poll_leaves_session_bound(self, test_settings, clock: FakeClock):
        sessions = HookedSessionStore()
        container = ChatSupportContainer.build(test_settings, clock=clock, sessions=sessions)
        session_id = container.chat.start_chat("user-1").session_id
        sessions.before_touch = container.monitor.run_cycle

        assert container.chat.poll(session_id) is True
        sessions.before_touch = None

        for _ in range(3):
            container.monitor.run_cycle()

        session = container.sessions.get(session_id)
        assert session.status == SessionStatus.ACTIVE
        assert session.assigned_agent_id == "j1"
        assert container.agents.get("j1").active_session_ids == {session_id}

    def test_poll_after_expiry_scan_keeps_session(self, test_settings, clock: FakeClock):
        sessions = HookedSessionStore()
        container = ChatSupportContainer.build(test_settings, clock=clock, sessions=sessions)
        session_id = container.chat.start_chat("user-1").session_id
        clock.advance(3)

        polls = []
        sessions.after_list = lambda: polls.append(container.chat.poll(session_id))

        assert container.monitor.expire_stale_sessions() == []

        assert polls == [True]
        assert container.sessions.get(session_id) is not None
        sessions.after_list = None
        assert container.chat.poll(session_id) is True
