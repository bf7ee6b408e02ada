# tests/conftest.py
"""
Main pytest configuration and shared fixtures for all tests.

This module provides:
- Async test support (pytest-asyncio auto mode, set in pyproject.toml)
- A controllable clock so shift windows and polling timeouts are deterministic
- Fresh in-memory stores and a fully wired container per test
- FastAPI application and async HTTP client
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from chat_support.api.app import create_app
from chat_support.config.settings import Settings
from chat_support.container import ChatSupportContainer
from chat_support.infrastructure.observability.logging import configure_logging
from chat_support.infrastructure.stores import InMemoryAgentStore, InMemorySessionStore
from chat_support.interfaces.clock import IClock


# Monday 2024-01-15, inside office hours and Team A's window.
MONDAY_10AM = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
# Monday 20:00, Team B's window, after office hours.
MONDAY_8PM = datetime(2024, 1, 15, 20, 0, tzinfo=timezone.utc)
# Monday 03:00, Team C's window.
MONDAY_3AM = datetime(2024, 1, 15, 3, 0, tzinfo=timezone.utc)
# Saturday 2024-01-13 at 10:00, Team A's window but not office hours.
SATURDAY_10AM = datetime(2024, 1, 13, 10, 0, tzinfo=timezone.utc)


class FakeClock(IClock):
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime = MONDAY_10AM):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment

    def advance(self, seconds: float = 0.0, **kwargs) -> None:
        self._now += timedelta(seconds=seconds, **kwargs)


# ============================================================================
# Settings and Configuration
# ============================================================================

@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings: quiet logs, console output, fast monitoring interval."""
    return Settings(
        app_name="Chat Support Test",
        app_version="0.1.0-test",
        environment="local",
        debug=True,
        host="127.0.0.1",
        port=8001,
        log_level=40,  # ERROR level to reduce noise in tests
        log_format="console",
        monitor_enabled=False,
        monitor_interval_seconds=0.01,
    )


@pytest.fixture(scope="session", autouse=True)
def quiet_logging(test_settings: Settings):
    configure_logging(test_settings)


# ============================================================================
# Components
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def agent_store() -> InMemoryAgentStore:
    return InMemoryAgentStore()


@pytest.fixture
def container(
    test_settings: Settings,
    clock: FakeClock,
    session_store: InMemorySessionStore,
    agent_store: InMemoryAgentStore,
) -> ChatSupportContainer:
    """Fully wired component graph on the fake clock."""
    return ChatSupportContainer.build(
        test_settings,
        clock=clock,
        sessions=session_store,
        agents=agent_store,
    )


# ============================================================================
# FastAPI Application and Client
# ============================================================================

@pytest.fixture
def app(container: ChatSupportContainer) -> FastAPI:
    """
    FastAPI application over the test container.

    ASGITransport does not run the lifespan, so the monitoring loop is not
    started; tests drive it with container.monitor.run_cycle().
    """
    return create_app(container=container)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the test application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
