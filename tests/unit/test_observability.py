# tests/unit/test_observability.py
"""Unit tests for log context helpers and the request ID log processor."""

import warnings

import pytest
import structlog

from chat_support.api.middleware.request_id import (
    add_request_id_to_log,
    set_correlation_id,
    set_request_id,
)
from chat_support.infrastructure.observability.logging import console_renderer_with_colors
from chat_support.infrastructure.observability import (
    bind_context,
    clear_context,
    get_current_context,
    log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_context()
    yield
    clear_context()


@pytest.mark.unit
class TestLogContext:
    def test_log_context_binds_and_unbinds(self):
        with log_context(cycle=7):
            assert get_current_context() == {"cycle": 7}
        assert get_current_context() == {}

    def test_log_context_unbinds_on_error(self):
        with pytest.raises(RuntimeError):
            with log_context(cycle=1):
                raise RuntimeError("cycle failed")
        assert "cycle" not in get_current_context()

    def test_bind_and_clear(self):
        bind_context(session_id="abc")
        assert get_current_context()["session_id"] == "abc"

        clear_context()
        assert get_current_context() == {}


@pytest.mark.unit
class TestRequestIdProcessor:
    def test_adds_ids_when_set(self):
        set_request_id("req-1")
        set_correlation_id("corr-1")

        event = add_request_id_to_log(None, "info", {"event": "polled"})

        assert event["request_id"] == "req-1"
        assert event["correlation_id"] == "corr-1"


@pytest.mark.unit
class TestRenderers:
    def test_console_renderer_uses_current_structlog_options(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            renderer = console_renderer_with_colors()

        assert isinstance(renderer, structlog.dev.ConsoleRenderer)
