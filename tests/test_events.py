"""Tests for the in-process event bus."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from loanform.events import clear_subscribers, emit, log_event, subscribe, unsubscribe
from loanform.schemas.events import EventType, SystemEvent


@pytest.fixture(autouse=True)
def _clean_bus():
    clear_subscribers()
    yield
    clear_subscribers()


def _handler(name: str = "handler", **kwargs) -> AsyncMock:
    mock = AsyncMock(**kwargs)
    mock.__name__ = name
    return mock


class TestEmit:
    @pytest.mark.asyncio()
    async def test_global_handler_receives_every_event(self):
        handler = _handler()
        subscribe(handler)

        await emit(SystemEvent(event_type=EventType.APPLICATION_SUBMITTED))
        await emit(SystemEvent(event_type=EventType.ELIGIBILITY_CHECKED))

        assert handler.await_count == 2

    @pytest.mark.asyncio()
    async def test_typed_handler_filters(self):
        handler = _handler()
        subscribe(handler, event_types=[EventType.ELIGIBILITY_FAILED])

        await emit(SystemEvent(event_type=EventType.APPLICATION_SUBMITTED))
        handler.assert_not_awaited()

        event = SystemEvent(event_type=EventType.ELIGIBILITY_FAILED, data={"error": "ReadTimeout"})
        await emit(event)
        handler.assert_awaited_once_with(event)

    @pytest.mark.asyncio()
    async def test_failing_handler_is_isolated(self):
        broken = _handler("broken", side_effect=RuntimeError("boom"))
        healthy = _handler("healthy")
        subscribe(broken)
        subscribe(healthy)

        await emit(SystemEvent(event_type=EventType.VALIDATION_FAILED))

        healthy.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_unsubscribe(self):
        handler = _handler()
        subscribe(handler)
        subscribe(handler, event_types=[EventType.RATES_CALCULATED])
        unsubscribe(handler)

        await emit(SystemEvent(event_type=EventType.RATES_CALCULATED))
        handler.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_no_subscribers_is_noop(self):
        await emit(SystemEvent(event_type=EventType.SYSTEM_STARTUP))


class TestLogEvent:
    @pytest.mark.asyncio()
    async def test_log_event_writes_structured_entry(self):
        event = SystemEvent(
            event_type=EventType.ELIGIBILITY_CHECKED,
            data={"is_eligible": True, "approval_likelihood": 85},
            source_module="tests",
        )
        with capture_logs() as entries:
            await log_event(event)

        assert len(entries) == 1
        entry = entries[0]
        assert entry["event"] == "eligibility.checked"
        assert entry["log_level"] == "info"
        assert entry["event_id"] == str(event.id)
        assert entry["source"] == "tests"
        assert entry["is_eligible"] is True
        assert entry["approval_likelihood"] == 85

    def test_event_is_frozen(self):
        event = SystemEvent(event_type=EventType.SYSTEM_STARTUP)
        with pytest.raises(ValidationError):
            event.data = {}  # type: ignore[misc]
