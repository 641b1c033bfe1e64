"""Tests for the EventBus implementation."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from eventgate.core.events import (
    ConcreteEventBus,
    EventBus,
    OpaqueFailure,
    OperationalFailure,
    ValidationFailure,
    failure_cause_from_exception,
)
from eventgate.core.events.validation import validate_event_meta
from eventgate.exceptions import EventGateError, EventInvalidError

from .test_events_common import create_test_event


@pytest.fixture
def produce():
    return AsyncMock()


@pytest.fixture
def event_bus(produce):
    return ConcreteEventBus(validate=validate_event_meta, produce=produce)


def test_concrete_bus_satisfies_protocol(event_bus):
    assert isinstance(event_bus, EventBus)


def test_failure_cause_from_invalid_error():
    cause = failure_cause_from_exception(EventInvalidError(["meta.id Field required", "meta.dt Field required"]))

    assert cause == ValidationFailure(text="meta.id Field required, meta.dt Field required")


def test_failure_cause_from_exception_keeps_traceback():
    try:
        raise TimeoutError("timeout")
    except TimeoutError as e:
        cause = failure_cause_from_exception(e)

    assert isinstance(cause, OperationalFailure)
    assert cause.message == "timeout"
    assert "TimeoutError: timeout" in cause.stack


def test_failure_cause_from_exception_without_message():
    cause = failure_cause_from_exception(RuntimeError())

    assert cause.message == "RuntimeError"


@pytest.mark.parametrize("value", ["plain string", {"code": 7}, 3])
def test_failure_cause_from_other_values(value):
    assert failure_cause_from_exception(value) == OpaqueFailure(value=value)


@pytest.mark.asyncio
async def test_process_all_valid(event_bus, produce):
    events = [create_test_event("e1"), create_test_event("e2")]

    result = await event_bus.process(events)

    assert list(result.success) == events
    assert result.invalid == ()
    assert result.error == ()
    assert produce.await_count == 2


@pytest.mark.asyncio
async def test_process_sorts_results_and_keeps_order(produce):
    def produce_side_effect(event):
        if event["meta"]["id"] == "e4":
            raise ConnectionError("broker unavailable")

    produce.side_effect = produce_side_effect
    bus = ConcreteEventBus(validate=validate_event_meta, produce=produce)
    events = [
        create_test_event("e1"),
        {"meta": {"id": "e2"}},
        create_test_event("e3"),
        create_test_event("e4"),
        "e5",
    ]

    result = await bus.process(events)

    assert [e["meta"]["id"] for e in result.success] == ["e1", "e3"]
    assert [item.event for item in result.invalid] == [events[1], "e5"]
    assert [item.event for item in result.error] == [events[3]]
    assert result.error[0].cause.message == "broker unavailable"
    assert len(result.success) + len(result.invalid) + len(result.error) == len(events)


@pytest.mark.asyncio
async def test_invalid_events_are_not_produced(event_bus, produce):
    await event_bus.process([{"meta": {}}])

    produce.assert_not_awaited()


@pytest.mark.asyncio
async def test_process_custom_validator():
    validate = Mock(side_effect=EventInvalidError(["custom rule failed"]))
    bus = ConcreteEventBus(validate=validate, produce=AsyncMock())

    result = await bus.process([create_test_event("e1")])

    assert result.invalid[0].cause == ValidationFailure(text="custom rule failed")


@pytest.mark.asyncio
async def test_stop_waits_for_in_flight_events():
    release = asyncio.Event()
    produced = []

    async def slow_produce(event):
        await release.wait()
        produced.append(event)

    bus = ConcreteEventBus(validate=validate_event_meta, produce=slow_produce)
    await bus.start()
    processing = asyncio.create_task(bus.process([create_test_event("e1")]))
    await asyncio.sleep(0)

    stopping = asyncio.create_task(bus.stop())
    await asyncio.sleep(0)
    assert not stopping.done()

    release.set()
    await stopping
    result = await processing

    assert len(produced) == 1
    assert len(result.success) == 1
    assert not bus.is_running


@pytest.mark.asyncio
async def test_process_after_stop_raises(event_bus):
    await event_bus.start()
    await event_bus.stop()

    with pytest.raises(EventGateError):
        await event_bus.process([create_test_event("e1")])

    await event_bus.start()
    assert event_bus.is_running
