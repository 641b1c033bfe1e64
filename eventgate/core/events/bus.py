"""Event bus implementation."""

import asyncio
import traceback
import uuid
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Literal

from eventgate.exceptions import EventGateError, EventInvalidError
from eventgate.utils.logging_config import get_logger

from .types import (
    EventData,
    FailureCause,
    OpaqueFailure,
    OperationalFailure,
    ProcessingResult,
    ResultItem,
    ValidationFailure,
)

logger = get_logger(__name__)

Validator = Callable[[EventData], Any]
Producer = Callable[[EventData], Awaitable[None]]

Category = Literal["success", "invalid", "error"]


def failure_cause_from_exception(error: Any) -> FailureCause:
    """Turn whatever a validator or producer raised into a FailureCause.

    This is the only place where failure values are inspected by type.

    Args:
        error: Exception (or any other value) describing the failure

    Returns:
        FailureCause: Tagged failure cause
    """
    if isinstance(error, EventInvalidError):
        return ValidationFailure(text=error.errors_text)
    if isinstance(error, BaseException):
        return OperationalFailure(
            message=str(error) or type(error).__name__,
            stack="".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ),
        )
    return OpaqueFailure(value=error)


class EventBus:
    """Validates events and hands the valid ones to a producer."""

    def __init__(self, validate: Validator, produce: Producer) -> None:
        """Initialize event bus.

        Args:
            validate: Raises EventInvalidError for an invalid event
            produce: Coroutine function delivering one valid event
        """
        self._validate = validate
        self._produce = produce
        self._pending_tasks: set[asyncio.Task] = set()
        self._req_id = str(uuid.uuid4())
        self._shutting_down = False
        logger.info(
            "Event bus initialized",
            extra={"req_id": self._req_id, "component": "event_bus"},
        )

    @property
    def is_running(self) -> bool:
        return not self._shutting_down

    async def start(self) -> None:
        """Start accepting events."""
        self._shutting_down = False
        logger.debug(
            "Event bus started",
            extra={"req_id": self._req_id, "component": "event_bus"},
        )

    async def stop(self) -> None:
        """Stop accepting events and wait for in-flight ones."""
        self._shutting_down = True

        if self._pending_tasks:
            logger.info(
                "Waiting for in-flight events",
                extra={
                    "req_id": self._req_id,
                    "component": "event_bus",
                    "pending_tasks": len(self._pending_tasks),
                },
            )
            await asyncio.gather(*self._pending_tasks, return_exceptions=True)
            self._pending_tasks.clear()

        logger.debug(
            "Event bus stopped",
            extra={"req_id": self._req_id, "component": "event_bus"},
        )

    async def _process_one(self, event: EventData) -> tuple[Category, Any]:
        try:
            self._validate(event)
        except EventInvalidError as e:
            return "invalid", ResultItem(
                event=event, cause=failure_cause_from_exception(e)
            )

        try:
            await self._produce(event)
        except Exception as e:
            logger.error(
                "Failed to produce event",
                extra={
                    "req_id": self._req_id,
                    "component": "event_bus",
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return "error", ResultItem(event=event, cause=failure_cause_from_exception(e))

        return "success", event

    async def process(self, events: Sequence[EventData]) -> ProcessingResult:
        """Validate and produce a batch of events.

        Args:
            events: Events to process

        Returns:
            ProcessingResult: Every event sorted into success, invalid or error

        Raises:
            EventGateError: If the bus is shutting down
        """
        if self._shutting_down:
            raise EventGateError("Event bus is shutting down")

        tasks = []
        for event in events:
            task = asyncio.create_task(self._process_one(event))
            task.add_done_callback(self._pending_tasks.discard)
            self._pending_tasks.add(task)
            tasks.append(task)

        outcomes = await asyncio.gather(*tasks)

        sorted_results: dict[Category, list[Any]] = {
            "success": [],
            "invalid": [],
            "error": [],
        }
        for category, value in outcomes:
            sorted_results[category].append(value)

        result = ProcessingResult(**sorted_results)
        logger.debug(
            "Processed events",
            extra={
                "req_id": self._req_id,
                "component": "event_bus",
                "event_count": len(events),
                **result.counts(),
            },
        )
        return result
