"""Event bus interfaces and implementations."""

from abc import abstractmethod
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .bus import EventBus as ConcreteEventBus
from .bus import failure_cause_from_exception
from .types import (
    EventData,
    FailureCause,
    OpaqueFailure,
    OperationalFailure,
    ProcessingResult,
    ResultItem,
    ValidationFailure,
)


@runtime_checkable
class EventBus(Protocol):
    """Event bus interface."""

    @abstractmethod
    async def process(self, events: Sequence[EventData]) -> ProcessingResult:
        """Validate and deliver a batch of events.

        Per-event failures are returned as data. Only a failure of the whole
        call may raise.
        """
        ...


__all__ = [
    "EventBus",  # Protocol
    "ConcreteEventBus",  # Implementation
    "EventData",
    "FailureCause",
    "OpaqueFailure",
    "OperationalFailure",
    "ProcessingResult",
    "ResultItem",
    "ValidationFailure",
    "failure_cause_from_exception",
]
