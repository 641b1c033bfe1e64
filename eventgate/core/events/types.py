"""Per-event results returned by an event bus."""

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Events are opaque JSON values; the core never mutates them
EventData = Any


class ValidationFailure(BaseModel):
    """The event did not pass validation."""

    kind: Literal["validation"] = "validation"
    text: str

    model_config = ConfigDict(frozen=True)


class OperationalFailure(BaseModel):
    """The event was valid but could not be delivered."""

    kind: Literal["operational"] = "operational"
    message: str
    stack: str | None = None

    model_config = ConfigDict(frozen=True)


class OpaqueFailure(BaseModel):
    """Any other failure value, without structured fields."""

    kind: Literal["opaque"] = "opaque"
    value: Any = None

    model_config = ConfigDict(frozen=True)


FailureCause = Annotated[
    ValidationFailure | OperationalFailure | OpaqueFailure,
    Field(discriminator="kind"),
]


def describe_failure(cause: FailureCause) -> str:
    """Human readable message for a failure cause."""
    if isinstance(cause, ValidationFailure):
        return cause.text
    if isinstance(cause, OperationalFailure):
        return cause.message
    if isinstance(cause.value, str):
        return cause.value
    return json.dumps(cause.value, default=str)


class ResultItem(BaseModel):
    """An event that was not accepted, together with the reason."""

    event: EventData
    cause: FailureCause

    model_config = ConfigDict(frozen=True)

    def to_response(self) -> dict[str, Any]:
        """Client facing representation, without stack traces."""
        return {
            "event": self.event,
            "context": {
                "type": self.cause.kind,
                "message": describe_failure(self.cause),
            },
        }


class ProcessingResult(BaseModel):
    """Categorized outcome of one ``EventBus.process`` call.

    Every input event appears in exactly one of the three lists, in input
    order.
    """

    success: tuple[EventData, ...] = ()
    invalid: tuple[ResultItem, ...] = ()
    error: tuple[ResultItem, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def failures(self) -> list[ResultItem]:
        """Invalid results followed by errored results."""
        return [*self.invalid, *self.error]

    def counts(self) -> dict[str, int]:
        return {
            "success": len(self.success),
            "invalid": len(self.invalid),
            "error": len(self.error),
        }
