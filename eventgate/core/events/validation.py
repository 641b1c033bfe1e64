"""Default event validation.

Only the metadata block every event must carry is checked. Schema
validation of the event body belongs to custom event bus factories.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from eventgate.core.events.types import EventData
from eventgate.exceptions import EventInvalidError


class EventMeta(BaseModel):
    """Metadata block required on every event."""

    id: str = Field(min_length=1)
    uri: str = Field(min_length=1)
    dt: datetime
    domain: str = Field(min_length=1)
    topic: str = Field(min_length=1)

    model_config = ConfigDict(extra="allow")


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"meta.{location} {error.get('msg', 'is invalid')}"


def validate_event_meta(event: EventData) -> EventMeta:
    """Check that an event carries a well formed metadata block.

    Args:
        event: Decoded event

    Returns:
        EventMeta: The parsed metadata

    Raises:
        EventInvalidError: With every problem found, aggregated
    """
    if not isinstance(event, dict):
        raise EventInvalidError([f"event must be a JSON object, got {type(event).__name__}"])

    meta = event.get("meta")
    if not isinstance(meta, dict):
        raise EventInvalidError(["meta must be an object"])

    try:
        return EventMeta.model_validate(meta)
    except ValidationError as err:
        raise EventInvalidError(_format_error(e) for e in err.errors()) from err
