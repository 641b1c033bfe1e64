"""Error events describing why an event was not accepted."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from eventgate.config import GatewayConfig
from eventgate.core.events.types import (
    EventData,
    FailureCause,
    OperationalFailure,
    describe_failure,
)
from eventgate.exceptions import ConfigError

EMITTER_ID = "eventbus"


class ErrorEventMeta(BaseModel):
    """Metadata of an error event; identity fields come from the failed event."""

    topic: str
    id: Any = None
    uri: Any = None
    dt: Any = None
    domain: Any = None

    model_config = ConfigDict(frozen=True)


class ErrorEvent(BaseModel):
    """Event produced to the error stream for a failed event."""

    schema_uri: str = Field(alias="$schema")
    meta: ErrorEventMeta
    emitter_id: str = EMITTER_ID
    raw_event: str
    message: str
    stack: str | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_event(self) -> dict[str, Any]:
        """JSON document submitted to the event bus."""
        data = self.model_dump(by_alias=True)
        if data["stack"] is None:
            del data["stack"]
        return data


def serialize_event(event: EventData) -> str:
    """Canonical string form of an event."""
    if isinstance(event, str):
        return event
    return json.dumps(event, default=str)


def to_error_event(
    event: EventData, cause: FailureCause, config: GatewayConfig
) -> ErrorEvent:
    """Map a failed event and its cause into an error event.

    Args:
        event: The event that failed
        cause: Why it failed
        config: Provides the error schema URI and error stream

    Returns:
        ErrorEvent: Error event for ``config.error_stream``

    Raises:
        ConfigError: If no error stream is configured
    """
    if not config.error_events_enabled:
        raise ConfigError("Cannot map error events without an error_stream")

    source_meta = event.get("meta") if isinstance(event, dict) else None
    if not isinstance(source_meta, dict):
        source_meta = {}

    return ErrorEvent(
        schema_uri=config.error_schema_uri,
        meta=ErrorEventMeta(
            topic=config.error_stream,
            id=source_meta.get("id"),
            uri=source_meta.get("uri"),
            dt=source_meta.get("dt"),
            domain=source_meta.get("domain"),
        ),
        raw_event=serialize_event(event),
        message=describe_failure(cause),
        stack=cause.stack if isinstance(cause, OperationalFailure) else None,
    )
