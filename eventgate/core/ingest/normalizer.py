"""Turn a decoded request body into a batch of events."""

from typing import Any

from eventgate.core.events.types import EventData
from eventgate.exceptions import EmptyBodyError


def normalize(raw_body: Any) -> list[EventData]:
    """Normalize a decoded JSON body into a list of events.

    A single object becomes a one element batch and an array is passed
    through in order. Nothing else is checked here.

    Raises:
        EmptyBodyError: If the body is missing, empty, or neither an object
            nor an array
    """
    if isinstance(raw_body, dict):
        if not raw_body:
            raise EmptyBodyError()
        return [raw_body]
    if isinstance(raw_body, list):
        if not raw_body:
            raise EmptyBodyError()
        return list(raw_body)
    raise EmptyBodyError()
