"""Exception types raised by the gateway."""

from collections.abc import Iterable


class EventGateError(Exception):
    """Base class for all gateway errors."""


class EmptyBodyError(EventGateError):
    """The request did not carry any events."""

    def __init__(
        self, message: str = "Must provide JSON encoded events in request body."
    ) -> None:
        super().__init__(message)
        self.message = message


class EventInvalidError(EventGateError):
    """An event failed validation.

    Attributes:
        errors: Individual validation messages
        errors_text: All messages joined into one human readable string
    """

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        self.errors_text = ", ".join(self.errors) or "event is invalid"
        super().__init__(self.errors_text)


class ConfigError(EventGateError):
    """Configuration could not be loaded or is unusable."""
