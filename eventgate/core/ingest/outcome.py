"""Values produced for one request."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LogLevel(str, Enum):
    """Severity an outcome is logged with."""

    DEBUG = "debug"
    WARN = "warn"
    ERROR = "error"

    @property
    def levelno(self) -> int:
        return _LEVELS[self]


_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Outcome:
    """HTTP verdict for a processed batch."""

    status_code: int
    body: dict[str, Any] | None
    log_level: LogLevel
    message: str


@dataclass
class ResponseState:
    """Tracks whether the response for a request has been written.

    A committed response is final; later outcomes must not be written.
    """

    committed: bool = False
    status_code: int | None = field(default=None)

    def commit(self, status_code: int) -> bool:
        """Mark the response as written.

        Returns:
            bool: False if it had already been committed
        """
        if self.committed:
            return False
        self.committed = True
        self.status_code = status_code
        return True
