"""Default event producer."""

from eventgate.utils.logging_config import get_logger

from .types import EventData

UNKNOWN_TOPIC = "unknown"


def topic_for(event: EventData) -> str:
    """Destination topic of an event, taken from ``meta.topic``."""
    if isinstance(event, dict):
        meta = event.get("meta")
        if isinstance(meta, dict) and meta.get("topic"):
            return str(meta["topic"])
    return UNKNOWN_TOPIC


class LoggingProducer:
    """Writes produced events to the ``eventgate.produce`` logger.

    Stands in for a streaming backend in development and tests.
    """

    def __init__(self, logger_name: str = "eventgate.produce") -> None:
        self.logger = get_logger(logger_name)
        self.produced = 0

    async def __call__(self, event: EventData) -> None:
        topic = topic_for(event)
        self.produced += 1
        self.logger.info(
            "Produced event",
            extra={"topic": topic, "event": event},
        )
