"""Resubmit failed events to the error stream."""

import traceback

from eventgate.config import GatewayConfig
from eventgate.core.events import EventBus, ProcessingResult
from eventgate.utils.logging_config import get_logger

from .error_events import to_error_event

logger = get_logger(__name__)


class ErrorResubmitter:
    """Produces an error event for every failure of a processed batch.

    Error events go to the bus as one new batch. The outcome of that batch is
    only logged: failed error events never produce further error events.
    """

    def __init__(self, event_bus: EventBus, config: GatewayConfig) -> None:
        self.event_bus = event_bus
        self.config = config

    async def resubmit(
        self, result: ProcessingResult, request_id: str | None = None
    ) -> None:
        """Map and submit the failures of ``result``.

        Args:
            result: Result of the primary ``process`` call
            request_id: Request the batch came from, for logging
        """
        failures = result.failures
        if not self.config.error_events_enabled or not failures:
            return

        error_events = [
            to_error_event(item.event, item.cause, self.config).to_event()
            for item in failures
        ]

        logger.info(
            f"Producing {len(error_events)} failed events to topic "
            f"{self.config.error_stream}",
            extra={"req_id": request_id, "error_stream": self.config.error_stream},
        )

        try:
            error_result = await self.event_bus.process(error_events)
        except Exception as e:
            logger.error(
                "Failed to produce error events",
                extra={
                    "req_id": request_id,
                    "error_stream": self.config.error_stream,
                    "error_event_count": len(error_events),
                    "error": str(e),
                    "traceback": traceback.format_exc(),
                },
            )
            return

        logger.info(
            "Produced error events",
            extra={
                "req_id": request_id,
                "error_stream": self.config.error_stream,
                **error_result.counts(),
            },
        )
