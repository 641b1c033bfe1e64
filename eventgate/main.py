"""Main FastAPI application module."""

import json
import logging
import traceback
import uuid
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from eventgate import __version__
from eventgate.config import GatewayConfig, load_config
from eventgate.core.events import EventBus, ProcessingResult
from eventgate.core.events.factory import load_event_bus
from eventgate.core.events.types import EventData
from eventgate.core.ingest import (
    ErrorResubmitter,
    Outcome,
    ResponseState,
    aggregate,
    normalize,
)
from eventgate.exceptions import EmptyBodyError
from eventgate.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

# HTTP Status Codes
HTTP_NO_CONTENT = 204
HTTP_BAD_REQUEST = 400

INVALID_JSON_MESSAGE = "Request body is not valid JSON."
HASTY_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Gateway:
    """Collaborators shared by the requests of one application."""

    config: GatewayConfig
    event_bus: EventBus
    resubmitter: ErrorResubmitter


def get_gateway(request: Request) -> Gateway:
    """Gateway of the application serving ``request``."""
    return request.app.state.gateway


def is_hasty(value: str | None) -> bool:
    """Whether the ``hasty`` query flag asks for an immediate response."""
    return value is not None and value.strip().lower() in HASTY_VALUES


def write_outcome(outcome: Outcome, state: ResponseState) -> Response | None:
    """Build the HTTP response for an outcome, unless one was already sent.

    Args:
        outcome: Aggregated outcome of the batch
        state: Response state of the request

    Returns:
        The response to send, or None if the request was already answered
    """
    if not state.commit(outcome.status_code):
        return None
    if outcome.body is None:
        return Response(status_code=outcome.status_code)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


def log_outcome(outcome: Outcome, result: ProcessingResult, request_id: str | None) -> None:
    extra: dict[str, Any] = {
        "req_id": request_id,
        "status_code": outcome.status_code,
        **result.counts(),
    }
    if outcome.body is not None:
        extra["failures"] = outcome.body
    logger.log(outcome.log_level.levelno, outcome.message, extra=extra)


async def process_batch(
    gateway: Gateway,
    events: list[EventData],
    state: ResponseState,
    request_id: str | None = None,
) -> tuple[ProcessingResult, Response | None]:
    """Send a batch through the event bus and aggregate the result.

    Args:
        gateway: Gateway handling the request
        events: Normalized batch, at least one event
        state: Response state of the request
        request_id: Request identifier for logging

    Returns:
        The bus result and the response to send (None if already answered)
    """
    result = await gateway.event_bus.process(events)
    outcome = aggregate(len(events), result)
    log_outcome(outcome, result, request_id)
    return result, write_outcome(outcome, state)


async def process_hastily(
    gateway: Gateway,
    events: list[EventData],
    state: ResponseState,
    request_id: str | None = None,
) -> None:
    """Process a batch whose request has already been answered."""
    try:
        result, response = await process_batch(gateway, events, state, request_id)
    except Exception as e:
        logger.error(
            "Error processing hasty events",
            extra={
                "req_id": request_id,
                "event_count": len(events),
                "error": str(e),
                "traceback": traceback.format_exc(),
            },
        )
        return

    if response is not None:
        logger.warning(
            "Hasty request was not answered before processing finished",
            extra={"req_id": request_id},
        )
    await gateway.resubmitter.resubmit(result, request_id)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Unsupported JSON constant: {token}")


async def read_json_body(request: Request) -> Any:
    """Decode the request body, None when there is none."""
    body = await request.body()
    if not body.strip():
        return None
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except ValueError as e:
        logger.warning(
            INVALID_JSON_MESSAGE,
            extra={"req_id": getattr(request.state, "request_id", None), "error": str(e)},
        )
        raise HTTPException(status_code=HTTP_BAD_REQUEST, detail=INVALID_JSON_MESSAGE) from e


router = APIRouter()


@router.post("/events", status_code=HTTP_NO_CONTENT)
async def post_events(
    request: Request,
    background_tasks: BackgroundTasks,
    hasty: str | None = None,
    gateway: Gateway = Depends(get_gateway),
) -> Response:
    """Accept a single event or a batch of events.

    Failed events are resubmitted to the error stream after the response
    has been sent.
    """
    request_id = getattr(request.state, "request_id", None)
    raw_body = await read_json_body(request)

    try:
        events = normalize(raw_body)
    except EmptyBodyError as e:
        logger.warning(e.message, extra={"req_id": request_id})
        raise HTTPException(status_code=HTTP_BAD_REQUEST, detail=e.message) from e

    state = ResponseState()

    if is_hasty(hasty):
        state.commit(HTTP_NO_CONTENT)
        logger.debug(
            f"{len(events)} events hastily received.", extra={"req_id": request_id}
        )
        background_tasks.add_task(process_hastily, gateway, events, state, request_id)
        return Response(status_code=HTTP_NO_CONTENT)

    result, response = await process_batch(gateway, events, state, request_id)
    background_tasks.add_task(gateway.resubmitter.resubmit, result, request_id)
    return response


async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


async def api_logging_middleware(
    request: Request, call_next: Callable[[Request], Response]
) -> Response:
    """Middleware to log requests with detailed API endpoint information."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    start_time = datetime.now(UTC)

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "Error processing request",
            extra={
                "req_id": request_id,
                "error": str(e),
                "traceback": traceback.format_exc(),
                "request": {"method": request.method, "url": str(request.url)},
            },
        )
        raise

    duration = (datetime.now(UTC) - start_time).total_seconds()
    logger.info(
        "API request completed",
        extra={
            "req_id": request_id,
            "response": {
                "status_code": response.status_code,
                "duration": duration,
            },
            "request": {
                "method": request.method,
                "url": str(request.url),
                "query_params": dict(request.query_params),
            },
        },
    )
    response.headers["X-Request-ID"] = request_id
    return response


def create_app(
    config: GatewayConfig | None = None,
    event_bus: EventBus | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Build the gateway application.

    Args:
        config: Gateway configuration, loaded from the environment if omitted
        event_bus: Event bus to use instead of the configured factory's
        configure_logging: Whether startup installs the JSON log handlers

    Returns:
        FastAPI: The application
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the event bus on startup and stop it on shutdown."""
        if configure_logging:
            setup_logging(config.log_level, config.log_file)

        logger.info("Initializing event bus")
        bus = event_bus if event_bus is not None else load_event_bus(config)
        start = getattr(bus, "start", None)
        if callable(start):
            await start()

        app.state.gateway = Gateway(
            config=config,
            event_bus=bus,
            resubmitter=ErrorResubmitter(bus, config),
        )
        logger.info(
            "Startup complete",
            extra={"error_stream": config.error_stream},
        )

        try:
            yield
        finally:
            logger.info("Starting application shutdown")
            stop = getattr(bus, "stop", None)
            if callable(stop):
                await stop()
            logger.info("Shutdown complete")

    app = FastAPI(
        title="EventGate",
        description="Accepts batches of events and forwards them to an event bus",
        version=__version__,
        lifespan=lifespan,
    )
    app.middleware("http")(api_logging_middleware)
    app.include_router(router, prefix="/v1")
    app.add_api_route("/health", health_check, methods=["GET"])
    return app


if __name__ == "__main__":
    import uvicorn

    settings = load_config()
    uvicorn.run(
        "eventgate.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )
