"""Batch ingestion: normalization, outcome aggregation and error resubmission."""

from .aggregator import aggregate
from .error_events import ErrorEvent, ErrorEventMeta, to_error_event
from .normalizer import normalize
from .outcome import LogLevel, Outcome, ResponseState
from .resubmitter import ErrorResubmitter

__all__ = [
    "ErrorEvent",
    "ErrorEventMeta",
    "ErrorResubmitter",
    "LogLevel",
    "Outcome",
    "ResponseState",
    "aggregate",
    "normalize",
    "to_error_event",
]
