"""Reduce per-event results into one HTTP outcome."""

from eventgate.core.events.types import ProcessingResult

from .outcome import LogLevel, Outcome

HTTP_NO_CONTENT = 204
HTTP_MULTI_STATUS = 207
HTTP_BAD_REQUEST = 400
HTTP_INTERNAL_SERVER_ERROR = 500


def aggregate(total_count: int, result: ProcessingResult) -> Outcome:
    """Classify a processing result into an HTTP outcome.

    Rows are checked in order and the first match wins:

    * no failures: 204, no body
    * every event invalid: 400 with the invalid results
    * some events accepted: 207 with invalid and errored results
    * otherwise (all failed, at least one errored): 500

    Counts are taken from ``result`` as reported by the event bus.

    Args:
        total_count: Number of events in the submitted batch, at least one
        result: Result returned by the event bus for that batch

    Returns:
        Outcome: Status code, body, log level and status message
    """
    success_count = len(result.success)
    invalid_count = len(result.invalid)
    error_count = len(result.error)
    failure_count = invalid_count + error_count

    if failure_count == 0:
        return Outcome(
            status_code=HTTP_NO_CONTENT,
            body=None,
            log_level=LogLevel.DEBUG,
            message=f"All {success_count} out of {total_count} events were accepted.",
        )

    invalid = [item.to_response() for item in result.invalid]
    error = [item.to_response() for item in result.error]

    if invalid_count == total_count:
        return Outcome(
            status_code=HTTP_BAD_REQUEST,
            body={"invalid": invalid},
            log_level=LogLevel.WARN,
            message=(
                f"{invalid_count} out of {total_count} events were invalid "
                "and not accepted."
            ),
        )

    if failure_count < total_count:
        return Outcome(
            status_code=HTTP_MULTI_STATUS,
            body={"invalid": invalid, "error": error},
            log_level=LogLevel.WARN,
            message=(
                f"{success_count} out of {total_count} events were accepted, "
                f"but {failure_count} failed ({invalid_count} invalid and "
                f"{error_count} errored)."
            ),
        )

    return Outcome(
        status_code=HTTP_INTERNAL_SERVER_ERROR,
        body={"invalid": invalid, "error": error},
        log_level=LogLevel.ERROR,
        message=(
            f"{failure_count} out of {total_count} events had failures and were "
            f"not accepted. ({invalid_count} invalid and {error_count} errored)."
        ),
    )
