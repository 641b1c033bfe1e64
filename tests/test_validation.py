"""Tests for event metadata validation."""

import pytest

from eventgate.core.events.validation import EventMeta, validate_event_meta
from eventgate.exceptions import EventInvalidError

from .test_events_common import create_test_event


def test_valid_event():
    meta = validate_event_meta(create_test_event("e1", topic="page.create"))

    assert isinstance(meta, EventMeta)
    assert meta.id == "e1"
    assert meta.topic == "page.create"
    assert meta.dt.year == 2024


def test_extra_meta_fields_are_allowed():
    validate_event_meta(create_test_event("e1", request_id="abc"))


def test_event_must_be_object():
    with pytest.raises(EventInvalidError) as exc_info:
        validate_event_meta(["not", "an", "event"])

    assert exc_info.value.errors_text == "event must be a JSON object, got list"


def test_meta_must_be_object():
    with pytest.raises(EventInvalidError) as exc_info:
        validate_event_meta({"meta": "nope"})

    assert exc_info.value.errors == ["meta must be an object"]


def test_errors_are_aggregated():
    with pytest.raises(EventInvalidError) as exc_info:
        validate_event_meta({"meta": {"uri": "u", "domain": "d", "topic": "t"}})

    errors = exc_info.value.errors
    assert len(errors) == 2
    assert errors[0].startswith("meta.id ")
    assert errors[1].startswith("meta.dt ")
    assert exc_info.value.errors_text == ", ".join(errors)


@pytest.mark.parametrize("field", ["id", "uri", "domain", "topic"])
def test_empty_meta_fields_are_invalid(field):
    event = create_test_event("e1", **{field: ""})

    with pytest.raises(EventInvalidError) as exc_info:
        validate_event_meta(event)

    assert exc_info.value.errors[0].startswith(f"meta.{field} ")


def test_bad_timestamp_is_invalid():
    with pytest.raises(EventInvalidError) as exc_info:
        validate_event_meta(create_test_event("e1", dt="yesterday"))

    assert exc_info.value.errors[0].startswith("meta.dt ")
