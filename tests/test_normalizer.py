"""Tests for batch normalization."""

import pytest

from eventgate.core.ingest import normalize
from eventgate.exceptions import EmptyBodyError


@pytest.mark.parametrize("raw_body", [None, {}, [], "", 0, "event", 42, True])
def test_normalize_rejects_empty_body(raw_body):
    with pytest.raises(EmptyBodyError) as exc_info:
        normalize(raw_body)

    assert str(exc_info.value) == "Must provide JSON encoded events in request body."


def test_normalize_wraps_single_event(test_event):
    event = test_event("e1")

    assert normalize(event) == [event]


def test_normalize_passes_batch_through_in_order(test_event):
    events = [test_event("e1"), test_event("e2"), test_event("e3")]

    batch = normalize(events)

    assert batch == events
    assert [e["meta"]["id"] for e in batch] == ["e1", "e2", "e3"]


def test_normalize_does_not_validate_batch_members():
    """Schema checks are left to the event bus."""
    assert normalize([{}, "not an object", 3]) == [{}, "not an object", 3]
