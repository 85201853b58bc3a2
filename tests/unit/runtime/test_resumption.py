"""Unit tests for the resumption filter."""

import pytest

from multisend.core import NoRemainingEntriesError
from multisend.models import Entry
from multisend.runtime import filter_confirmed

ADDR_A = "0x1111111111111111111111111111111111111111"
ADDR_B = "0x2222222222222222222222222222222222222222"
ADDR_C = "0x3333333333333333333333333333333333333333"


def _entries() -> list[Entry]:
    return [
        Entry(address=ADDR_A, amount_units=1, amount_display="1"),
        Entry(address=ADDR_B, amount_units=2, amount_display="2"),
        Entry(address=ADDR_C, amount_units=3, amount_display="3"),
    ]


def test_no_confirmations_keeps_everything():
    """Nothing is skipped when the session has no confirmed keys."""
    result = filter_confirmed(_entries(), frozenset())
    assert result.entries == _entries()
    assert result.skipped_confirmed == 0


def test_confirmed_entries_are_skipped_in_order():
    """Confirmed keys are removed, remaining order preserved."""
    result = filter_confirmed(_entries(), {f"{ADDR_B}|2"})
    assert [e.address for e in result.entries] == [ADDR_A, ADDR_C]
    assert result.skipped_confirmed == 1


def test_amount_change_is_not_confirmed():
    """A confirmed address with a different amount is still sent."""
    result = filter_confirmed(_entries(), {f"{ADDR_A}|100"})
    assert len(result.entries) == 3


def test_filter_is_idempotent():
    """Filtering twice with the same set gives the same result."""
    confirmed = {f"{ADDR_A}|1"}
    once = filter_confirmed(_entries(), confirmed)
    twice = filter_confirmed(once.entries, confirmed)
    assert twice.entries == once.entries
    assert twice.skipped_confirmed == 0


def test_all_confirmed_raises():
    """A fully confirmed working set raises NoRemainingEntriesError."""
    confirmed = {e.key for e in _entries()}
    with pytest.raises(NoRemainingEntriesError) as exc_info:
        filter_confirmed(_entries(), confirmed)
    assert exc_info.value.skipped_confirmed == 3


def test_empty_input_raises():
    """An empty validated list leaves nothing to send."""
    with pytest.raises(NoRemainingEntriesError):
        filter_confirmed([], frozenset())
