"""Unit tests for entry models."""

import pytest
from pydantic import ValidationError

from multisend.models import Entry, RawEntry, entry_key

ADDR = "0x1111111111111111111111111111111111111111"


def test_entry_key_combines_address_and_display_amount():
    """Entry key is address|display amount."""
    entry = Entry(address=ADDR, amount_units=1_500_000, amount_display="1.5")
    assert entry.key == f"{ADDR}|1.5"
    assert entry.key == entry_key(ADDR, "1.5")


def test_same_recipient_different_amount_has_different_key():
    """Changing the amount changes the key."""
    first = Entry(address=ADDR, amount_units=1, amount_display="1")
    second = Entry(address=ADDR, amount_units=2, amount_display="2")
    assert first.key != second.key


def test_entry_requires_positive_units():
    """Validated entries never carry zero amounts."""
    with pytest.raises(ValidationError):
        Entry(address=ADDR, amount_units=0, amount_display="0")


def test_entry_is_frozen():
    """Entries are immutable."""
    entry = Entry(address=ADDR, amount_units=1, amount_display="1")
    with pytest.raises(ValidationError):
        entry.amount_units = 2


def test_raw_entry_defaults_to_empty_strings():
    """Missing raw fields become empty strings."""
    raw = RawEntry()
    assert raw.address == ""
    assert raw.amount == ""
