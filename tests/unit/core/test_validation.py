"""Unit tests for entry validation and normalization."""

import pytest

from multisend.core import (
    DuplicateAddressError,
    InvalidAddressError,
    InvalidAmountError,
    ValidationMode,
    validate_entries,
)
from multisend.core.validation import (
    canonicalize_address,
    find_duplicates,
    normalize_amount,
    to_base_units,
)
from multisend.models import RawEntry

DEAD = "0x000000000000000000000000000000000000dEaD"
ADDR_A = "0x1111111111111111111111111111111111111111"
ADDR_B = "0x2222222222222222222222222222222222222222"


class TestNormalization:
    """Test address and amount normalization helpers."""

    def test_canonicalize_checksums_lowercase(self):
        """Lowercase hex is returned in checksum form."""
        assert canonicalize_address(DEAD.lower()) == DEAD
        assert canonicalize_address(f"  {ADDR_A} ") == ADDR_A

    @pytest.mark.parametrize("value", ["", "0x123", "not-an-address", "0x" + "g" * 40])
    def test_canonicalize_rejects_garbage(self, value):
        """Non-addresses canonicalize to None."""
        assert canonicalize_address(value) is None

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("100", "100"),
            ("$1,250.50", "1250.50"),
            (" 0.5 ", "0.5"),
            ("-3", None),
            ("1e5", None),
            ("abc", None),
            ("", None),
            ("1.", None),
            ("\u0661\u0662", None),
        ],
    )
    def test_normalize_amount(self, raw, expected):
        """Currency symbols and grouping commas are stripped, anything else rejected."""
        assert normalize_amount(raw) == expected

    def test_to_base_units(self):
        """Display amounts scale exactly by 10**decimals."""
        assert to_base_units("1.5", 18) == 1_500_000_000_000_000_000
        assert to_base_units("42", 0) == 42
        assert to_base_units("0.01", 2) == 1

    def test_to_base_units_rejects_excess_precision(self):
        """Fractions finer than the asset's base unit are not representable."""
        assert to_base_units("0.123", 2) is None

    def test_to_base_units_keeps_precision_for_large_values(self):
        """Large amounts do not lose digits to the default decimal context."""
        display = "123456789012345678901234567890.5"
        assert to_base_units(display, 18) == 1234567890123456789012345678905 * 10**17

    def test_find_duplicates_ignores_case(self):
        """Duplicates are detected on the canonical form."""
        raw = [
            RawEntry(address=DEAD, amount="1"),
            RawEntry(address=DEAD.lower(), amount="2"),
            RawEntry(address=ADDR_A, amount="3"),
        ]
        assert find_duplicates(raw) == [DEAD]


class TestValidateEntries:
    """Test validate_entries in both modes."""

    def test_valid_entries_keep_order(self):
        """Valid rows become entries in input order."""
        raw = [
            RawEntry(address=ADDR_B, amount="$2"),
            RawEntry(address=ADDR_A.lower(), amount="1,000"),
        ]
        report = validate_entries(raw, decimals=6)

        assert [e.address for e in report.entries] == [ADDR_B, ADDR_A]
        assert [e.amount_units for e in report.entries] == [2_000_000, 1_000_000_000]
        assert [e.amount_display for e in report.entries] == ["2", "1000"]
        assert report.total_skipped == 0

    def test_tolerant_mode_counts_skips(self):
        """Tolerant mode skips and counts malformed addresses and zero rows."""
        raw = [
            RawEntry(address="bogus", amount="1"),
            RawEntry(address=ADDR_B, amount="0.00"),
            RawEntry(address=DEAD, amount="5"),
        ]
        report = validate_entries(raw, decimals=18, mode=ValidationMode.TOLERANT)

        assert [e.address for e in report.entries] == [DEAD]
        assert report.skipped_invalid_address == 1
        assert report.skipped_zero == 1
        assert report.total_skipped == 2

    @pytest.mark.parametrize(
        ("amount", "decimals"),
        [("1O0", 18), ("-1", 18), ("0.123", 2), ("\u0661\u0662", 18)],
    )
    def test_tolerant_mode_rejects_invalid_amount(self, amount, decimals):
        """Malformed amounts fail the input even in tolerant mode."""
        raw = [RawEntry(address=ADDR_A, amount="1"), RawEntry(address=ADDR_B, amount=amount)]
        with pytest.raises(InvalidAmountError) as exc_info:
            validate_entries(raw, decimals=decimals, mode=ValidationMode.TOLERANT)
        assert exc_info.value.index == 1
        assert exc_info.value.value == amount

    def test_strict_mode_rejects_invalid_address(self):
        """Strict mode raises on a malformed address with its position."""
        raw = [RawEntry(address=ADDR_A, amount="1"), RawEntry(address="0x12", amount="1")]
        with pytest.raises(InvalidAddressError) as exc_info:
            validate_entries(raw, decimals=18, mode=ValidationMode.STRICT)
        assert exc_info.value.index == 1
        assert exc_info.value.value == "0x12"

    def test_strict_mode_rejects_invalid_amount(self):
        """Strict mode raises on a malformed amount."""
        raw = [RawEntry(address=ADDR_A, amount="one")]
        with pytest.raises(InvalidAmountError):
            validate_entries(raw, decimals=18, mode=ValidationMode.STRICT)

    def test_strict_mode_still_skips_zero(self):
        """Zero amounts are skipped in both modes."""
        raw = [RawEntry(address=ADDR_A, amount="0"), RawEntry(address=ADDR_B, amount="1")]
        report = validate_entries(raw, decimals=18, mode=ValidationMode.STRICT)
        assert [e.address for e in report.entries] == [ADDR_B]
        assert report.skipped_zero == 1

    def test_duplicates_fail_whole_input(self):
        """A repeated address fails validation even in tolerant mode."""
        raw = [
            RawEntry(address=ADDR_A, amount="1"),
            RawEntry(address=ADDR_B, amount="1"),
            RawEntry(address=ADDR_A.lower(), amount="2"),
        ]
        with pytest.raises(DuplicateAddressError) as exc_info:
            validate_entries(raw, decimals=18)
        assert exc_info.value.duplicates == [ADDR_A]

    def test_empty_input(self):
        """Empty input yields an empty report."""
        report = validate_entries([], decimals=18)
        assert report.entries == []
        assert report.total_skipped == 0

    def test_negative_decimals(self):
        """Negative decimals are a programming error."""
        with pytest.raises(ValueError):
            validate_entries([], decimals=-1)
