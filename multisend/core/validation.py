"""Entry validation and normalization.

Turns raw ``(address, amount)`` rows into :class:`~multisend.models.Entry`
objects: addresses are checksummed, amounts are cleaned of currency symbols
and grouping separators and converted to integer base units. A malformed
amount always fails the input; only malformed addresses are skippable.

Duplicates are a user error, so any repeated canonical address fails the
whole input instead of keeping the first occurrence.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal, localcontext

from web3 import Web3

from ..models import Entry, RawEntry
from .enums import ValidationMode
from .exceptions import DuplicateAddressError, InvalidAddressError, InvalidAmountError

logger = logging.getLogger(__name__)

_AMOUNT_PATTERN = re.compile(r"^\d+(\.\d+)?$", re.ASCII)
_STRIPPED_CHARS = ("$", ",")


@dataclass
class ValidationReport:
    """Outcome of validating a raw entry list.

    Attributes:
        entries: Valid entries in input order
        skipped_invalid_address: Rows dropped for an unusable address (tolerant mode)
        skipped_zero: Rows dropped because the amount is zero
    """

    entries: list[Entry] = field(default_factory=list)
    skipped_invalid_address: int = 0
    skipped_zero: int = 0

    @property
    def total_skipped(self) -> int:
        return self.skipped_invalid_address + self.skipped_zero


def canonicalize_address(address: str) -> str | None:
    """Return the checksummed form of ``address`` or None if it is not one."""
    candidate = address.strip()
    if not candidate or not Web3.is_address(candidate):
        return None
    return Web3.to_checksum_address(candidate)


def normalize_amount(raw: str) -> str | None:
    """Strip ``$`` and grouping commas; None unless an unsigned decimal remains.

    Examples:
        >>> normalize_amount("$1,250.50")
        '1250.50'
        >>> normalize_amount("-3") is None
        True
    """
    cleaned = raw.strip()
    for char in _STRIPPED_CHARS:
        cleaned = cleaned.replace(char, "")
    cleaned = cleaned.strip()
    if not _AMOUNT_PATTERN.match(cleaned):
        return None
    return cleaned


def to_base_units(display: str, decimals: int) -> int | None:
    """Convert a normalized decimal string to integer base units.

    Returns None when the value has more fractional digits than ``decimals``
    allows, since it cannot be represented exactly.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(display) + decimals + 1)
        scaled = Decimal(display).scaleb(decimals)
        if scaled != scaled.to_integral_value():
            return None
        return int(scaled)


def find_duplicates(
    raw: Sequence[RawEntry],
    canonicalize: Callable[[str], str | None] = canonicalize_address,
) -> list[str]:
    """Canonical addresses that occur more than once, in first-repeat order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for item in raw:
        address = canonicalize(item.address)
        if address is None:
            continue
        if address in seen:
            if address not in duplicates:
                duplicates.append(address)
        else:
            seen.add(address)
    return duplicates


def validate_entries(
    raw: Sequence[RawEntry],
    *,
    decimals: int,
    mode: ValidationMode = ValidationMode.TOLERANT,
    canonicalize: Callable[[str], str | None] = canonicalize_address,
) -> ValidationReport:
    """Validate and normalize raw entries.

    Args:
        raw: Rows as loaded from input
        decimals: Base-unit exponent of the asset (18 for native currency)
        mode: STRICT raises on malformed addresses, TOLERANT counts and skips them
        canonicalize: Address canonicalizer returning None for invalid input

    Returns:
        ValidationReport with valid entries and skip counters

    Raises:
        DuplicateAddressError: If any canonical address repeats
        InvalidAddressError: Malformed address in STRICT mode
        InvalidAmountError: Malformed amount, in either mode
    """
    if decimals < 0:
        raise ValueError("decimals cannot be negative")

    duplicates = find_duplicates(raw, canonicalize)
    if duplicates:
        raise DuplicateAddressError(duplicates)

    report = ValidationReport()
    strict = mode == ValidationMode.STRICT

    for index, item in enumerate(raw):
        address = canonicalize(item.address)
        if address is None:
            if strict:
                raise InvalidAddressError(
                    f"Invalid address at index {index}: {item.address!r}",
                    value=item.address,
                    index=index,
                )
            report.skipped_invalid_address += 1
            logger.debug(f"Skipping invalid address: {item.address!r}")
            continue

        display = normalize_amount(item.amount)
        units = to_base_units(display, decimals) if display is not None else None
        # Malformed amounts are fatal in both modes
        if units is None:
            raise InvalidAmountError(
                f"Invalid amount for {address}: {item.amount!r}",
                value=item.amount,
                index=index,
            )

        if units <= 0:
            report.skipped_zero += 1
            logger.debug(f"Skipping zero amount for {address}: {display}")
            continue

        report.entries.append(Entry(address=address, amount_units=units, amount_display=display))
        logger.debug(f"{address} => {display} ({units} units)")

    return report
