"""Resumption filter: drop entries a previous run already confirmed."""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field

from ..core.exceptions import NoRemainingEntriesError
from ..models import Entry

logger = logging.getLogger(__name__)


@dataclass
class ResumptionResult:
    """Working set left after resumption.

    Attributes:
        entries: Entries still to send, original order preserved
        skipped_confirmed: Entries skipped because their key is confirmed
    """

    entries: list[Entry] = field(default_factory=list)
    skipped_confirmed: int = 0


def filter_confirmed(entries: Sequence[Entry], confirmed: Collection[str]) -> ResumptionResult:
    """Remove entries whose key is already confirmed.

    Args:
        entries: Validated entries
        confirmed: Confirmed entry keys of the current session

    Returns:
        ResumptionResult with the remaining working set

    Raises:
        NoRemainingEntriesError: If no entry is left to send
    """
    result = ResumptionResult()
    for entry in entries:
        if entry.key in confirmed:
            result.skipped_confirmed += 1
            logger.debug(f"Skipping already-sent entry: {entry.address} {entry.amount_display}")
            continue
        result.entries.append(entry)

    if not result.entries:
        raise NoRemainingEntriesError(
            f"No valid recipients/amounts remaining "
            f"({result.skipped_confirmed} already confirmed in this session)",
            skipped_confirmed=result.skipped_confirmed,
        )
    return result
