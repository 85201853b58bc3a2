"""Chunk planning: split a working set into ordered chunks."""

from __future__ import annotations

from collections.abc import Sequence

from ...models import Entry
from .definitions import ChunkPlan
from .telemetry import log_chunk_plan


class ChunkPlanner:
    """Partitions entries into contiguous chunks of at most ``max_entries``.

    The plan covers every entry exactly once and keeps the original order.
    """

    def __init__(self, max_entries: int) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def plan(self, entries: Sequence[Entry]) -> list[ChunkPlan]:
        """Plan chunks for ``entries``.

        Args:
            entries: Filtered working set

        Returns:
            List of chunk plans (empty for an empty working set)
        """
        plans = [
            ChunkPlan(chunk_index=index, entries=tuple(entries[start : start + self._max_entries]))
            for index, start in enumerate(range(0, len(entries), self._max_entries))
        ]
        log_chunk_plan(
            total_chunks=len(plans),
            chunk_size=self._max_entries,
            total_entries=len(entries),
        )
        return plans
