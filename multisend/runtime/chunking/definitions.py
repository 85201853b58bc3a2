"""Chunking data structures.

This module defines the budget, plan and result records shared by the
capacity prober, the planner and the chunk submitter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ...models import Entry


@dataclass(frozen=True)
class CostBudget:
    """Gas budget a single chunk must stay under.

    Attributes:
        ceiling: Per-transaction resource ceiling (block gas limit)
        safety_fraction: Share of the ceiling a chunk may use (0 < f <= 1)
    """

    ceiling: int
    safety_fraction: float = 0.8

    def __post_init__(self) -> None:
        """Validate budget configuration."""
        if self.ceiling <= 0:
            raise ValueError("CostBudget ceiling must be positive")
        if not 0 < self.safety_fraction <= 1:
            raise ValueError("CostBudget safety_fraction must be in (0, 1]")

    @property
    def usable(self) -> int:
        """Usable budget: floor(ceiling * safety_fraction)."""
        return math.floor(self.ceiling * self.safety_fraction)

    def allows(self, cost: int | None) -> bool:
        """True if ``cost`` is known and strictly below the usable budget."""
        return cost is not None and cost < self.usable


@dataclass(frozen=True)
class ChunkPlan:
    """Plan for a single chunk.

    Attributes:
        chunk_index: Zero-based index of this chunk in the overall plan
        entries: Entries submitted together as one transaction
    """

    chunk_index: int
    entries: tuple[Entry, ...]

    @property
    def size(self) -> int:
        return len(self.entries)

    @property
    def total_units(self) -> int:
        return sum(entry.amount_units for entry in self.entries)

    @property
    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]


@dataclass(frozen=True)
class ProbeResult:
    """Result of capacity probing.

    Attributes:
        chunk_size: Largest safe prefix length found (at least 1)
        estimates_issued: Number of cost estimates requested
        degraded: True if not even one entry was confirmed to fit
    """

    chunk_size: int
    estimates_issued: int = 0
    degraded: bool = False


@dataclass(frozen=True)
class ChunkReceipt:
    """Confirmed chunk.

    Attributes:
        chunk_index: Index of the chunk in its plan
        handle: Submission handle (transaction hash)
        cost_used: Gas consumed by the chunk
        recipients: Number of entries in the chunk
        total_units: Sum of amounts transferred
        checkpointed: Whether the confirmation reached durable storage
    """

    chunk_index: int
    handle: str
    cost_used: int
    recipients: int
    total_units: int
    checkpointed: bool = True


@dataclass
class SubmissionResult:
    """Result of submitting a chunk plan.

    Attributes:
        receipts: Confirmed chunks in submission order
        authorization_handle: Handle of the approval sent for this run, if any
    """

    receipts: list[ChunkReceipt] = field(default_factory=list)
    authorization_handle: str | None = None

    @property
    def chunks_sent(self) -> int:
        return len(self.receipts)

    @property
    def recipients_sent(self) -> int:
        return sum(r.recipients for r in self.receipts)

    @property
    def total_units(self) -> int:
        return sum(r.total_units for r in self.receipts)

    @property
    def total_cost(self) -> int:
        return sum(r.cost_used for r in self.receipts)
