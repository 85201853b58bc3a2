"""Capacity probing: find how many recipients fit in one transaction.

Exponential search followed by binary refinement over prefix lengths of the
working set. Each step issues exactly one cost estimate through the paced
retry executor, so probing costs O(log n) remote calls.

The size found for the *first* entries is applied to every chunk of the run.
Entries with heavier transfer paths later in the list can therefore still
produce a chunk over budget; the run then fails fast on that chunk.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

from ...core.config import DEFAULT_PROBE_CEILING
from ...models import Entry
from ..pacing import PacedRetryExecutor
from .definitions import CostBudget, ProbeResult
from .telemetry import log_probe_complete, log_probe_step

logger = logging.getLogger(__name__)

EstimateFn = Callable[[Sequence[Entry]], Awaitable[int]]


class CapacityProber:
    """Discovers the largest chunk size whose estimated cost fits a budget."""

    def __init__(
        self,
        executor: PacedRetryExecutor,
        estimate: EstimateFn,
        *,
        exploration_ceiling: int = DEFAULT_PROBE_CEILING,
    ) -> None:
        """Initialize capacity prober.

        Args:
            executor: Executor wrapping every estimate call
            estimate: Coroutine estimating the cost of one chunk
            exploration_ceiling: Largest chunk size ever considered
        """
        if exploration_ceiling < 1:
            raise ValueError("exploration_ceiling must be at least 1")
        self._executor = executor
        self._estimate = estimate
        self._ceiling = exploration_ceiling
        self._estimates_issued = 0

    async def probe(self, entries: Sequence[Entry], budget: CostBudget) -> ProbeResult:
        """Find the largest prefix length that stays strictly under budget.

        Args:
            entries: Working set, in submission order
            budget: Gas budget for a single chunk

        Returns:
            ProbeResult with a chunk size in [1, len(entries)]
        """
        if not entries:
            raise ValueError("Cannot probe capacity of an empty working set")

        self._estimates_issued = 0
        usable = budget.usable
        low = 1
        high = min(self._ceiling, len(entries))
        best: int | None = None

        # Exponential phase; the last step is clamped so `high` itself is tried
        test = 1
        while True:
            cost = await self._cost_of(entries, test, phase="double", usable=usable)
            if not budget.allows(cost):
                high = test
                break
            best = low = test
            if test >= high:
                break
            test = min(test * 2, high)

        # Binary refinement of the open interval (low, high)
        while high - low > 1:
            mid = (low + high) // 2
            cost = await self._cost_of(entries, mid, phase="bisect", usable=usable)
            if budget.allows(cost):
                best = low = mid
            else:
                high = mid

        result = ProbeResult(
            chunk_size=max(1, best or 0),
            estimates_issued=self._estimates_issued,
            degraded=best is None,
        )
        if result.degraded:
            logger.warning(
                "No chunk size confirmed safe, even for a single recipient; "
                "proceeding one recipient per transaction"
            )
        log_probe_complete(result=result, working_set=len(entries), usable=usable)
        return result

    async def _cost_of(
        self, entries: Sequence[Entry], count: int, *, phase: str, usable: int
    ) -> int | None:
        """Estimate the first ``count`` entries; None if the estimator failed."""
        prefix = entries[:count]
        self._estimates_issued += 1
        try:
            cost = await self._executor.call(lambda: self._estimate(prefix), label="estimate_cost")
        except Exception as e:
            logger.debug(f"Estimate unavailable for count={count}: {e}")
            cost = None
        log_probe_step(count=count, cost=cost, usable=usable, phase=phase)
        return cost
