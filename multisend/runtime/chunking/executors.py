"""Chunk submission: send planned chunks and checkpoint each confirmation.

This module provides the ChunkSubmitter class. Per chunk it attaches the
aggregate value for native sends, submits through the paced retry executor,
waits for the receipt, records every entry key of the chunk in the checkpoint
store and flushes it before moving on.

Ordering is strict: confirm, then persist, then continue. A crash between
confirmation and persistence resubmits that chunk on the next run
(at-least-once per chunk); later runs skip every persisted key.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from time import perf_counter

from ...core.enums import AssetKind
from ...core.exceptions import (
    AuthorizationError,
    CheckpointIOError,
    ExecutionRevertedError,
    InsufficientBalanceError,
)
from ...io.gateway import TransferGateway
from ...models import Entry
from ..checkpoint import CheckpointStore
from ..pacing import PacedRetryExecutor, Sleep
from .definitions import ChunkPlan, ChunkReceipt, SubmissionResult
from .telemetry import log_chunk_completed, log_chunk_error, log_submission_complete

logger = logging.getLogger(__name__)


class ChunkSubmitter:
    """Submits chunk plans sequentially, failing fast on the first error."""

    def __init__(
        self,
        gateway: TransferGateway,
        executor: PacedRetryExecutor,
        store: CheckpointStore,
        session_id: str,
        *,
        asset: AssetKind,
        inter_chunk_pause: float = 0.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize chunk submitter.

        Args:
            gateway: Remote endpoint wrapper
            executor: Executor wrapping every remote call
            store: Checkpoint store for confirmed entry keys
            session_id: Session the confirmations belong to
            asset: Native currency or token asset
            inter_chunk_pause: Seconds to wait after each confirmed chunk
            sleep: Coroutine used for the inter-chunk pause
        """
        self._gateway = gateway
        self._executor = executor
        self._store = store
        self._session_id = session_id
        self._asset = asset
        self._pause = inter_chunk_pause
        self._sleep = sleep
        self._prepared = False
        self._authorization_handle: str | None = None

    @property
    def asset(self) -> AssetKind:
        return self._asset

    async def prepare(self, entries: Sequence[Entry], *, request: bool = True) -> str | None:
        """Make sure the whole run can be funded; runs at most once.

        Token assets get one allowance request for the total of the run if
        the current allowance is short. Native sends only verify the balance.

        Args:
            entries: Entire remaining working set
            request: False only reads the allowance and reports a shortfall

        Returns:
            Handle of the approval transaction, if one was sent

        Raises:
            AuthorizationError: If the approval transaction reverted
            InsufficientBalanceError: If the native balance cannot cover the run
        """
        if self._prepared:
            return self._authorization_handle

        total = sum(entry.amount_units for entry in entries)
        if self._asset == AssetKind.TOKEN:
            allowance = await self._executor.call(self._gateway.allowance, label="token.allowance")
            logger.info(f"Current allowance: {allowance}, required total: {total}")
            if allowance < total and not request:
                logger.warning(f"Allowance short: an approve for {total} would be sent")
                return None
            if allowance < total:
                logger.info(f"Sending approve for {total}")
                handle = await self._executor.call(
                    lambda: self._gateway.approve(total), label="token.approve"
                )
                receipt = await self._executor.call(
                    lambda: self._gateway.wait_for_receipt(handle), label="tx.wait"
                )
                if not receipt.succeeded:
                    raise AuthorizationError(f"Approve transaction {handle} reverted")
                logger.info(f"Approve confirmed: {handle}")
                self._authorization_handle = handle
            else:
                logger.info("Sufficient allowance exists, skipping approve")
        else:
            balance = await self._executor.call(self._gateway.balance, label="balance")
            logger.info(f"Native balance: {balance}, required total: {total}")
            if balance < total:
                raise InsufficientBalanceError(
                    f"Insufficient native balance. Required: {total}, Available: {balance}",
                    required=total,
                    available=balance,
                )

        self._prepared = True
        return self._authorization_handle

    def attached_value(self, entries: Sequence[Entry]) -> int | None:
        """Value to attach to a chunk: the aggregate for native sends only."""
        if self._asset == AssetKind.NATIVE:
            return sum(entry.amount_units for entry in entries)
        return None

    async def estimate_chunk_cost(self, entries: Sequence[Entry]) -> int:
        """Estimate the cost of sending ``entries`` as one chunk."""
        return await self._gateway.estimate_cost(entries, self.attached_value(entries))

    async def submit(self, plans: Sequence[ChunkPlan]) -> SubmissionResult:
        """Submit every chunk in order.

        Args:
            plans: Chunk plans covering the working set

        Returns:
            SubmissionResult with one receipt per confirmed chunk

        Raises:
            ExecutionRevertedError: If a chunk transaction reverted
            Exception: Any remote error that survived the executor's retries
        """
        if not plans:
            raise ValueError("Cannot submit: no chunk plans provided")

        result = SubmissionResult(authorization_handle=self._authorization_handle)
        total_chunks = len(plans)

        for position, plan in enumerate(plans):
            logger.info(
                f"Chunk {plan.chunk_index + 1}/{total_chunks} "
                f"recipients={plan.size} total={plan.total_units}"
            )
            logger.debug(f"Addresses: {', '.join(e.address for e in plan.entries)}")
            chunk_start = perf_counter()
            try:
                receipt = await self._send(plan)
            except Exception as e:
                log_chunk_error(
                    chunk_index=plan.chunk_index,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise

            result.receipts.append(receipt)
            log_chunk_completed(
                receipt=receipt,
                total_chunks=total_chunks,
                latency_ms=(perf_counter() - chunk_start) * 1000.0,
            )

            if self._pause > 0 and position < total_chunks - 1:
                logger.debug(f"Sleeping {self._pause:.3f}s before next chunk")
                await self._sleep(self._pause)

        log_submission_complete(result=result)
        return result

    async def _send(self, plan: ChunkPlan) -> ChunkReceipt:
        """Submit one chunk, wait for it and persist its keys."""
        value = self.attached_value(plan.entries)
        handle = await self._executor.call(
            lambda: self._gateway.submit_chunk(plan.entries, value), label="batch.submit"
        )
        logger.info(f"Submitted tx: {handle}")
        receipt = await self._executor.call(
            lambda: self._gateway.wait_for_receipt(handle), label="tx.wait"
        )
        if not receipt.succeeded:
            raise ExecutionRevertedError(
                f"Chunk {plan.chunk_index + 1} transaction {handle} reverted", handle=handle
            )

        checkpointed = True
        try:
            added = self._store.record(self._session_id, plan.keys)
            logger.debug(f"Checkpoint updated ({added} new)")
        except CheckpointIOError as e:
            checkpointed = False
            logger.warning(f"{e}; continuing without durable resumption for this chunk")

        return ChunkReceipt(
            chunk_index=plan.chunk_index,
            handle=handle,
            cost_used=receipt.cost_used,
            recipients=plan.size,
            total_units=plan.total_units,
            checkpointed=checkpointed and self._store.enabled,
        )
