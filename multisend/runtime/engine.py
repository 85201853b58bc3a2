"""Batch submission engine.

Runs one session end to end:

    validate → filter confirmed → fund (allowance / balance) → probe → plan → submit

Validation and resumption issue no remote calls, so a fully confirmed
session fails with NoRemainingEntriesError before touching the endpoint.
Funding runs before probing because token transfer estimates revert until
the batch contract holds an allowance.

The same engine serves the CLI and any other driver; it never prints.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..core.config import MultisendConfig
from ..core.enums import AssetKind, ValidationMode
from ..core.validation import ValidationReport, validate_entries
from ..io.gateway import TransferGateway
from ..models import Entry, RawEntry, SessionParams
from .checkpoint import CheckpointStore
from .chunking import (
    CapacityProber,
    ChunkPlan,
    ChunkPlanner,
    ChunkSubmitter,
    CostBudget,
    ProbeResult,
    SubmissionResult,
)
from .pacing import PacedRetryExecutor, RateLimiter, RetryPolicy, Sleep
from .resumption import filter_confirmed

logger = logging.getLogger(__name__)

NATIVE_DECIMALS = 18
DEFAULT_TOKEN_DECIMALS = 18


@dataclass
class RunReport:
    """Everything a driver needs to report on a run.

    Attributes:
        session_id: Checkpoint session of the run
        validation: Validator output and skip counters
        skipped_confirmed: Entries skipped as already sent in this session
        entries: Working set after resumption
        budget: Gas budget used for probing
        probe: Probed chunk size
        plans: Chunk plan covering ``entries``
        submission: Submission outcome (None for dry runs)
    """

    session_id: str
    validation: ValidationReport
    skipped_confirmed: int
    entries: list[Entry]
    budget: CostBudget
    probe: ProbeResult
    plans: list[ChunkPlan] = field(default_factory=list)
    submission: SubmissionResult | None = None

    @property
    def dry_run(self) -> bool:
        return self.submission is None

    @property
    def total_units(self) -> int:
        return sum(entry.amount_units for entry in self.entries)


def build_executor(config: MultisendConfig, *, sleep: Sleep = asyncio.sleep) -> PacedRetryExecutor:
    """Executor configured from pacing and retry settings."""
    return PacedRetryExecutor(
        RateLimiter(config.pacing_interval, sleep=sleep),
        RetryPolicy(
            max_attempts=config.retry_max_attempts,
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
        ),
        sleep=sleep,
    )


class BatchSendEngine:
    """Orchestrates validation, resumption, probing and submission."""

    def __init__(
        self,
        gateway: TransferGateway,
        *,
        asset: AssetKind,
        config: MultisendConfig | None = None,
        store: CheckpointStore | None = None,
        executor: PacedRetryExecutor | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize engine.

        Args:
            gateway: Remote endpoint wrapper
            asset: Native currency or token asset
            config: Engine configuration (defaults to MultisendConfig())
            store: Checkpoint store (defaults to one built from config)
            executor: Paced retry executor (defaults to one built from config)
            sleep: Coroutine used for all waits
        """
        self._gateway = gateway
        self._asset = asset
        self._config = config or MultisendConfig()
        self._store = store or CheckpointStore(
            self._config.checkpoint_file, enabled=self._config.checkpoints_enabled
        )
        self._executor = executor or build_executor(self._config, sleep=sleep)
        self._sleep = sleep

    @property
    def executor(self) -> PacedRetryExecutor:
        return self._executor

    @property
    def store(self) -> CheckpointStore:
        return self._store

    async def resolve_decimals(self, override: int | None = None) -> int:
        """Decimals used to convert display amounts into base units.

        Args:
            override: Explicit decimals (takes precedence for token assets)

        Returns:
            18 for native sends; otherwise the override, the token's own
            decimals, or 18 if the token does not expose them
        """
        if self._asset == AssetKind.NATIVE:
            return NATIVE_DECIMALS
        if override is not None:
            return override
        try:
            return int(await self._executor.call(self._gateway.decimals, label="token.decimals"))
        except Exception as e:
            logger.warning(
                f"Token decimals() not available ({e}); defaulting to {DEFAULT_TOKEN_DECIMALS}. "
                "Set DECIMALS to override."
            )
            return DEFAULT_TOKEN_DECIMALS

    async def run(
        self,
        raw: Sequence[RawEntry],
        session: SessionParams,
        *,
        decimals: int,
        mode: ValidationMode = ValidationMode.TOLERANT,
        dry_run: bool = False,
    ) -> RunReport:
        """Run one session.

        Args:
            raw: Recipient rows as loaded from input
            session: Session identity for checkpoint scoping
            decimals: Base-unit exponent of the asset
            mode: Validation mode for malformed addresses
            dry_run: Stop after planning; nothing is approved or submitted

        Returns:
            RunReport describing the run

        Raises:
            InvalidInputError: Malformed/duplicate input or nothing left to send
            FatalRemoteError: Authorization, balance or execution failure
            Exception: Remote errors that survived every retry
        """
        session_id = session.session_id
        logger.info(f"Loaded {len(raw)} entries (session {session_id[:12]})")

        validation = validate_entries(raw, decimals=decimals, mode=mode)

        self._store.load()
        resumption = filter_confirmed(validation.entries, self._store.confirmed(session_id))
        entries = resumption.entries
        logger.info(
            f"Valid recipients: {len(entries)}, "
            f"skipped invalid address: {validation.skipped_invalid_address}, "
            f"skipped zero: {validation.skipped_zero}, "
            f"already sent skipped: {resumption.skipped_confirmed}"
        )

        submitter = ChunkSubmitter(
            self._gateway,
            self._executor,
            self._store,
            session_id,
            asset=self._asset,
            inter_chunk_pause=self._config.inter_chunk_pause,
            sleep=self._sleep,
        )
        await submitter.prepare(entries, request=not dry_run)

        budget = await self._budget()
        prober = CapacityProber(
            self._executor,
            submitter.estimate_chunk_cost,
            exploration_ceiling=self._config.probe_ceiling,
        )
        probe = await prober.probe(entries, budget)
        logger.info(f"Using chunk size: {probe.chunk_size} (recipients per tx)")

        plans = ChunkPlanner(probe.chunk_size).plan(entries)
        report = RunReport(
            session_id=session_id,
            validation=validation,
            skipped_confirmed=resumption.skipped_confirmed,
            entries=entries,
            budget=budget,
            probe=probe,
            plans=plans,
        )
        if dry_run:
            logger.info(f"Dry run: {len(plans)} chunks planned, nothing submitted")
            return report

        report.submission = await submitter.submit(plans)
        logger.info(
            f"All chunks sent successfully. chunks={report.submission.chunks_sent} "
            f"recipients={report.submission.recipients_sent} total={report.submission.total_units}"
        )
        return report

    async def _budget(self) -> CostBudget:
        ceiling = await self._executor.call(self._gateway.cost_ceiling, label="cost_ceiling")
        if not ceiling:
            logger.warning(
                f"Endpoint reported no gas ceiling; using {self._config.fallback_gas_limit}"
            )
            ceiling = self._config.fallback_gas_limit
        budget = CostBudget(ceiling=int(ceiling), safety_fraction=self._config.max_gas_fraction)
        logger.info(
            f"blockGasLimit={budget.ceiling} "
            f"gasBudget(frac={budget.safety_fraction})={budget.usable}"
        )
        return budget
