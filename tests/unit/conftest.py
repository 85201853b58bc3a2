"""Shared fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from multisend.core.config import MultisendConfig
from multisend.io.gateway import Receipt
from multisend.models import Entry


class RecordingSleep:
    """Sleep replacement that records requested durations."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeGateway:
    """In-memory TransferGateway with linear cost and scripted reverts."""

    def __init__(
        self,
        *,
        ceiling: int | None = 300,
        base_cost: int = 0,
        per_entry_cost: int = 100,
        allowance: int = 0,
        balance: int = 10**30,
        decimals: int = 18,
        reverted_chunks: Sequence[int] = (),
        approve_succeeds: bool = True,
    ) -> None:
        self.ceiling = ceiling
        self.base_cost = base_cost
        self.per_entry_cost = per_entry_cost
        self.current_allowance = allowance
        self.current_balance = balance
        self.token_decimals = decimals
        self.reverted_chunks = set(reverted_chunks)
        self.approve_succeeds = approve_succeeds
        self.calls: list[str] = []
        self.approvals: list[int] = []
        self.submitted: list[list[str]] = []
        self.values: list[int | None] = []
        self._outcomes: dict[str, bool] = {}

    async def cost_ceiling(self) -> int | None:
        self.calls.append("cost_ceiling")
        return self.ceiling

    async def estimate_cost(self, entries: Sequence[Entry], value: int | None = None) -> int:
        self.calls.append("estimate_cost")
        return self.base_cost + self.per_entry_cost * len(entries)

    async def allowance(self) -> int:
        self.calls.append("allowance")
        return self.current_allowance

    async def approve(self, amount: int) -> str:
        self.calls.append("approve")
        self.approvals.append(amount)
        handle = f"0xapprove{len(self.approvals)}"
        self._outcomes[handle] = self.approve_succeeds
        if self.approve_succeeds:
            self.current_allowance = amount
        return handle

    async def balance(self) -> int:
        self.calls.append("balance")
        return self.current_balance

    async def decimals(self) -> int:
        self.calls.append("decimals")
        return self.token_decimals

    async def submit_chunk(self, entries: Sequence[Entry], value: int | None = None) -> str:
        self.calls.append("submit_chunk")
        index = len(self.submitted)
        self.submitted.append([entry.address for entry in entries])
        self.values.append(value)
        handle = f"0xtx{index}"
        self._outcomes[handle] = index not in self.reverted_chunks
        return handle

    async def wait_for_receipt(self, handle: str) -> Receipt:
        self.calls.append("wait_for_receipt")
        return Receipt(handle=handle, cost_used=21_000, succeeded=self._outcomes[handle])


@pytest.fixture
def gateway_factory():
    """Factory for FakeGateway instances."""
    return FakeGateway


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fast_config(tmp_path) -> MultisendConfig:
    """Config without pacing or pauses, checkpointing into tmp_path."""
    return MultisendConfig(
        rate_limit_interval_ms=0,
        sleep_between_tx_ms=0,
        checkpoint_file=tmp_path / "checkpoints.json",
    )
