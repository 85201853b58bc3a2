"""Gateway protocol toward the remote execution endpoint.

The engine never signs, encodes or transports anything itself. It talks to a
gateway that wraps one remote endpoint and one batch contract, and wraps every
gateway call in the paced retry executor.

Gateways should raise :class:`~multisend.core.exceptions.RemoteError`
subclasses for endpoint failures and
:class:`~multisend.core.exceptions.FatalRemoteError` subclasses for failures
that retrying cannot fix.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from ..models import Entry


@dataclass(frozen=True)
class Receipt:
    """Terminal outcome of a submitted transaction.

    Attributes:
        handle: Submission handle (transaction hash)
        cost_used: Gas consumed
        succeeded: False if the transaction executed but reverted
    """

    handle: str
    cost_used: int
    succeeded: bool = True


class TransferGateway(Protocol):
    """Remote operations the batch submission engine depends on.

    Chunk transfers are all-or-nothing: a chunk either executes for every
    recipient or for none.
    """

    async def cost_ceiling(self) -> int | None:
        """Current per-transaction gas ceiling (block gas limit), if known."""
        ...

    async def estimate_cost(self, entries: Sequence[Entry], value: int | None = None) -> int:
        """Estimate gas for transferring ``entries`` as one chunk. Side-effect free."""
        ...

    async def allowance(self) -> int:
        """Token allowance currently granted to the batch contract."""
        ...

    async def approve(self, amount: int) -> str:
        """Request an allowance of exactly ``amount``; returns the handle."""
        ...

    async def balance(self) -> int:
        """Native balance of the sender."""
        ...

    async def decimals(self) -> int:
        """Token decimals."""
        ...

    async def submit_chunk(self, entries: Sequence[Entry], value: int | None = None) -> str:
        """Submit one chunk transfer; ``value`` is attached for native sends."""
        ...

    async def wait_for_receipt(self, handle: str) -> Receipt:
        """Block until the submission identified by ``handle`` is final."""
        ...
