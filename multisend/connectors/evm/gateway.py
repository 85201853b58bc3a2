"""web3.py gateway for the BatchSender contract on EVM chains.

Signing is delegated to eth_account; every call translates library errors
into the RemoteError hierarchy so the executor can classify them without
knowing about web3 or aiohttp.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from ...core.enums import AssetKind
from ...core.exceptions import (
    ExecutionRevertedError,
    RateLimitError,
    RemoteError,
    TransientRemoteError,
)
from ...io.gateway import Receipt
from ...models import Entry
from .abi import BATCH_SENDER_ABI, ERC20_ABI

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "https://bsc-testnet.bnbchain.org"


@asynccontextmanager
async def translate_errors(operation: str) -> AsyncIterator[None]:
    """Map web3/aiohttp failures of ``operation`` onto RemoteError types."""
    try:
        yield
    except ContractLogicError as e:
        raise ExecutionRevertedError(f"{operation} reverted: {e}") from e
    except TimeExhausted as e:
        raise TransientRemoteError(f"{operation} timed out: {e}", operation=operation) from e
    except aiohttp.ClientResponseError as e:
        if e.status == 429:
            raise RateLimitError(
                f"{operation} rate limited: {e.message}", operation=operation
            ) from e
        raise RemoteError(
            f"{operation} failed with HTTP {e.status}: {e.message}",
            status_code=e.status,
            operation=operation,
        ) from e
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransientRemoteError(f"{operation} transport error: {e}", operation=operation) from e
    except Web3Exception as e:
        raise RemoteError(f"{operation} failed: {e}", operation=operation) from e


class EVMGateway:
    """TransferGateway backed by a JSON-RPC endpoint and a local signer."""

    def __init__(
        self,
        w3: AsyncWeb3,
        account: LocalAccount,
        batch_address: str,
        *,
        token_address: str | None = None,
        receipt_timeout: float = 300.0,
        poll_latency: float = 2.0,
    ) -> None:
        """Initialize gateway.

        Args:
            w3: Connected AsyncWeb3 instance
            account: Local account that signs transactions
            batch_address: BatchSender contract address
            token_address: ERC-20 token address (None for native sends)
            receipt_timeout: Seconds to wait for a receipt before timing out
            poll_latency: Seconds between receipt polls
        """
        self._w3 = w3
        self._account = account
        self._batch_address = AsyncWeb3.to_checksum_address(batch_address)
        self._batch = w3.eth.contract(address=self._batch_address, abi=BATCH_SENDER_ABI)
        self._token_address = (
            AsyncWeb3.to_checksum_address(token_address) if token_address else None
        )
        self._token = (
            w3.eth.contract(address=self._token_address, abi=ERC20_ABI)
            if self._token_address
            else None
        )
        self._receipt_timeout = receipt_timeout
        self._poll_latency = poll_latency

    @classmethod
    def from_rpc(
        cls,
        rpc_url: str,
        private_key: str,
        batch_address: str,
        *,
        token_address: str | None = None,
        timeout: float = 60.0,
    ) -> EVMGateway:
        """Build a gateway for ``rpc_url`` signing with ``private_key``."""
        provider = AsyncWeb3.AsyncHTTPProvider(
            rpc_url, request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)}
        )
        w3 = AsyncWeb3(provider)
        return cls(w3, Account.from_key(private_key), batch_address, token_address=token_address)

    @property
    def sender(self) -> str:
        return self._account.address

    @property
    def batch_address(self) -> str:
        return self._batch_address

    @property
    def asset(self) -> AssetKind:
        return AssetKind.TOKEN if self._token is not None else AssetKind.NATIVE

    @property
    def asset_id(self) -> str:
        return self._token_address or AssetKind.NATIVE.value

    def _require_token(self) -> Any:
        if self._token is None:
            raise ValueError("Token operation requested on a native-currency gateway")
        return self._token

    def _transfer_call(self, entries: Sequence[Entry]) -> Any:
        recipients = [entry.address for entry in entries]
        amounts = [entry.amount_units for entry in entries]
        if self._token_address is None:
            return self._batch.functions.batchTransferNative(recipients, amounts)
        return self._batch.functions.batchTransferERC20(self._token_address, recipients, amounts)

    def _tx_params(self, value: int | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {"from": self.sender}
        if value:
            params["value"] = value
        return params

    async def _sign_and_send(self, call: Any, value: int | None = None) -> str:
        params = self._tx_params(value)
        params["nonce"] = await self._w3.eth.get_transaction_count(self.sender, "pending")
        tx = await call.build_transaction(params)
        signed = self._account.sign_transaction(tx)
        tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        return self._w3.to_hex(tx_hash)

    async def close(self) -> None:
        """Release the provider's HTTP session."""
        await self._w3.provider.disconnect()

    async def cost_ceiling(self) -> int | None:
        async with translate_errors("get_block"):
            block = await self._w3.eth.get_block("latest")
        return block.get("gasLimit")

    async def estimate_cost(self, entries: Sequence[Entry], value: int | None = None) -> int:
        async with translate_errors("estimate_gas"):
            return await self._transfer_call(entries).estimate_gas(self._tx_params(value))

    async def allowance(self) -> int:
        token = self._require_token()
        async with translate_errors("token.allowance"):
            return await token.functions.allowance(self.sender, self._batch_address).call()

    async def approve(self, amount: int) -> str:
        token = self._require_token()
        async with translate_errors("token.approve"):
            return await self._sign_and_send(token.functions.approve(self._batch_address, amount))

    async def balance(self) -> int:
        async with translate_errors("get_balance"):
            return await self._w3.eth.get_balance(self.sender)

    async def decimals(self) -> int:
        token = self._require_token()
        async with translate_errors("token.decimals"):
            return int(await token.functions.decimals().call())

    async def submit_chunk(self, entries: Sequence[Entry], value: int | None = None) -> str:
        async with translate_errors("batch.submit"):
            return await self._sign_and_send(self._transfer_call(entries), value)

    async def wait_for_receipt(self, handle: str) -> Receipt:
        async with translate_errors("tx.wait"):
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                handle, timeout=self._receipt_timeout, poll_latency=self._poll_latency
            )
        logger.debug(f"Receipt {handle}: status={receipt['status']} gasUsed={receipt['gasUsed']}")
        return Receipt(
            handle=handle,
            cost_used=int(receipt["gasUsed"]),
            succeeded=receipt["status"] == 1,
        )
