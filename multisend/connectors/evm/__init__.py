"""EVM connector: BatchSender contract over JSON-RPC."""

from .abi import BATCH_SENDER_ABI, ERC20_ABI
from .gateway import DEFAULT_RPC_URL, EVMGateway, translate_errors

__all__ = [
    "EVMGateway",
    "translate_errors",
    "DEFAULT_RPC_URL",
    "BATCH_SENDER_ABI",
    "ERC20_ABI",
]
