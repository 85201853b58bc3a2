"""Gateway implementations for concrete chains."""

from .evm import EVMGateway

__all__ = ["EVMGateway"]
