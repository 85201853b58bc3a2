"""Core enumerations shared across the batch submission engine.

Key Types:
    - AssetKind: Native currency vs token-style asset
    - ValidationMode: How malformed input entries are handled
    - ErrorClass: Retry classification for remote failures
"""

from __future__ import annotations

from enum import Enum


class AssetKind(str, Enum):
    """Kind of asset being distributed.

    Native sends attach the chunk total as transaction value; token sends
    require a one-time allowance for the batch contract instead.
    """

    NATIVE = "native"
    TOKEN = "token"


class ValidationMode(str, Enum):
    """Handling of entries whose address or amount cannot be normalized."""

    STRICT = "strict"  # raise on the first malformed entry
    TOLERANT = "tolerant"  # count and skip malformed entries


class ErrorClass(str, Enum):
    """Outcome of classifying a failed remote call."""

    RATE_LIMITED = "rate_limited"
    TRANSIENT = "transient"
    FATAL = "fatal"

    @property
    def retryable(self) -> bool:
        """Whether the executor may issue another attempt."""
        return self is not ErrorClass.FATAL
