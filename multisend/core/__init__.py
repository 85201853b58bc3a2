"""Core components."""

from .config import MultisendConfig
from .enums import AssetKind, ErrorClass, ValidationMode
from .exceptions import (
    AuthorizationError,
    CheckpointIOError,
    ConfigurationError,
    DuplicateAddressError,
    ExecutionRevertedError,
    FatalRemoteError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidInputError,
    MultisendError,
    NoRemainingEntriesError,
    RateLimitError,
    RemoteError,
    TransientRemoteError,
)
from .validation import ValidationReport, validate_entries

__all__ = [
    "MultisendConfig",
    "AssetKind",
    "ErrorClass",
    "ValidationMode",
    "MultisendError",
    "ConfigurationError",
    "InvalidInputError",
    "InvalidAddressError",
    "InvalidAmountError",
    "DuplicateAddressError",
    "NoRemainingEntriesError",
    "RemoteError",
    "RateLimitError",
    "TransientRemoteError",
    "FatalRemoteError",
    "AuthorizationError",
    "InsufficientBalanceError",
    "ExecutionRevertedError",
    "CheckpointIOError",
    "ValidationReport",
    "validate_entries",
]
