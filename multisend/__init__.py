"""Multisend - gas-aware batch transfers through a BatchSender contract."""

from .connectors.evm import EVMGateway
from .core import (
    AssetKind,
    AuthorizationError,
    CheckpointIOError,
    ConfigurationError,
    DuplicateAddressError,
    ErrorClass,
    ExecutionRevertedError,
    FatalRemoteError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidInputError,
    MultisendConfig,
    MultisendError,
    NoRemainingEntriesError,
    RateLimitError,
    RemoteError,
    TransientRemoteError,
    ValidationMode,
    ValidationReport,
    validate_entries,
)
from .io import Receipt, TransferGateway, convert_json_to_csv, load_entries
from .models import Entry, RawEntry, SessionParams
from .runtime import (
    BatchSendEngine,
    CheckpointStore,
    PacedRetryExecutor,
    RateLimiter,
    RetryPolicy,
    RunReport,
    classify,
    filter_confirmed,
)
from .runtime.chunking import (
    CapacityProber,
    ChunkPlan,
    ChunkPlanner,
    ChunkSubmitter,
    CostBudget,
    ProbeResult,
    SubmissionResult,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "BatchSendEngine",
    "RunReport",
    "MultisendConfig",
    # Models
    "Entry",
    "RawEntry",
    "SessionParams",
    # Enums
    "AssetKind",
    "ErrorClass",
    "ValidationMode",
    # Validation / resumption
    "ValidationReport",
    "validate_entries",
    "filter_confirmed",
    # Pacing
    "PacedRetryExecutor",
    "RateLimiter",
    "RetryPolicy",
    "classify",
    # Chunking
    "CapacityProber",
    "ChunkPlan",
    "ChunkPlanner",
    "ChunkSubmitter",
    "CostBudget",
    "ProbeResult",
    "SubmissionResult",
    # Persistence / IO
    "CheckpointStore",
    "Receipt",
    "TransferGateway",
    "load_entries",
    "convert_json_to_csv",
    # Connectors
    "EVMGateway",
    # Exceptions
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
]
