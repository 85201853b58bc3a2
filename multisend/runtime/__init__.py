"""Runtime: pacing, resumption, checkpointing, chunking and the engine."""

from .checkpoint import CheckpointStore
from .engine import BatchSendEngine, RunReport, build_executor
from .pacing import PacedRetryExecutor, RateLimiter, RetryPolicy, classify
from .resumption import ResumptionResult, filter_confirmed

__all__ = [
    "BatchSendEngine",
    "RunReport",
    "build_executor",
    "CheckpointStore",
    "PacedRetryExecutor",
    "RateLimiter",
    "RetryPolicy",
    "classify",
    "ResumptionResult",
    "filter_confirmed",
]
