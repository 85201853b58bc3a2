"""Chunking layer: capacity probing, planning and submission.

Architecture:
    The chunking layer consists of:
    - definitions.py: Budget, plan and result structures
    - prober.py: Capacity probing (largest chunk size under the gas budget)
    - planners.py: Chunk planning (ordered partition of the working set)
    - executors.py: Chunk submission with checkpointing
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import ChunkPlan, ChunkReceipt, CostBudget, ProbeResult, SubmissionResult
from .executors import ChunkSubmitter
from .planners import ChunkPlanner
from .prober import CapacityProber

__all__ = [
    "CostBudget",
    "ChunkPlan",
    "ChunkReceipt",
    "ProbeResult",
    "SubmissionResult",
    "ChunkPlanner",
    "CapacityProber",
    "ChunkSubmitter",
]
