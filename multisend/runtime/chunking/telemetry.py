"""Structured logging for chunking operations.

This module provides telemetry hooks for probing and submission, emitting
structured log records (event name as message, fields in ``extra``).
"""

from __future__ import annotations

import logging

from .definitions import ChunkReceipt, ProbeResult, SubmissionResult

logger = logging.getLogger(__name__)


def log_probe_step(*, count: int, cost: int | None, usable: int, phase: str) -> None:
    """Log one capacity estimate.

    Args:
        count: Number of leading entries estimated
        cost: Estimated cost (None if unavailable)
        usable: Usable budget the cost is compared to
        phase: "double" or "bisect"
    """
    logger.debug(
        "probe_estimate",
        extra={
            "count": count,
            "cost": cost,
            "usable_budget": usable,
            "fits": cost is not None and cost < usable,
            "phase": phase,
        },
    )


def log_probe_complete(*, result: ProbeResult, working_set: int, usable: int) -> None:
    """Log the outcome of capacity probing."""
    level = logging.WARNING if result.degraded else logging.INFO
    logger.log(
        level,
        "probe_complete",
        extra={
            "chunk_size": result.chunk_size,
            "estimates_issued": result.estimates_issued,
            "degraded": result.degraded,
            "working_set": working_set,
            "usable_budget": usable,
        },
    )


def log_chunk_plan(*, total_chunks: int, chunk_size: int, total_entries: int) -> None:
    """Log chunk plan creation.

    Args:
        total_chunks: Total number of chunks planned
        chunk_size: Maximum entries per chunk
        total_entries: Entries covered by the plan
    """
    logger.info(
        "chunk_plan_created",
        extra={
            "total_chunks": total_chunks,
            "chunk_size": chunk_size,
            "total_entries": total_entries,
        },
    )


def log_chunk_completed(
    *, receipt: ChunkReceipt, total_chunks: int, latency_ms: float | None = None
) -> None:
    """Log confirmation of a single chunk.

    Args:
        receipt: Confirmed chunk
        total_chunks: Number of chunks in the plan
        latency_ms: Submit-to-confirmation latency in milliseconds (optional)
    """
    logger.info(
        "chunk_completed",
        extra={
            "chunk_index": receipt.chunk_index,
            "total_chunks": total_chunks,
            "handle": receipt.handle,
            "recipients": receipt.recipients,
            "total_units": receipt.total_units,
            "cost_used": receipt.cost_used,
            "checkpointed": receipt.checkpointed,
            "latency_ms": latency_ms,
        },
    )


def log_submission_complete(*, result: SubmissionResult) -> None:
    """Log completion of the whole submission."""
    logger.info(
        "submission_complete",
        extra={
            "chunks_sent": result.chunks_sent,
            "recipients_sent": result.recipients_sent,
            "total_units": result.total_units,
            "total_cost": result.total_cost,
        },
    )


def log_chunk_error(*, chunk_index: int, error_type: str, error_message: str) -> None:
    """Log chunk submission error.

    Args:
        chunk_index: Zero-based index of the chunk that failed
        error_type: Exception class name
        error_message: Error message
    """
    logger.error(
        "chunk_error",
        extra={
            "chunk_index": chunk_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
