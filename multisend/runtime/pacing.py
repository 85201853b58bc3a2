"""Request pacing and retry for remote calls.

Every remote call of a run (estimates, allowance reads, approvals,
submissions, receipt waits) goes through one :class:`PacedRetryExecutor`:

- Pacing: a :class:`RateLimiter` enforces a minimum gap between the *starts*
  of consecutive calls. The limiter is an explicit object shared by the
  executor, not module state.
- Retry: failures are classified by :func:`classify`. Fatal errors propagate
  at once; rate-limited and transient ones are retried with exponential
  backoff plus up to 20% positive jitter until the attempt ceiling is hit,
  after which the last error is re-raised unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import random
import re
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ..core.enums import ErrorClass
from ..core.exceptions import FatalRemoteError, InvalidInputError, RemoteError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

RATE_LIMIT_STATUS = 429
_RATE_LIMIT_PATTERN = re.compile(r"429|rate limit|too many requests", re.IGNORECASE)


def classify(error: BaseException) -> ErrorClass:
    """Classify a failed remote call for retry purposes.

    Args:
        error: Exception raised by the remote operation

    Returns:
        FATAL for errors that must not be retried, RATE_LIMITED for explicit
        or message-level rate limiting, TRANSIENT for everything else
    """
    if isinstance(error, (FatalRemoteError, InvalidInputError)):
        return ErrorClass.FATAL
    status = error.status_code if isinstance(error, RemoteError) else getattr(error, "status", None)
    if status == RATE_LIMIT_STATUS or _RATE_LIMIT_PATTERN.search(str(error)):
        return ErrorClass.RATE_LIMITED
    return ErrorClass.TRANSIENT


class RateLimiter:
    """Minimum-interval pacer shared by every call of an executor.

    An interval of 0 (or None) disables pacing.
    """

    def __init__(
        self,
        interval: float | None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._interval = interval or 0.0
        self._clock = clock
        self._sleep = sleep
        self._last_call_at: float | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def enabled(self) -> bool:
        return self._interval > 0

    async def acquire(self) -> float:
        """Wait until the next call may start and mark it as started.

        Returns:
            Seconds spent waiting
        """
        if not self.enabled:
            return 0.0
        waited = 0.0
        if self._last_call_at is not None:
            wait = self._last_call_at + self._interval - self._clock()
            if wait > 0:
                await self._sleep(wait)
                waited = wait
        self._last_call_at = self._clock()
        return waited


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt ceiling and backoff shape.

    Attributes:
        max_attempts: Total attempts including the first one
        base_delay: First backoff delay in seconds
        max_delay: Cap for backoff delays in seconds
        jitter: Maximum positive jitter as a fraction of the delay
    """

    max_attempts: int = 5
    base_delay: float = 0.5
    max_delay: float = 5.0
    jitter: float = 0.2

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays cannot be negative")
        if not 0 <= self.jitter <= 1:
            raise ValueError("jitter must be within [0, 1]")

    def next_delay(self, delay: float) -> float:
        """Backoff delay that follows ``delay``: doubled, capped."""
        return min(delay * 2, self.max_delay)

    def wait_for(self, delay: float, rng: random.Random) -> float:
        """Jittered wait for the current ``delay``, capped at ``max_delay``."""
        return min(delay + rng.uniform(0, delay * self.jitter), self.max_delay)


class PacedRetryExecutor:
    """Runs remote operations with pacing and exponential-backoff retry."""

    def __init__(
        self,
        limiter: RateLimiter | None = None,
        policy: RetryPolicy | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            limiter: Shared pacer (None disables pacing)
            policy: Retry policy (defaults to RetryPolicy())
            sleep: Coroutine used for backoff waits
            rng: Random source for jitter
        """
        self._limiter = limiter or RateLimiter(None)
        self._policy = policy or RetryPolicy()
        self._sleep = sleep
        self._rng = rng or random.Random()
        self.calls_started = 0
        self.retries = 0

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def call(self, operation: Callable[[], Awaitable[T]], *, label: str = "rpc") -> T:
        """Run ``operation`` until it succeeds or retries are exhausted.

        Args:
            operation: Zero-argument coroutine factory, invoked once per attempt
            label: Name used in log messages

        Returns:
            Result of the first successful attempt

        Raises:
            Exception: The last underlying error, unchanged, once it is fatal
                or the attempt ceiling is reached
        """
        attempt = 0
        delay = self._policy.base_delay
        while True:
            await self._limiter.acquire()
            self.calls_started += 1
            try:
                return await operation()
            except Exception as e:
                attempt += 1
                error_class = classify(e)
                if not error_class.retryable or attempt >= self._policy.max_attempts:
                    logger.debug(
                        f"{label} giving up after attempt {attempt} ({error_class.value}): {e}"
                    )
                    raise
                wait = self._policy.wait_for(delay, self._rng)
                logger.warning(
                    f"{label} attempt {attempt}/{self._policy.max_attempts} failed "
                    f"({error_class.value}): waiting {wait:.3f}s",
                    extra={"label": label, "attempt": attempt, "error_class": error_class.value},
                )
                self.retries += 1
                await self._sleep(wait)
                delay = self._policy.next_delay(delay)
