"""Custom exception hierarchy."""

from __future__ import annotations


class MultisendError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigurationError(MultisendError):
    """Configuration value is missing or out of range."""

    pass


class InvalidInputError(MultisendError):
    """Recipient input is unusable. Always fatal to the run, never retried."""

    pass


class InvalidAddressError(InvalidInputError):
    """Address cannot be canonicalized."""

    def __init__(self, message: str, value: str | None = None, index: int | None = None) -> None:
        super().__init__(message)
        self.value = value
        self.index = index


class InvalidAmountError(InvalidInputError):
    """Amount is not an unsigned decimal representable in base units."""

    def __init__(self, message: str, value: str | None = None, index: int | None = None) -> None:
        super().__init__(message)
        self.value = value
        self.index = index


class DuplicateAddressError(InvalidInputError):
    """The same canonical address appears more than once in the input."""

    def __init__(self, duplicates: list[str]) -> None:
        super().__init__(
            f"Duplicate recipient addresses found in input: {', '.join(duplicates)}"
        )
        self.duplicates = duplicates


class NoRemainingEntriesError(InvalidInputError):
    """Nothing is left to submit after validation and resumption."""

    def __init__(self, message: str, skipped_confirmed: int = 0) -> None:
        super().__init__(message)
        self.skipped_confirmed = skipped_confirmed


class RemoteError(MultisendError):
    """Structured failure of a remote call.

    Connectors translate library-specific exceptions into this shape so that
    retry classification only looks at ``status_code`` and the message.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.operation = operation


class RateLimitError(RemoteError):
    """Remote endpoint rate limit exceeded."""

    def __init__(
        self, message: str, retry_after: float | None = None, operation: str | None = None
    ) -> None:
        super().__init__(message, status_code=429, operation=operation)
        self.retry_after = retry_after


class TransientRemoteError(RemoteError):
    """Timeout or dropped connection; safe to retry."""

    pass


class FatalRemoteError(MultisendError):
    """Remote failure that must abort the run without retrying."""

    pass


class AuthorizationError(FatalRemoteError):
    """Token allowance could not be granted to the batch contract."""

    pass


class InsufficientBalanceError(FatalRemoteError):
    """Sender cannot cover the total amount of the run."""

    def __init__(self, message: str, required: int, available: int) -> None:
        super().__init__(message)
        self.required = required
        self.available = available


class ExecutionRevertedError(FatalRemoteError):
    """Submitted transaction executed but reverted."""

    def __init__(self, message: str, handle: str | None = None) -> None:
        super().__init__(message)
        self.handle = handle


class CheckpointIOError(MultisendError):
    """Checkpoint file could not be written."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
