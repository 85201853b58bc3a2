"""Runtime configuration for the batch submission engine.

Values come from the process environment (``.env`` is loaded by the CLI via
python-dotenv before :meth:`MultisendConfig.from_env` runs). Millisecond
settings keep the environment variable names operators already use; the
engine consumes the derived second-based properties.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigurationError

DEFAULT_CHECKPOINT_FILE = ".multisend-checkpoints.json"
DEFAULT_PROBE_CEILING = 512
DEFAULT_FALLBACK_GAS_LIMIT = 30_000_000

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class MultisendConfig:
    """Tunables for pacing, retries, probing and checkpointing.

    Attributes:
        max_gas_fraction: Share of the block gas limit a chunk may use (0 < f <= 1)
        rate_limit_rps: Requests per second used when no explicit interval is set
        rate_limit_interval_ms: Minimum gap between call starts (None = derive from rps)
        retry_max_attempts: Total attempts per remote call, first one included
        retry_base_ms: Initial backoff delay
        retry_max_ms: Backoff delay cap
        sleep_between_tx_ms: Pause after each confirmed chunk
        checkpoint_file: Location of the checkpoint document
        checkpoints_enabled: Whether confirmed entries are persisted and skipped
        probe_ceiling: Largest chunk size the prober will explore
        fallback_gas_limit: Gas ceiling used when the endpoint reports none
    """

    max_gas_fraction: float = 0.8
    rate_limit_rps: float = 5.0
    rate_limit_interval_ms: int | None = None
    retry_max_attempts: int = 5
    retry_base_ms: int = 500
    retry_max_ms: int = 5000
    sleep_between_tx_ms: int = 750
    checkpoint_file: Path = Path(DEFAULT_CHECKPOINT_FILE)
    checkpoints_enabled: bool = True
    probe_ceiling: int = DEFAULT_PROBE_CEILING
    fallback_gas_limit: int = DEFAULT_FALLBACK_GAS_LIMIT

    def __post_init__(self) -> None:
        """Validate configuration ranges."""
        if not 0 < self.max_gas_fraction <= 1:
            raise ConfigurationError(
                f"max_gas_fraction must be in (0, 1], got {self.max_gas_fraction}"
            )
        if self.rate_limit_rps < 0:
            raise ConfigurationError("rate_limit_rps cannot be negative")
        if self.rate_limit_interval_ms is not None and self.rate_limit_interval_ms < 0:
            raise ConfigurationError("rate_limit_interval_ms cannot be negative")
        if self.retry_max_attempts < 1:
            raise ConfigurationError("retry_max_attempts must be at least 1")
        if self.retry_base_ms < 0 or self.retry_max_ms < 0:
            raise ConfigurationError("retry delays cannot be negative")
        if self.retry_base_ms > self.retry_max_ms:
            raise ConfigurationError("retry_base_ms cannot exceed retry_max_ms")
        if self.sleep_between_tx_ms < 0:
            raise ConfigurationError("sleep_between_tx_ms cannot be negative")
        if self.probe_ceiling < 1:
            raise ConfigurationError("probe_ceiling must be at least 1")
        if self.fallback_gas_limit < 1:
            raise ConfigurationError("fallback_gas_limit must be positive")

    @property
    def pacing_interval(self) -> float:
        """Minimum seconds between call starts; 0 disables pacing."""
        if self.rate_limit_interval_ms is not None:
            return self.rate_limit_interval_ms / 1000.0
        if self.rate_limit_rps > 0:
            return (1000 // self.rate_limit_rps) / 1000.0
        return 0.0

    @property
    def retry_base_delay(self) -> float:
        return self.retry_base_ms / 1000.0

    @property
    def retry_max_delay(self) -> float:
        return self.retry_max_ms / 1000.0

    @property
    def inter_chunk_pause(self) -> float:
        return self.sleep_between_tx_ms / 1000.0

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> MultisendConfig:
        """Build a config from environment variables.

        Args:
            env: Mapping to read from (defaults to ``os.environ``)

        Returns:
            MultisendConfig with unset variables left at their defaults

        Raises:
            ConfigurationError: If a variable cannot be parsed or is out of range
        """
        env = os.environ if env is None else env
        kwargs: dict[str, object] = {}

        def read(name: str, field_name: str, parse) -> None:
            raw = env.get(name)
            if raw is None or raw.strip() == "":
                return
            try:
                kwargs[field_name] = parse(raw.strip())
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from e

        read("MAX_GAS_FRACTION", "max_gas_fraction", float)
        read("RATE_LIMIT_RPS", "rate_limit_rps", float)
        read("RATE_LIMIT_INTERVAL_MS", "rate_limit_interval_ms", int)
        read("RETRY_MAX_ATTEMPTS", "retry_max_attempts", int)
        read("RETRY_BASE_MS", "retry_base_ms", int)
        read("RETRY_MAX_MS", "retry_max_ms", int)
        read("SLEEP_BETWEEN_TX_MS", "sleep_between_tx_ms", int)
        read("CHECKPOINT_FILE", "checkpoint_file", Path)
        read("PROBE_CEILING", "probe_ceiling", int)
        read("FALLBACK_GAS_LIMIT", "fallback_gas_limit", int)

        disabled = env.get("DISABLE_CHECKPOINTS", "").strip().lower()
        if disabled in _TRUE_VALUES:
            kwargs["checkpoints_enabled"] = False

        return cls(**kwargs)
