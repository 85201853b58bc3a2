"""Recipient entry models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

KEY_SEPARATOR = "|"


def entry_key(address: str, amount_display: str) -> str:
    """Idempotence key for one (address, amount) transfer instruction."""
    return f"{address}{KEY_SEPARATOR}{amount_display}"


class RawEntry(BaseModel):
    """Recipient row exactly as loaded from input, before validation."""

    address: str = ""
    amount: str = ""

    model_config = ConfigDict(frozen=True)


class Entry(BaseModel):
    """Validated transfer instruction.

    ``amount_units`` is the amount in base units (wei or token units);
    ``amount_display`` keeps the normalized decimal string it came from and
    takes part in the entry key.
    """

    address: str = Field(..., min_length=1)
    amount_units: int = Field(..., gt=0)
    amount_display: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return entry_key(self.address, self.amount_display)
