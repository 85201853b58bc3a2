"""Session identity for checkpoint scoping."""

from __future__ import annotations

import hashlib

from pydantic import BaseModel, ConfigDict, Field

NATIVE_ASSET_ID = "native"


class SessionParams(BaseModel):
    """Parameters that identify one logical "send this batch" intent.

    Re-running with identical parameters yields the same ``session_id`` and
    therefore resumes from the same checkpoint set.
    """

    sender: str = Field(..., min_length=1)
    contract: str = Field(..., min_length=1)
    asset: str = Field(..., min_length=1)
    input_source: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def session_id(self) -> str:
        fingerprint = "|".join((self.sender, self.contract, self.asset, self.input_source))
        return hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()
