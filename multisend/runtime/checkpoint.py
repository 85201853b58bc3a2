"""Durable record of confirmed entry keys per session.

The document is a JSON object keyed by session id::

    {"<session id>": {"sentKeys": ["0xAbC...|100", ...]}}

It is read in full once at startup and rewritten in full after every
confirmed chunk. Writes go to a sibling temp file that replaces the target,
so a crash never leaves a truncated document behind. Within a session the key
set only grows.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..core.exceptions import CheckpointIOError

logger = logging.getLogger(__name__)

SENT_KEYS_FIELD = "sentKeys"


class CheckpointStore:
    """Whole-file JSON checkpoint store.

    A disabled store never touches the filesystem: it reports no confirmed
    keys and ignores records.
    """

    def __init__(self, path: str | Path, *, enabled: bool = True) -> None:
        self._path = Path(path)
        self._enabled = enabled
        self._document: dict[str, Any] = {}
        # Insertion-ordered per session; dict keys double as an ordered set
        self._sessions: dict[str, dict[str, None]] = {}

    @property
    def path(self) -> Path:
        return self._path

    @property
    def enabled(self) -> bool:
        return self._enabled

    def load(self) -> None:
        """Read the checkpoint document; unreadable files start fresh."""
        self._document = {}
        self._sessions = {}
        if not self._enabled or not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8")) or {}
            if not isinstance(data, dict):
                raise ValueError("checkpoint document must be an object")
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read checkpoint {self._path}, starting fresh: {e}")
            return
        self._document = data
        for session_id, record in data.items():
            keys = record.get(SENT_KEYS_FIELD, []) if isinstance(record, dict) else None
            if not isinstance(keys, list):
                logger.warning(
                    f"Ignoring malformed checkpoint session {session_id} in {self._path}"
                )
                keys = []
            self._sessions[session_id] = dict.fromkeys(str(k) for k in keys)
        logger.info(
            "checkpoint_loaded",
            extra={"path": str(self._path), "sessions": len(self._sessions)},
        )

    def confirmed(self, session_id: str) -> frozenset[str]:
        """Keys already confirmed for ``session_id``."""
        if not self._enabled:
            return frozenset()
        return frozenset(self._sessions.get(session_id, ()))

    def record(self, session_id: str, keys: Iterable[str]) -> int:
        """Add confirmed keys and flush the whole document.

        The in-memory set is updated before the write, so a failed flush still
        keeps later chunks of this run from being resubmitted.

        Args:
            session_id: Session the keys belong to
            keys: Entry keys confirmed on-chain

        Returns:
            Number of keys that were not already recorded

        Raises:
            CheckpointIOError: If the document cannot be written
        """
        if not self._enabled:
            return 0
        sent = self._sessions.setdefault(session_id, {})
        added = 0
        for key in keys:
            if key not in sent:
                sent[key] = None
                added += 1
        self._document[session_id] = {SENT_KEYS_FIELD: list(sent)}
        self.flush()
        return added

    def flush(self) -> None:
        """Atomically rewrite the checkpoint document."""
        if not self._enabled:
            return
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(self._document, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise CheckpointIOError(
                f"Failed to write checkpoint {self._path}: {e}", path=str(self._path)
            ) from e
