"""Data models."""

from .entry import KEY_SEPARATOR, Entry, RawEntry, entry_key
from .session import NATIVE_ASSET_ID, SessionParams

__all__ = [
    "Entry",
    "RawEntry",
    "entry_key",
    "KEY_SEPARATOR",
    "SessionParams",
    "NATIVE_ASSET_ID",
]
