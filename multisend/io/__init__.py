"""I/O layer: remote gateway protocol and recipient input loaders."""

from .gateway import Receipt, TransferGateway
from .loaders import convert_json_to_csv, load_entries

__all__ = [
    "Receipt",
    "TransferGateway",
    "load_entries",
    "convert_json_to_csv",
]
