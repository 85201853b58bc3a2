"""Recipient input loaders.

Supported formats:
    - ``.json``: array of objects with ``address`` (or ``addr`` / ``to``) and
      ``amount`` (or ``value``)
    - ``.csv``: ``address,amount`` rows with an optional header row; amounts
      containing grouping commas must be quoted

Loaders only split input into :class:`~multisend.models.RawEntry` rows;
normalization and validation happen in :mod:`multisend.core.validation`.
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any

from ..core.exceptions import InvalidInputError
from ..core.validation import normalize_amount
from ..models import RawEntry

_ADDRESS_FIELDS = ("address", "addr", "to")
_AMOUNT_FIELDS = ("amount", "value")


def _first_present(item: dict[str, Any], names: tuple[str, ...]) -> str:
    for name in names:
        value = item.get(name)
        if value is not None and str(value).strip() != "":
            return str(value).strip()
    return ""


def parse_json_entries(text: str) -> list[RawEntry]:
    """Parse a JSON array of recipient objects."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"Invalid JSON input: {e}") from e
    if not isinstance(data, list):
        raise InvalidInputError("JSON must be an array")

    entries: list[RawEntry] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise InvalidInputError(f"Invalid entry at index {index}: expected an object")
        entries.append(
            RawEntry(
                address=_first_present(item, _ADDRESS_FIELDS),
                amount=_first_present(item, _AMOUNT_FIELDS),
            )
        )
    return entries


def _is_header(row: list[str]) -> bool:
    joined = ",".join(row).lower()
    return "address" in joined and "amount" in joined


def parse_csv_entries(text: str) -> list[RawEntry]:
    """Parse ``address,amount`` CSV rows, skipping blank lines and a header."""
    entries: list[RawEntry] = []
    reader = csv.reader(io.StringIO(text))
    first = True
    for row in reader:
        cells = [cell.strip() for cell in row]
        if not any(cells):
            continue
        if first and _is_header(cells):
            first = False
            continue
        first = False
        if len(cells) < 2:
            raise InvalidInputError(f"CSV line {reader.line_num} must have address,amount")
        entries.append(RawEntry(address=cells[0], amount=cells[1]))
    return entries


def load_entries(path: str | Path) -> list[RawEntry]:
    """Load recipient rows from a ``.json`` or ``.csv`` file.

    Raises:
        InvalidInputError: Unsupported format or malformed content
        OSError: If the file cannot be read
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json":
        return parse_json_entries(text)
    if suffix == ".csv":
        return parse_csv_entries(text)
    raise InvalidInputError("Unsupported input format. Use .json or .csv")


def convert_json_to_csv(source: str | Path, destination: str | Path) -> int:
    """Convert a JSON recipient array to ``address,amount`` CSV.

    Rows without an address or with an amount that is not an unsigned
    decimal (after stripping ``$`` and grouping commas) are dropped.

    Returns:
        Number of data rows written
    """
    entries = parse_json_entries(Path(source).read_text(encoding="utf-8"))
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["address", "amount"])
    written = 0
    for entry in entries:
        amount = normalize_amount(entry.amount)
        if not entry.address or amount is None:
            continue
        writer.writerow([entry.address, amount])
        written += 1
    Path(destination).write_text(buffer.getvalue(), encoding="utf-8")
    return written
