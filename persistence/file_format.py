"""
Read and write the portfolio text file.

One block per holding, separated by a blank line:

    type = "stock"
    symbol = "AAPL"
    name = "Apple Inc."
    quantity = "10"
    price = "150.0"
    bookValue = "1509.99"

Malformed blocks are skipped with a warning; loading carries on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from eportfolio import HoldingKind, HoldingRecord, PortfolioError

logger = logging.getLogger(__name__)

# Curly quotes show up in hand-edited files; treat them as straight quotes.
_QUOTE_FIXES = {"“": '"', "”": '"'}

FIELDS = ("type", "symbol", "name", "quantity", "price", "bookValue")
_FIELD_BY_KEY = {f.lower(): f for f in FIELDS}


def _parse_line(line: str) -> tuple[str, str] | None:
    """Split 'key = "value"' into (field, value). None for unknown keys or no '='."""
    key, sep, value = line.partition("=")
    if not sep:
        return None
    field_name = _FIELD_BY_KEY.get(key.strip().lower())
    if field_name is None:
        return None
    return field_name, value.strip().replace('"', "")


def _build_record(fields: dict[str, str], block_number: int) -> HoldingRecord | None:
    """Turn one block's fields into a record, or log and return None."""
    missing = [f for f in ("type", "symbol", "name", "quantity", "price") if not fields.get(f)]
    if missing:
        logger.warning("Skipping entry %d: missing %s", block_number, ", ".join(missing))
        return None
    try:
        kind = HoldingKind.from_label(fields["type"])
        quantity = int(fields["quantity"])
        price = float(fields["price"])
        book_value = float(fields.get("bookValue") or 0.0)
        return HoldingRecord(fields["symbol"], fields["name"], quantity, price, book_value, kind)
    except (ValueError, PortfolioError) as exc:
        logger.warning("Skipping entry %d (%s): %s", block_number, fields.get("symbol"), exc)
        return None


def parse_holdings(lines: Iterable[str]) -> list[HoldingRecord]:
    """
    Parse holding blocks from lines of text.

    Parameters
    ----------
    lines : iterable of str
        File lines, with or without trailing newlines.

    Returns
    -------
    list of HoldingRecord
        Valid records in file order. The last block need not end with a blank line.
    """
    records: list[HoldingRecord] = []
    fields: dict[str, str] = {}
    block_number = 0

    def flush() -> None:
        nonlocal block_number
        if not fields:
            return
        block_number += 1
        record = _build_record(fields, block_number)
        if record is not None:
            records.append(record)
        fields.clear()

    for raw in lines:
        line = raw.strip()
        for bad, good in _QUOTE_FIXES.items():
            line = line.replace(bad, good)
        if not line:
            flush()
            continue
        parsed = _parse_line(line)
        if parsed is not None:
            field_name, value = parsed
            fields[field_name] = value
    flush()
    return records


def format_holdings(records: Sequence[HoldingRecord]) -> str:
    """Render records in the file format. Book value is written with two decimals."""
    blocks = []
    for record in records:
        blocks.append(
            f'type = "{record.kind.value}"\n'
            f'symbol = "{record.symbol}"\n'
            f'name = "{record.name}"\n'
            f'quantity = "{record.quantity}"\n'
            f'price = "{record.price}"\n'
            f'bookValue = "{record.book_value:.2f}"\n'
            "\n"
        )
    return "".join(blocks)


def load_file(path: str | Path, *, encoding: str = "utf-8") -> list[HoldingRecord]:
    """
    Load holdings from path. A missing file yields an empty list; it will be
    created on the next save.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("File %s not found. A new file will be created upon saving.", path)
        return []
    with path.open("r", encoding=encoding) as fh:
        records = parse_holdings(fh)
    logger.info("Read %d holdings from %s", len(records), path)
    return records


def save_file(path: str | Path, records: Sequence[HoldingRecord], *, encoding: str = "utf-8") -> None:
    """Write records to path, replacing its contents."""
    path = Path(path)
    path.write_text(format_holdings(records), encoding=encoding)
    logger.info("Wrote %d holdings to %s", len(records), path)
