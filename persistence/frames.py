"""
pandas interop: holdings to a DataFrame and back.

Column names are normalized to lowercase snake case; common aliases are mapped.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import pandas as pd

from eportfolio import HoldingKind, HoldingRecord, PortfolioError

logger = logging.getLogger(__name__)

# Standard column order for holdings frames
COLUMNS = ("type", "symbol", "name", "quantity", "price", "book_value", "market_value", "gain")
REQUIRED = ("type", "symbol", "name", "quantity", "price")


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Lowercase, snake-case columns; map aliases to type/symbol/name/quantity/price/book_value."""
    out = df.copy()
    out.columns = [str(c).strip().lower().replace(" ", "_") for c in out.columns]
    renames = {
        "bookvalue": "book_value",
        "book": "book_value",
        "kind": "type",
        "ticker": "symbol",
        "qty": "quantity",
        "units": "quantity",
    }
    out = out.rename(columns={k: v for k, v in renames.items() if k in out.columns})
    return out


def _text(value: object) -> str:
    return "" if value is None or pd.isna(value) else str(value)


def holdings_frame(records: Sequence[HoldingRecord]) -> pd.DataFrame:
    """
    One row per holding, in stored order.

    Returns
    -------
    pd.DataFrame
        Columns type, symbol, name, quantity, price, book_value, market_value, gain.
    """
    rows = [
        {
            "type": r.kind.value,
            "symbol": r.symbol,
            "name": r.name,
            "quantity": r.quantity,
            "price": r.price,
            "book_value": r.book_value,
            "market_value": r.market_value,
            "gain": r.gain,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=list(COLUMNS))


def records_from_frame(df: pd.DataFrame) -> list[HoldingRecord]:
    """
    Build records from a DataFrame. Rows that fail validation are skipped with
    a warning. A missing book_value column defaults to the purchase cost.

    Raises
    ------
    ValueError
        If a required column is absent.
    """
    out = _normalize_columns(df)
    missing = [c for c in REQUIRED if c not in out.columns]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    records: list[HoldingRecord] = []
    for position, data in enumerate(out.to_dict("records")):
        try:
            kind = HoldingKind.from_label(str(data["type"]))
            raw_quantity = float(data["quantity"])
            if not raw_quantity.is_integer():
                raise ValueError(f"quantity must be a whole number, got {data['quantity']!r}")
            quantity = int(raw_quantity)
            price = float(data["price"])
            book_value = data.get("book_value")
            if book_value is None or pd.isna(book_value):
                book_value = kind.purchase_cost(quantity, price)
            records.append(
                HoldingRecord(_text(data["symbol"]), _text(data["name"]), quantity, price, float(book_value), kind)
            )
        except (ValueError, TypeError, PortfolioError) as exc:
            logger.warning("Skipping row %d: %s", position, exc)
    return records
