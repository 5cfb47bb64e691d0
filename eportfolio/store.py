"""
PortfolioStore: ordered holdings plus the inverted keyword index over them.

The store is the only writer of its record list. After every public mutating
call the index equals a from-scratch rebuild over the current records.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from eportfolio.errors import HoldingNotFoundError, InvalidArgumentError, InvalidQuantityError
from eportfolio.holding import HoldingKind, HoldingRecord
from eportfolio.keyword_index import KeywordIndex, tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleResult:
    """Outcome of a sale. Amounts are unrounded; message rounds for display."""

    symbol: str
    quantity_sold: int
    payment: float
    fee: float
    proceeds: float
    gain: float
    removed: bool = False

    @property
    def message(self) -> str:
        lines = [
            f"You received ${self.proceeds:.2f} for selling {self.quantity_sold} units of {self.symbol}.",
            f"Gain from this sale: ${self.gain:.2f}.",
        ]
        if self.removed:
            lines.append(f"Investment with symbol '{self.symbol}' fully sold and removed from portfolio.")
        return "\n".join(lines)


@dataclass(frozen=True)
class HoldingGain:
    """Unrealized gain of one holding."""

    name: str
    symbol: str
    gain: float


class PortfolioStore:
    """
    Holdings in insertion order and a keyword index keyed by record position.
    Single owner; callers that share a store must serialize access themselves.
    """

    def __init__(self) -> None:
        self._records: list[HoldingRecord] = []
        self._index = KeywordIndex()

    # --- Collection ---

    def load_records(self, records: Iterable[HoldingRecord]) -> None:
        """Append pre-validated records in the given order, then index once."""
        before = len(self._records)
        self._records.extend(records)
        self._index.rebuild(self._records)
        logger.info("Loaded %d holdings", len(self._records) - before)

    def list_records(self) -> tuple[HoldingRecord, ...]:
        """Snapshot of the holdings in stored order."""
        return tuple(self._records)

    def find_by_symbol(self, symbol: str) -> HoldingRecord | None:
        """First holding whose symbol matches, ignoring case. None if absent."""
        for record in self._records:
            if record.matches_symbol(symbol):
                return record
        return None

    @property
    def keyword_index(self) -> dict[str, frozenset[int]]:
        """Read-only copy of the keyword index."""
        return self._index.snapshot()

    def rebuild_index(self) -> None:
        self._index.rebuild(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HoldingRecord]:
        return iter(tuple(self._records))

    def _require_member(self, record: HoldingRecord) -> None:
        if not any(r is record for r in self._records):
            raise HoldingNotFoundError(f"Holding {record.symbol!r} is not in this portfolio.")

    # --- Buying ---

    def add_or_merge(
        self,
        symbol: str,
        name: str,
        quantity: int,
        price: float,
        kind: HoldingKind = HoldingKind.STOCK,
        book_value: float | None = None,
    ) -> HoldingRecord:
        """
        Buy into a holding.

        An existing symbol (case-insensitive) is merged in place: quantity
        grows, book value grows by quantity * price, and price becomes the new
        trade price. The existing kind must match. Otherwise a new record is
        appended and indexed; book_value defaults to the purchase cost of kind.
        Returns the affected record.
        """
        if quantity is None or quantity <= 0:
            raise InvalidArgumentError("Quantity must be greater than 0.")
        if price is None or not math.isfinite(price) or price <= 0:
            raise InvalidArgumentError("Price must be greater than 0.")

        existing = self.find_by_symbol(symbol)
        if existing is not None:
            if existing.kind is not kind:
                raise InvalidArgumentError(
                    f"The type of the existing investment {existing.symbol!r} "
                    f"({existing.kind.value}) does not match the provided type ({kind.value})."
                )
            self._merge(existing, quantity, price)
            return existing

        if book_value is None:
            book_value = kind.purchase_cost(quantity, price)
        record = HoldingRecord(symbol, name, quantity, price, book_value, kind)
        self._records.append(record)
        self._index.add(record, len(self._records) - 1)
        return record

    def update_existing(self, record: HoldingRecord, additional_quantity: int, new_price: float) -> None:
        """Merge a purchase into a known record without searching by symbol."""
        self._require_member(record)
        self._merge(record, additional_quantity, new_price)

    def _merge(self, record: HoldingRecord, quantity: int, price: float) -> None:
        if quantity is None or quantity <= 0:
            raise InvalidArgumentError("Quantity must be greater than 0.")
        new_quantity = record.quantity + quantity
        new_book_value = record.book_value + quantity * price
        record.price = price
        record.quantity = new_quantity
        record.book_value = new_book_value

    # --- Selling ---

    def sell(self, symbol: str, quantity_sold: int, sell_price: float) -> SaleResult:
        """
        Sell quantity_sold units at sell_price.

        Gain is measured against the share of book value the sold units carry,
        using the quantity held before the sale. Selling everything removes the
        record and rebuilds the index; a partial sale shrinks quantity and book
        value by the same proportion and leaves the index alone.
        """
        record = self.find_by_symbol(symbol)
        if record is None:
            raise HoldingNotFoundError(f"No investment found with symbol '{symbol}'.")
        current_quantity = record.quantity
        if quantity_sold is None or quantity_sold <= 0 or quantity_sold > current_quantity:
            raise InvalidQuantityError(
                f"Invalid quantity to sell: {quantity_sold} (holding {current_quantity} units of {record.symbol})."
            )

        payment = quantity_sold * sell_price
        fee = record.kind.fee
        proceeds = payment - fee
        gain = proceeds - record.book_value * (quantity_sold / current_quantity)

        remaining = current_quantity - quantity_sold
        record.quantity = remaining
        if remaining == 0:
            self._records = [r for r in self._records if r is not record]
            self._index.rebuild(self._records)
            logger.info("Holding %s fully sold and removed", record.symbol)
            removed = True
        else:
            record.book_value = record.book_value * (remaining / (remaining + quantity_sold))
            removed = False

        return SaleResult(
            symbol=symbol,
            quantity_sold=quantity_sold,
            payment=payment,
            fee=fee,
            proceeds=proceeds,
            gain=gain,
            removed=removed,
        )

    # --- Pricing and renaming ---

    def update_price(self, record: HoldingRecord, new_price: float) -> None:
        """Reprice a record. Price is not indexed."""
        self._require_member(record)
        record.price = new_price

    def rename(self, record: HoldingRecord, *, symbol: str | None = None, name: str | None = None) -> None:
        """Change the indexed fields of a record and re-index."""
        self._require_member(record)
        if symbol is not None:
            clash = self.find_by_symbol(symbol)
            if clash is not None and clash is not record:
                raise InvalidArgumentError(f"Symbol {symbol!r} is already held.")
        old_symbol, old_name = record.symbol, record.name
        try:
            if symbol is not None:
                record.symbol = symbol
            if name is not None:
                record.name = name
        except InvalidArgumentError:
            record.symbol, record.name = old_symbol, old_name
            raise
        self._index.rebuild(self._records)

    # --- Gains ---

    def total_gain(self) -> float:
        """Sum of price * quantity - book value over all holdings."""
        return sum((record.gain for record in self._records), 0.0)

    def individual_gains(self) -> list[HoldingGain]:
        """Per-holding gains in stored order."""
        return [HoldingGain(name=r.name, symbol=r.symbol, gain=r.gain) for r in self._records]

    # --- Search ---

    def search(self, query: str) -> list[HoldingRecord]:
        """Holdings whose name tokens or symbol contain every keyword of query."""
        keywords = tokenize(query)
        if not keywords:
            return []
        return [self._records[position] for position in self._index.match_all(keywords)]


def format_gains(store: PortfolioStore) -> str:
    """One 'Name (SYM): $gain' line per holding, in stored order."""
    return "".join(f"{g.name} ({g.symbol}): ${g.gain:.2f}\n" for g in store.individual_gains())
