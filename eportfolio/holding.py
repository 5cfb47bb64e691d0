"""
HoldingRecord: one position in the portfolio (stock or mutual fund).

Fields are mutable in place; every mutator re-runs its own validation.
The kind tag only decides the fixed transaction fee.
"""

from __future__ import annotations

import math
from enum import Enum

from eportfolio.errors import InvalidArgumentError

STOCK_FEE = 9.99
MUTUAL_FUND_FEE = 45.00


class HoldingKind(Enum):
    STOCK = "stock"
    MUTUAL_FUND = "mutualfund"

    @property
    def fee(self) -> float:
        """Fixed fee charged on a sale (and on a stock purchase)."""
        if self is HoldingKind.STOCK:
            return STOCK_FEE
        return MUTUAL_FUND_FEE

    def purchase_cost(self, quantity: int, price: float) -> float:
        """Book value of a fresh purchase. Funds pay their fee on redemption only."""
        cost = quantity * price
        if self is HoldingKind.STOCK:
            cost += STOCK_FEE
        return cost

    @classmethod
    def from_label(cls, label: str) -> HoldingKind:
        """Parse 'stock' / 'mutualfund' (any case)."""
        normalized = (label or "").strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise InvalidArgumentError(
            f"Invalid investment type {label!r}. Please enter 'stock' or 'mutualfund'."
        )


def _require_text(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{field_name} cannot be empty.")
    return value


def _require_positive(value: float, field_name: str) -> float:
    if value is None or not math.isfinite(value) or value <= 0:
        raise InvalidArgumentError(f"{field_name} must be greater than 0.")
    return value


class HoldingRecord:
    """
    A single holding. book_value is the total cost basis of the current
    position, not a unit cost; callers compute it.
    """

    def __init__(
        self,
        symbol: str,
        name: str,
        quantity: int,
        price: float,
        book_value: float,
        kind: HoldingKind = HoldingKind.STOCK,
    ) -> None:
        self._symbol = _require_text(symbol, "Symbol")
        self._name = _require_text(name, "Name")
        self._quantity = _require_positive(quantity, "Quantity")
        self._price = _require_positive(price, "Price")
        self._book_value = book_value
        self._kind = kind

    @property
    def kind(self) -> HoldingKind:
        return self._kind

    @property
    def symbol(self) -> str:
        return self._symbol

    @symbol.setter
    def symbol(self, value: str) -> None:
        self._symbol = _require_text(value, "Symbol")

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = _require_text(value, "Name")

    @property
    def quantity(self) -> int:
        return self._quantity

    @quantity.setter
    def quantity(self, value: int) -> None:
        # Zero is allowed: it is the last state before the store drops the record.
        if value is None or value < 0:
            raise InvalidArgumentError("Quantity must be zero or greater.")
        self._quantity = value

    @property
    def price(self) -> float:
        return self._price

    @price.setter
    def price(self, value: float) -> None:
        self._price = _require_positive(value, "Price")

    @property
    def book_value(self) -> float:
        return self._book_value

    @book_value.setter
    def book_value(self, value: float) -> None:
        self._book_value = value

    @property
    def market_value(self) -> float:
        return self._price * self._quantity

    @property
    def gain(self) -> float:
        """Unrealized gain: market value less book value."""
        return self.market_value - self._book_value

    def matches_symbol(self, symbol: str) -> bool:
        """Case-insensitive symbol equality."""
        return symbol is not None and self._symbol.lower() == symbol.lower()

    def __repr__(self) -> str:
        return (
            f"HoldingRecord(symbol={self._symbol!r}, name={self._name!r}, "
            f"quantity={self._quantity!r}, price={self._price!r}, "
            f"book_value={self._book_value!r}, kind={self._kind})"
        )

    def __str__(self) -> str:
        return (
            f"Name: {self._name}, Symbol: {self._symbol}, Quantity: {self._quantity}, "
            f"Price: ${self._price}, BookValue: ${self._book_value:.2f}"
        )
