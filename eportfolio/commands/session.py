"""
Portfolio session: run buy/sell/update/search/gain commands against a store.

Takes raw text the way a form hands it over, parses and checks it, then calls
the store. Rejections are returned as CommandResults, logged, and kept in a
rejected-command log. The session owns the browse cursor; the store has none.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any

from eportfolio.errors import PortfolioError
from eportfolio.holding import HoldingKind, HoldingRecord
from eportfolio.store import PortfolioStore, format_gains
from eportfolio.commands.repository import PortfolioRepository
from eportfolio.commands.types import CommandResult, CommandStatus, RejectedCommandLog

logger = logging.getLogger(__name__)

_NUMBER_ERROR = "Quantity and price must be valid numbers."


def _number(text: str) -> float:
    """float() that also refuses nan and inf."""
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"not a finite number: {text!r}")
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


class PortfolioSession:
    """
    One interactive session over a repository.
    Flow: open() → commands → close(). open() loads into a fresh store;
    close() saves it back. With autosave, every successful mutation saves too.
    """

    def __init__(
        self,
        repository: PortfolioRepository,
        *,
        autosave: bool = False,
    ) -> None:
        self.repository = repository
        self.autosave = autosave
        self.store = PortfolioStore()
        self._cursor = 0
        self._rejected_log: list[RejectedCommandLog] = []

    def open(self) -> PortfolioStore:
        """Load the repository into a fresh store and reset the cursor."""
        self.store = PortfolioStore()
        self.store.load_records(self.repository.load())
        self._cursor = 0
        return self.store

    def close(self) -> None:
        """Save the current holdings back to the repository."""
        records = self.store.list_records()
        self.repository.save(records)
        logger.info("Saved %d holdings", len(records))

    def get_rejected_log(self) -> list[RejectedCommandLog]:
        """Return log of rejected commands for debugging and reporting."""
        return list(self._rejected_log)

    def _reject(self, command: str, reason: str, **arguments: Any) -> CommandResult:
        self._rejected_log.append(
            RejectedCommandLog(command=command, reason=reason, timestamp=datetime.now(), arguments=arguments)
        )
        logger.info("%s rejected: %s", command, reason)
        return CommandResult(status=CommandStatus.REJECTED, message=reason)

    def _changed(self) -> None:
        if self.autosave:
            self.close()

    # --- Buy ---

    def buy(self, kind: str, symbol: str, name: str, quantity: Any, price: Any) -> CommandResult:
        """
        Buy units. An existing symbol of the same kind is topped up in place;
        an existing symbol of another kind is rejected.
        """
        args = {"kind": kind, "symbol": symbol, "name": name, "quantity": quantity, "price": price}
        symbol, name = _text(symbol), _text(name)
        quantity_text, price_text = _text(quantity), _text(price)
        if not (symbol and name and quantity_text and price_text):
            return self._reject("buy", "All fields must be filled!", **args)
        try:
            holding_kind = HoldingKind.from_label(_text(kind))
        except PortfolioError as exc:
            return self._reject("buy", str(exc), **args)
        try:
            quantity_value = int(quantity_text)
            price_value = _number(price_text)
        except ValueError:
            return self._reject("buy", _NUMBER_ERROR, **args)
        problems = []
        if quantity_value <= 0:
            problems.append("Quantity must be greater than 0.")
        if price_value <= 0:
            problems.append("Price must be greater than 0.")
        if problems:
            return self._reject("buy", "\n".join(problems), **args)

        existing = self.store.find_by_symbol(symbol)
        if existing is not None:
            if existing.kind is not holding_kind:
                return self._reject(
                    "buy", "The type of the existing investment does not match the provided type.", **args
                )
            self.store.update_existing(existing, quantity_value, price_value)
            self._changed()
            return CommandResult(
                status=CommandStatus.OK,
                message="Symbol found. Existing investment updated successfully!",
                payload=existing,
            )

        try:
            record = self.store.add_or_merge(symbol, name, quantity_value, price_value, holding_kind)
        except PortfolioError as exc:
            return self._reject("buy", str(exc), **args)
        self._changed()
        return CommandResult(status=CommandStatus.OK, message="Investment added successfully!", payload=record)

    # --- Sell ---

    def sell(self, symbol: str, quantity: Any, price: Any) -> CommandResult:
        """Sell units of a holding; the result payload is the SaleResult."""
        args = {"symbol": symbol, "quantity": quantity, "price": price}
        symbol = _text(symbol)
        quantity_text, price_text = _text(quantity), _text(price)
        if not (symbol and quantity_text and price_text):
            return self._reject("sell", "All fields must be filled!", **args)
        try:
            quantity_value = int(quantity_text)
            price_value = _number(price_text)
        except ValueError:
            return self._reject("sell", _NUMBER_ERROR, **args)
        problems = []
        if quantity_value <= 0:
            problems.append("Quantity must be greater than 0.")
        if price_value <= 0:
            problems.append("Price must be greater than 0.")
        if problems:
            return self._reject("sell", "\n".join(problems), **args)

        try:
            sale = self.store.sell(symbol, quantity_value, price_value)
        except PortfolioError as exc:
            return self._reject("sell", str(exc), **args)
        self._clamp_cursor()
        self._changed()
        return CommandResult(status=CommandStatus.OK, message=sale.message, payload=sale)

    # --- Update (browse cursor) ---

    def _clamp_cursor(self) -> None:
        size = len(self.store)
        self._cursor = self._cursor % size if size else 0

    def current(self) -> HoldingRecord | None:
        """Holding under the cursor, or None for an empty portfolio."""
        records = self.store.list_records()
        if not records:
            return None
        self._clamp_cursor()
        return records[self._cursor]

    def next(self) -> HoldingRecord | None:
        """Move the cursor forward, wrapping at the end."""
        size = len(self.store)
        if size:
            self._cursor = (self._cursor + 1) % size
        return self.current()

    def prev(self) -> HoldingRecord | None:
        """Move the cursor back, wrapping at the start."""
        size = len(self.store)
        if size:
            self._cursor = (self._cursor - 1 + size) % size
        return self.current()

    def update_current_price(self, price: Any) -> CommandResult:
        """Set the price of the holding under the cursor."""
        args = {"price": price}
        price_text = _text(price)
        if not price_text:
            return self._reject("update", "Price cannot be empty!", **args)
        try:
            price_value = _number(price_text)
        except ValueError:
            return self._reject("update", "Price must be a valid number.", **args)
        if price_value <= 0:
            return self._reject("update", "Price must be greater than 0.", **args)
        record = self.current()
        if record is None:
            return self._reject("update", "There are no investments to update.", **args)
        self.store.update_price(record, price_value)
        self._changed()
        return CommandResult(
            status=CommandStatus.OK, message="Investment price updated successfully!", payload=record
        )

    # --- Search ---

    def search(
        self,
        keywords: str,
        symbol: str | None = None,
        low_price: Any = None,
        high_price: Any = None,
    ) -> CommandResult:
        """
        Keyword search (every keyword must match), optionally narrowed to one
        symbol and an inclusive price range. Payload is the matching records.
        """
        args = {"keywords": keywords, "symbol": symbol, "low_price": low_price, "high_price": high_price}
        keywords, symbol = _text(keywords), _text(symbol)
        if not keywords:
            return self._reject("search", "Keywords must be filled!", **args)
        try:
            low = _number(_text(low_price)) if _text(low_price) else None
            high = _number(_text(high_price)) if _text(high_price) else None
        except ValueError:
            return self._reject("search", "Low price and High price must be valid numbers.", **args)
        if (low is not None and low < 0) or (high is not None and high < 0):
            return self._reject("search", "Search prices must be positive numbers.", **args)
        if low is not None and high is not None and low > high:
            return self._reject("search", "Minimum price cannot be greater than maximum price.", **args)

        matches = [
            record
            for record in self.store.search(keywords)
            if (not symbol or record.matches_symbol(symbol))
            and (low is None or record.price >= low)
            and (high is None or record.price <= high)
        ]
        if not matches:
            criteria = [f"keywords: {keywords}"]
            if symbol:
                criteria.insert(0, f"symbol: {symbol}")
            if low is not None or high is not None:
                criteria.append(f"price range: ${low if low is not None else 0} - ${high if high is not None else 'any'}")
            message = "No investments found matching " + ", ".join(criteria)
        else:
            message = "\n".join(str(record) for record in matches)
        return CommandResult(status=CommandStatus.OK, message=message, payload=matches)

    # --- Gains ---

    def gains(self) -> CommandResult:
        """Total gain plus one line per holding. Payload is (total, individual gains)."""
        total = self.store.total_gain()
        message = f"Total gain: ${total:.2f}\n" + format_gains(self.store)
        return CommandResult(
            status=CommandStatus.OK,
            message=message.rstrip("\n"),
            payload=(total, self.store.individual_gains()),
        )
