"""
Inverted keyword index: lowercase token -> positions into the record list.

Derived data. The store appends on insert and rebuilds after removal, since a
removal shifts the position of every later record.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from eportfolio.holding import HoldingRecord

logger = logging.getLogger(__name__)


def tokenize(text: str) -> list[str]:
    """Lowercase and split on whitespace; empty tokens are dropped."""
    return (text or "").lower().split()


def record_keywords(record: "HoldingRecord") -> set[str]:
    """Keys a record is indexed under: its name tokens plus its lowercased symbol."""
    keys = set(tokenize(record.name))
    symbol = record.symbol.lower()
    if symbol:
        keys.add(symbol)
    return keys


class KeywordIndex:
    """Mapping of keyword to the set of record positions that carry it."""

    def __init__(self) -> None:
        self._positions: dict[str, set[int]] = {}

    def add(self, record: "HoldingRecord", position: int) -> None:
        """Index one record at its position (incremental path)."""
        for keyword in record_keywords(record):
            self._positions.setdefault(keyword, set()).add(position)

    def rebuild(self, records: Sequence["HoldingRecord"]) -> None:
        """Discard everything and re-index records by their current positions."""
        self._positions.clear()
        for position, record in enumerate(records):
            self.add(record, position)
        logger.debug("Keyword index rebuilt: %d records, %d keywords", len(records), len(self._positions))

    def lookup(self, keyword: str) -> set[int]:
        """Positions for keyword. Empty set if absent; never the live set."""
        return set(self._positions.get(keyword, ()))

    def match_all(self, keywords: Iterable[str]) -> list[int]:
        """Positions carrying every keyword (AND), in ascending order."""
        keywords = list(keywords)
        if not keywords:
            return []
        matched = self.lookup(keywords[0])
        for keyword in keywords[1:]:
            if not matched:
                break
            matched &= self._positions.get(keyword, set())
        return sorted(matched)

    def snapshot(self) -> dict[str, frozenset[int]]:
        """Read-only copy of the whole index."""
        return {keyword: frozenset(positions) for keyword, positions in self._positions.items()}

    def __contains__(self, keyword: object) -> bool:
        return keyword in self._positions

    def __len__(self) -> int:
        return len(self._positions)
