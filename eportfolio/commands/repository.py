"""
Repository abstraction: where a session's holdings come from and go back to.

PortfolioRepository ABC: load, save. The file-backed implementation lives in
persistence.repository; MemoryRepository keeps records in process for tests and demos.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from eportfolio.holding import HoldingRecord


class PortfolioRepository(ABC):
    """
    Abstract holdings source/sink. Same interface for file and in-memory storage.
    """

    @abstractmethod
    def load(self) -> list[HoldingRecord]:
        """
        Return fully validated records in stored order. Malformed entries are
        the repository's concern: skip them, do not raise.
        """
        ...

    @abstractmethod
    def save(self, records: Sequence[HoldingRecord]) -> None:
        """Persist records in the given order, replacing what was stored."""
        ...


class MemoryRepository(PortfolioRepository):
    """Keeps the saved records in a list. Records are copied on save and load."""

    def __init__(self, records: Sequence[HoldingRecord] = ()) -> None:
        self._records: list[HoldingRecord] = [_copy(r) for r in records]
        self.save_count = 0

    def load(self) -> list[HoldingRecord]:
        return [_copy(r) for r in self._records]

    def save(self, records: Sequence[HoldingRecord]) -> None:
        self._records = [_copy(r) for r in records]
        self.save_count += 1


def _copy(record: HoldingRecord) -> HoldingRecord:
    return HoldingRecord(
        record.symbol,
        record.name,
        record.quantity,
        record.price,
        record.book_value,
        record.kind,
    )
