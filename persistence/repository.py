"""
File-backed repository: PortfolioRepository over the portfolio text file.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from eportfolio import HoldingRecord
from eportfolio.commands.repository import PortfolioRepository

from persistence.file_format import load_file, save_file


class FileRepository(PortfolioRepository):
    """
    Loads from and saves to one file. A missing file loads as an empty
    portfolio and is created on the first save.
    """

    def __init__(self, path: str | Path, *, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    def load(self) -> list[HoldingRecord]:
        return load_file(self.path, encoding=self.encoding)

    def save(self, records: Sequence[HoldingRecord]) -> None:
        save_file(self.path, records, encoding=self.encoding)
