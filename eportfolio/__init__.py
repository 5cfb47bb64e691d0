"""
eportfolio: holdings store with an inverted keyword index.

Stocks and mutual funds; buy/merge, sell with proportional cost basis,
reprice, gains, and AND keyword search. No I/O in the core.
"""

__version__ = "0.1.0"

from eportfolio.errors import (
    HoldingNotFoundError,
    InvalidArgumentError,
    InvalidQuantityError,
    PortfolioError,
)
from eportfolio.holding import HoldingKind, HoldingRecord
from eportfolio.keyword_index import KeywordIndex
from eportfolio.store import HoldingGain, PortfolioStore, SaleResult, format_gains

__all__ = [
    "HoldingKind",
    "HoldingRecord",
    "HoldingGain",
    "KeywordIndex",
    "PortfolioStore",
    "SaleResult",
    "format_gains",
    "PortfolioError",
    "InvalidArgumentError",
    "HoldingNotFoundError",
    "InvalidQuantityError",
]
