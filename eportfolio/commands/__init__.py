"""
Command layer: text-in, result-out operations over a portfolio store.

Repository interface (file or memory); session with buy, sell, price update,
search and gain commands; rejected commands are logged.
"""

from eportfolio.commands.repository import MemoryRepository, PortfolioRepository
from eportfolio.commands.session import PortfolioSession
from eportfolio.commands.types import CommandResult, CommandStatus, RejectedCommandLog

__all__ = [
    "PortfolioRepository",
    "MemoryRepository",
    "PortfolioSession",
    "CommandResult",
    "CommandStatus",
    "RejectedCommandLog",
]
