"""
Error kinds raised by the portfolio core.

All are raised synchronously to the immediate caller; none are retried here.
"""


class PortfolioError(Exception):
    """Base class for portfolio errors."""


class InvalidArgumentError(PortfolioError, ValueError):
    """Bad field on construction or mutation (empty text, non-positive quantity/price)."""


class HoldingNotFoundError(PortfolioError, LookupError):
    """No holding matches the requested symbol or record."""


class InvalidQuantityError(PortfolioError, ValueError):
    """Sell quantity is not positive or exceeds the quantity held."""
