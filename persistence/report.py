"""
Gain report: print total and per-holding gains for a store.
"""

from __future__ import annotations

import pandas as pd

from eportfolio import PortfolioStore

from persistence.frames import holdings_frame


def print_report(store: PortfolioStore) -> pd.DataFrame:
    """
    Print a gain summary and return the holdings frame it was built from.

    Parameters
    ----------
    store : PortfolioStore
        Portfolio to report on.

    Returns
    -------
    pd.DataFrame
        Output of holdings_frame (e.g. for programmatic use).
    """
    frame = holdings_frame(store.list_records())
    print("--- Portfolio Gain ---")
    print(f"Holdings:        {len(frame)}")
    print(f"Market value:    {frame['market_value'].sum():,.2f}")
    print(f"Book value:      {frame['book_value'].sum():,.2f}")
    print(f"Total gain:      {store.total_gain():,.2f}")
    for row in frame.itertuples(index=False):
        print(f"  {row.name} ({row.symbol}): ${row.gain:,.2f}")
    print("----------------------")
    return frame
