"""
Gain report example: load a portfolio file, reprice, and print gains.

Uses examples/data/portfolio.txt. Run from repo root:
  python examples/gain_report_example.py
"""

from __future__ import annotations

import logging
from pathlib import Path

from eportfolio import PortfolioStore
from persistence import load_file, print_report


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    path = Path(__file__).resolve().parent / "data" / "portfolio.txt"

    store = PortfolioStore()
    store.load_records(load_file(path))

    apple = store.find_by_symbol("aapl")
    if apple is not None:
        store.update_price(apple, 175.0)

    print_report(store)

    print("\n--- Search: 'tech' ---")
    for record in store.search("tech"):
        print(f"  {record}")


if __name__ == "__main__":
    main()
