"""
Session example: buy, sell, reprice and search through the command layer.

Works on a copy of examples/data/portfolio.txt so the sample file is untouched.
Shows: FileRepository, PortfolioSession, command results and the rejected log.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from eportfolio.commands import PortfolioSession
from persistence import FileRepository


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    source = Path(__file__).resolve().parent / "data" / "portfolio.txt"
    workdir = Path(tempfile.mkdtemp())
    path = workdir / "portfolio.txt"
    shutil.copy(source, path)

    session = PortfolioSession(FileRepository(path))
    session.open()

    print("--- Buy ---")
    print(session.buy("stock", "MSFT", "Microsoft Corporation", "5", "310").message)
    print(session.buy("stock", "TGF", "Tech Growth Fund", "5", "13").message)  # kind mismatch

    print("\n--- Sell ---")
    print(session.sell("TSU", "20", "9.5").message)
    print(session.sell("AAPL", "10", "160").message)

    print("\n--- Update ---")
    record = session.current()
    print(f"Current: {record}")
    print(session.update_current_price("14.25").message)

    print("\n--- Search ---")
    print(session.search("tech", low_price="0", high_price="20").message)

    print("\n--- Gains ---")
    print(session.gains().message)

    print("\n--- Rejected log ---")
    for entry in session.get_rejected_log():
        print(f"  {entry.command}: {entry.reason}")

    session.close()
    print(f"\nSaved to {path}")


if __name__ == "__main__":
    main()
