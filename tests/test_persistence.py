"""
Tests for persistence: file format, FileRepository, DataFrame interop, report.
"""

import logging
from pathlib import Path

import pandas as pd
import pytest

from eportfolio import HoldingKind, HoldingRecord, PortfolioStore
from eportfolio.commands import PortfolioSession
from persistence import (
    FileRepository,
    format_holdings,
    holdings_frame,
    load_file,
    parse_holdings,
    print_report,
    records_from_frame,
    save_file,
)

SAMPLE = """\
type = "stock"
symbol = "AAPL"
name = "Apple Inc."
quantity = "10"
price = "150.0"
bookValue = "1509.99"

type = “mutualfund”
symbol = “TGF”
name = “Tech Growth Fund”
quantity = “200”
price = “12.5”
bookValue = “2400.00”
"""


# --- parse_holdings ---


def test_parse_holdings_reads_blocks_in_order():
    records = parse_holdings(SAMPLE.splitlines())
    assert [r.symbol for r in records] == ["AAPL", "TGF"]
    apple, fund = records
    assert apple.kind is HoldingKind.STOCK
    assert apple.name == "Apple Inc."
    assert apple.quantity == 10
    assert apple.price == 150.0
    assert apple.book_value == 1509.99
    assert fund.kind is HoldingKind.MUTUAL_FUND
    assert fund.name == "Tech Growth Fund"
    assert fund.book_value == 2400.0


def test_parse_holdings_tolerates_extra_blank_lines_and_unknown_keys():
    text = '\n\ntype = "stock"\nsymbol = "A"\nname = "Alpha"\nnote = "x"\nquantity = "1"\nprice = "2"\n\n\n'
    records = parse_holdings(text.splitlines())
    assert len(records) == 1
    assert records[0].book_value == 0.0


def test_parse_holdings_keeps_equals_sign_in_value():
    text = 'type = "stock"\nsymbol = "EQ"\nname = "A = B Holdings"\nquantity = "1"\nprice = "2"\n'
    assert parse_holdings(text.splitlines())[0].name == "A = B Holdings"


def test_parse_holdings_skips_malformed_blocks(caplog):
    text = "\n".join(
        [
            'type = "stock"', 'symbol = "BAD"', 'name = "Bad Qty"', 'quantity = "ten"', 'price = "1"', "",
            'type = "bond"', 'symbol = "BND"', 'name = "Bond"', 'quantity = "1"', 'price = "1"', "",
            'type = "stock"', 'symbol = "MIS"', 'quantity = "1"', 'price = "1"', "",
            'type = "stock"', 'symbol = "NEG"', 'name = "Negative"', 'quantity = "-5"', 'price = "1"', "",
            'type = "stock"', 'symbol = "OK"', 'name = "Fine"', 'quantity = "1"', 'price = "1"',
            'bookValue = "10.99"',
        ]
    )
    with caplog.at_level(logging.WARNING, logger="persistence.file_format"):
        records = parse_holdings(text.splitlines())
    assert [r.symbol for r in records] == ["OK"]
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 4


# --- format_holdings / files ---


def test_format_holdings():
    records = [
        HoldingRecord("ABC", "Alpha", 3, 10.5, 41.4899, HoldingKind.STOCK),
        HoldingRecord("MF", "Money Fund", 2, 5.0, 10.0, HoldingKind.MUTUAL_FUND),
    ]
    assert format_holdings(records) == (
        'type = "stock"\nsymbol = "ABC"\nname = "Alpha"\nquantity = "3"\nprice = "10.5"\nbookValue = "41.49"\n\n'
        'type = "mutualfund"\nsymbol = "MF"\nname = "Money Fund"\nquantity = "2"\nprice = "5.0"\nbookValue = "10.00"\n\n'
    )


def test_save_then_load_file(tmp_path: Path):
    path = tmp_path / "portfolio.txt"
    records = parse_holdings(SAMPLE.splitlines())
    save_file(path, records)
    loaded = load_file(path)
    assert [(r.symbol, r.kind, r.quantity, r.price, r.book_value) for r in loaded] == [
        (r.symbol, r.kind, r.quantity, r.price, r.book_value) for r in records
    ]


def test_load_missing_file_is_empty(tmp_path: Path, caplog):
    with caplog.at_level(logging.WARNING, logger="persistence.file_format"):
        assert load_file(tmp_path / "nope.txt") == []
    assert "will be created upon saving" in caplog.text


def test_load_sample_data_file():
    """Use the sample portfolio in examples/data if present."""
    path = Path(__file__).resolve().parent.parent / "examples" / "data" / "portfolio.txt"
    if not path.exists():
        pytest.skip("portfolio.txt not found")
    records = load_file(path)
    assert [r.symbol for r in records] == ["AAPL", "TGF", "TSU"]


# --- FileRepository ---


def test_file_repository_session(tmp_path: Path):
    path = tmp_path / "portfolio.txt"
    session = PortfolioSession(FileRepository(path))
    session.open()
    assert len(session.store) == 0
    session.buy("stock", "ABC", "Alpha Corp", "10", "20")
    session.buy("mutualfund", "MF", "Money Fund", "4", "25")
    session.sell("ABC", "5", "30")
    session.close()
    assert path.exists()

    reopened = PortfolioSession(FileRepository(path))
    store = reopened.open()
    assert [r.symbol for r in store.list_records()] == ["ABC", "MF"]
    abc = store.find_by_symbol("ABC")
    assert abc.quantity == 5
    assert abc.book_value == pytest.approx(104.995, abs=0.01)
    assert [r.symbol for r in store.search("money")] == ["MF"]


# --- DataFrame interop ---


def test_holdings_frame():
    store = PortfolioStore()
    store.add_or_merge("ABC", "Alpha", 10, 20.0, HoldingKind.STOCK)
    store.add_or_merge("MF", "Money Fund", 4, 25.0, HoldingKind.MUTUAL_FUND)
    df = holdings_frame(store.list_records())
    assert list(df.columns) == ["type", "symbol", "name", "quantity", "price", "book_value", "market_value", "gain"]
    assert list(df["symbol"]) == ["ABC", "MF"]
    assert list(df["type"]) == ["stock", "mutualfund"]
    assert df["gain"].sum() == pytest.approx(store.total_gain())


def test_holdings_frame_empty():
    df = holdings_frame([])
    assert df.empty
    assert "gain" in df.columns


def test_records_from_frame_aliases():
    df = pd.DataFrame(
        {
            "Type": ["stock", "MutualFund"],
            "Ticker": ["ABC", "MF"],
            "Name": ["Alpha", "Money Fund"],
            "Qty": [10, 4],
            "Price": [20.0, 25.0],
            "bookValue": [209.99, None],
        }
    )
    records = records_from_frame(df)
    assert [r.symbol for r in records] == ["ABC", "MF"]
    assert records[0].book_value == pytest.approx(209.99)
    assert records[1].kind is HoldingKind.MUTUAL_FUND
    assert records[1].book_value == pytest.approx(100.0)


def test_records_from_frame_skips_invalid_rows():
    df = pd.DataFrame(
        {
            "type": ["stock", "stock", "gold"],
            "symbol": ["OK", "NEG", "GLD"],
            "name": ["Fine", "Negative", "Gold"],
            "quantity": [1, -1, 1],
            "price": [1.0, 1.0, 1.0],
        }
    )
    records = records_from_frame(df)
    assert [r.symbol for r in records] == ["OK"]
    assert records[0].book_value == pytest.approx(10.99)


def test_records_from_frame_missing_column():
    df = pd.DataFrame({"symbol": ["A"], "name": ["Alpha"], "quantity": [1]})
    with pytest.raises(ValueError, match="price"):
        records_from_frame(df)


# --- Report ---


def test_print_report(capsys):
    store = PortfolioStore()
    record = store.add_or_merge("ABC", "Alpha", 10, 20.0, HoldingKind.STOCK)
    store.update_price(record, 25.0)
    df = print_report(store)
    out = capsys.readouterr().out
    assert "--- Portfolio Gain ---" in out
    assert "Total gain:      40.01" in out
    assert "Alpha (ABC): $40.01" in out
    assert len(df) == 1


def test_records_from_frame_skips_fractional_quantity(caplog):
    df = pd.DataFrame(
        {
            "type": ["stock", "stock"],
            "symbol": ["FRAC", "WHOLE"],
            "name": ["Fractional", "Whole"],
            "quantity": [10.7, 10.0],
            "price": [1.0, 1.0],
        }
    )
    with caplog.at_level(logging.WARNING, logger="persistence.frames"):
        records = records_from_frame(df)
    assert [(r.symbol, r.quantity) for r in records] == [("WHOLE", 10)]
    assert "whole number" in caplog.text
