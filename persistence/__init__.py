"""
Persistence and reporting on top of eportfolio.

Reads and writes the portfolio text file, converts holdings to and from pandas
DataFrames, and prints gain reports. The core never calls into this package.
"""

from persistence.file_format import format_holdings, load_file, parse_holdings, save_file
from persistence.frames import holdings_frame, records_from_frame
from persistence.report import print_report
from persistence.repository import FileRepository

__all__ = [
    "FileRepository",
    "parse_holdings",
    "format_holdings",
    "load_file",
    "save_file",
    "holdings_frame",
    "records_from_frame",
    "print_report",
]
