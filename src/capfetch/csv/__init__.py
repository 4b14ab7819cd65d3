"""CSV import/export utilities."""

from capfetch.csv.importer import parse_tickers, parse_year_dates
from capfetch.csv.exporter import CsvExporter, EXPORT_FILENAMES

__all__ = [
    "parse_tickers",
    "parse_year_dates",
    "CsvExporter",
    "EXPORT_FILENAMES",
]
