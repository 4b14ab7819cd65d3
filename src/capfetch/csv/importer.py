"""CSV import functionality."""

import csv
import io
from datetime import date

from capfetch.core.exceptions import ValidationError
from capfetch.core.timezone import parse_date

# Header cells skipped when reading ticker lists
_TICKER_HEADERS = {"TICKER", "TICKERS", "SYMBOL", "SYMBOLS"}

YEAR_DATE_COLUMNS = ["year", "date"]


def parse_tickers(text: str) -> list[str]:
    """
    Extract tickers from an uploaded CSV.

    Every non-empty cell counts, wherever it sits. Values are upper-cased and
    de-duplicated in first-seen order; header cells such as ``ticker`` are
    skipped.
    """
    tickers: dict[str, None] = {}
    for row in csv.reader(io.StringIO(text)):
        for cell in row:
            value = cell.strip().strip('"').upper()
            if value and value not in _TICKER_HEADERS:
                tickers.setdefault(value, None)
    return list(tickers)


def parse_year_dates(text: str) -> dict[int, date]:
    """
    Parse a ``year,date`` CSV into a year -> target date mapping.

    Raises ValidationError naming the first bad row.
    """
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        return {}

    fieldnames = [name.strip().lower() for name in reader.fieldnames]
    missing = set(YEAR_DATE_COLUMNS) - set(fieldnames)
    if missing:
        raise ValidationError(f"Missing required columns: {sorted(missing)}")
    reader.fieldnames = fieldnames

    year_dates: dict[int, date] = {}
    for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
        year_str = (row.get("year") or "").strip()
        date_str = (row.get("date") or "").strip()
        if not year_str and not date_str:
            continue
        try:
            year = int(year_str)
            target = parse_date(date_str)
        except (ValueError, OverflowError):
            raise ValidationError(f"Row {row_num}: invalid year/date {year_str!r}, {date_str!r}")
        if target.year != year:
            raise ValidationError(f"Row {row_num}: date {target.isoformat()} is not in {year}")
        year_dates[year] = target
    return year_dates
