"""Date utilities for US/Eastern market time."""

from datetime import date, datetime, timedelta

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Return current time in US/Eastern timezone."""
    return datetime.now(EASTERN_TZ)


def today_eastern() -> date:
    """Return the current market calendar date."""
    return now_eastern().date()


def parse_date(value: str | date) -> date:
    """
    Parse a calendar date.

    Accepts ISO dates as well as the looser formats people type into
    spreadsheets (``1/5/2010``, ``2010/01/05``).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date_parser.parse(value.strip()).date()


def following_days(start: date, count: int) -> list[date]:
    """Return the ``count`` calendar days after ``start``."""
    return [start + timedelta(days=offset) for offset in range(1, count + 1)]
