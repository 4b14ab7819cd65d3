"""Representative start-of-year dates used when the caller supplies none."""

from datetime import date
from typing import Mapping, Optional

from capfetch.config.settings import Settings
from capfetch.core.timezone import today_eastern
from capfetch.csv.importer import parse_year_dates

# First trading session picked for each year
DEFAULT_YEAR_DATES: dict[int, date] = {
    2010: date(2010, 1, 5),
    2011: date(2011, 1, 4),
    2012: date(2012, 1, 3),
    2013: date(2013, 1, 2),
    2014: date(2014, 1, 7),
    2015: date(2015, 1, 6),
    2016: date(2016, 1, 5),
    2017: date(2017, 1, 3),
    2018: date(2018, 1, 2),
    2019: date(2019, 1, 2),
    2020: date(2020, 1, 7),
    2021: date(2021, 1, 5),
    2022: date(2022, 1, 4),
    2023: date(2023, 1, 3),
    2024: date(2024, 1, 2),
    2025: date(2025, 1, 7),
}


def load_year_dates(settings: Settings) -> dict[int, date]:
    """
    Return the built-in year dates overlaid with the configured override file.

    The override file uses the same ``year,date`` layout accepted by the
    year-date CSV import.
    """
    year_dates = dict(DEFAULT_YEAR_DATES)
    if settings.year_dates_file is None:
        return year_dates

    text = settings.year_dates_file.read_text(encoding="utf-8")
    year_dates.update(parse_year_dates(text))
    return year_dates


def default_end_year(year_dates: Mapping[int, date], today: Optional[date] = None) -> int:
    """
    Return the latest configured year that has already begun.

    Falls back to the earliest configured year when every entry lies in the
    future, and to the current year when nothing is configured.
    """
    current_year = (today or today_eastern()).year
    if not year_dates:
        return current_year
    started = [year for year in year_dates if year <= current_year]
    return max(started) if started else min(year_dates)
