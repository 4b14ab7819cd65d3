"""Per-request inputs and outcomes."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from capfetch.domain.models.enums import ErrorKind, SharesSource


@dataclass(frozen=True)
class RequestKey:
    """One (ticker, year) cell of the batch request space."""

    ticker: str
    year: int
    target_date: Optional[date]


@dataclass(frozen=True)
class PriceQuote:
    """
    End-of-day quote as returned by the provider.

    ``quote_date`` may be later than the requested date when a fallback date
    supplied the data. Market-cap math always uses ``adjusted_close``.
    """

    quote_date: date
    raw_close: float
    adjusted_close: float


@dataclass(frozen=True)
class SharesEstimate:
    """A strictly positive share count and where it came from."""

    shares: int
    source: SharesSource


@dataclass(frozen=True)
class MarketCapRecord:
    """A successfully resolved (ticker, year) cell."""

    ticker: str
    year: int
    requested_date: date
    resolved_date: date
    raw_price: float
    adjusted_price: float
    shares: int
    shares_source: SharesSource
    market_cap: float
    market_cap_billions: float
    formatted_market_cap: str
    adjustment_note: Optional[str] = None


@dataclass(frozen=True)
class FetchError:
    """A failed (ticker, year) cell."""

    ticker: str
    year: int
    requested_date: Optional[date]
    message: str
    kind: ErrorKind = ErrorKind.UNEXPECTED_ERROR
