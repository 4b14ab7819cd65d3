"""Resolve one (ticker, date) pair into a market-cap record."""

import logging
import math
import threading
from datetime import date
from typing import Any, Callable, Optional

from capfetch.core.cancellation import CancellationToken, call_cancellable
from capfetch.core.exceptions import NoPriceDataError, TransportError
from capfetch.core.timezone import following_days, parse_date
from capfetch.domain.models import MarketCapRecord, PriceQuote, SharesEstimate, SharesSource
from capfetch.providers.default_shares import DEFAULT_FALLBACK_SHARES, lookup_default_shares
from capfetch.providers.market_data_provider import MarketDataProvider
from capfetch.services.market_cap_calculator import compute_market_cap
from capfetch.services.retry import with_retry

logger = logging.getLogger(__name__)

DEFAULT_EXCHANGE_SUFFIX = ".US"
DEFAULT_FALLBACK_DAYS = 5

# Field names under which providers report shares outstanding
SHARES_FIELD_ALIASES = (
    "SharesOutstanding",
    "shares_outstanding",
    "sharesOutstanding",
    "Shares Outstanding",
    "CommonSharesOutstanding",
    "commonStockSharesOutstanding",
)


def normalize_ticker(ticker: str, suffix: str = DEFAULT_EXCHANGE_SUFFIX) -> str:
    """Upper-case and append the default exchange suffix when none is given."""
    symbol = ticker.strip().upper()
    if "." not in symbol:
        symbol = f"{symbol}{suffix.upper()}"
    return symbol


def display_ticker(ticker: str, suffix: str = DEFAULT_EXCHANGE_SUFFIX) -> str:
    """Strip the default exchange suffix; other exchanges keep theirs."""
    if ticker.upper().endswith(suffix.upper()):
        return ticker[: -len(suffix)]
    return ticker


def _positive_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    # Rejects NaN and infinities from lenient JSON decoding
    return number if math.isfinite(number) and number > 0 else None


def pick_shares(stats: Optional[dict[str, Any]]) -> Optional[int]:
    """Return the first strictly positive alias value in ``stats``."""
    if not stats:
        return None
    for key in SHARES_FIELD_ALIASES:
        shares = _positive_number(stats.get(key))
        if shares is not None:
            return int(round(shares))
    return None


def _row_date(value: Any, candidate: date) -> date:
    """Parse a row's date, keeping the date asked for when it is unusable."""
    if not isinstance(value, (str, date)) or not value:
        return candidate
    try:
        return parse_date(value)
    except (ValueError, OverflowError):
        return candidate


class RequestResolver:
    """
    Turns a (ticker, date) pair into a MarketCapRecord.

    Each upstream call goes through the retry wrapper and can be interrupted
    by the batch cancellation token. The resolver holds no per-batch state.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        fallback_days: int = DEFAULT_FALLBACK_DAYS,
        exchange_suffix: str = DEFAULT_EXCHANGE_SUFFIX,
        fallback_shares: int = DEFAULT_FALLBACK_SHARES,
        default_shares: Callable[[str], Optional[int]] = lookup_default_shares,
    ):
        self._provider = provider
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._fallback_days = fallback_days
        self._exchange_suffix = exchange_suffix
        self._fallback_shares = fallback_shares
        self._default_shares = default_shares
        # Held while an upstream call is open, including one a stop abandoned
        self._upstream_slot = threading.Lock()

    @property
    def exchange_suffix(self) -> str:
        return self._exchange_suffix

    def normalize(self, ticker: str) -> str:
        return normalize_ticker(ticker, self._exchange_suffix)

    def resolve(
        self,
        ticker: str,
        year: int,
        requested_date: date,
        token: CancellationToken,
    ) -> MarketCapRecord:
        """
        Resolve price and shares for one cell.

        Raises:
            NoPriceDataError: no quote on the requested date or any fallback date.
            CancelledError: the batch was stopped mid-resolution.
        """
        symbol = self.normalize(ticker)
        quote = self.resolve_price(symbol, requested_date, token)
        shares = self.resolve_shares(symbol, quote.quote_date, token)
        figures = compute_market_cap(quote.raw_close, quote.adjusted_close, shares.shares)

        return MarketCapRecord(
            ticker=symbol,
            year=year,
            requested_date=requested_date,
            resolved_date=quote.quote_date,
            raw_price=quote.raw_close,
            adjusted_price=quote.adjusted_close,
            shares=shares.shares,
            shares_source=shares.source,
            market_cap=figures.market_cap,
            market_cap_billions=figures.market_cap_billions,
            formatted_market_cap=figures.formatted_market_cap,
            adjustment_note=figures.adjustment_note,
        )

    def resolve_price(
        self,
        symbol: str,
        requested_date: date,
        token: CancellationToken,
    ) -> PriceQuote:
        """
        Try the exact date, then each of the following ``fallback_days`` days.

        A transport failure that survives retries counts as "no data" for that
        date only. Cancellation aborts the whole resolution.
        """
        candidates = [requested_date, *following_days(requested_date, self._fallback_days)]
        failures: list[str] = []

        for candidate in candidates:
            try:
                rows = with_retry(
                    lambda: call_cancellable(
                        lambda: self._provider.get_eod_prices(symbol, candidate, token),
                        token,
                        slot=self._upstream_slot,
                    ),
                    token,
                    max_attempts=self._max_attempts,
                    backoff_seconds=self._backoff_seconds,
                    description=f"Price lookup {symbol} {candidate.isoformat()}",
                )
            except TransportError as exc:
                logger.warning(
                    "Price lookup for %s on %s gave up: %s", symbol, candidate, exc.message
                )
                failures.append(f"{candidate.isoformat()}: {exc.message}")
                continue

            quote = self._quote_from_rows(rows, candidate)
            if quote is None:
                continue
            if candidate != requested_date:
                logger.info(
                    "Using fallback date %s for %s (requested %s)",
                    candidate,
                    symbol,
                    requested_date,
                )
            return quote

        message = (
            f"No price data found for {symbol} on {requested_date.isoformat()} "
            f"or the following {self._fallback_days} days"
        )
        if failures:
            message = f"{message} ({'; '.join(failures)})"
        raise NoPriceDataError(message)

    def resolve_shares(
        self,
        symbol: str,
        as_of: date,
        token: CancellationToken,
    ) -> SharesEstimate:
        """Prefer the provider's point-in-time figure, else the static default."""
        try:
            stats = with_retry(
                lambda: call_cancellable(
                    lambda: self._provider.get_shares_stats(symbol, as_of, token),
                    token,
                    slot=self._upstream_slot,
                ),
                token,
                max_attempts=self._max_attempts,
                backoff_seconds=self._backoff_seconds,
                description=f"Shares lookup {symbol}",
            )
        except TransportError as exc:
            logger.warning("Shares lookup for %s gave up, using default: %s", symbol, exc.message)
            stats = None

        shares = pick_shares(stats)
        if shares is not None:
            return SharesEstimate(shares=shares, source=SharesSource.HISTORICAL)

        default = self._default_shares(symbol)
        if default is None or default <= 0:
            default = self._fallback_shares
        logger.debug("Using default shares for %s: %d", symbol, default)
        return SharesEstimate(shares=default, source=SharesSource.DEFAULT)

    @staticmethod
    def _quote_from_rows(rows: list[dict[str, Any]], candidate: date) -> Optional[PriceQuote]:
        for row in rows or []:
            adjusted = _positive_number(row.get("adjusted_close"))
            if adjusted is None:
                continue
            raw = _positive_number(row.get("close")) or adjusted
            return PriceQuote(
                quote_date=_row_date(row.get("date"), candidate),
                raw_close=raw,
                adjusted_close=adjusted,
            )
        return None
