"""Stub market data provider for offline/testing use."""

import random
from datetime import date
from typing import Any, Iterable, Optional

from capfetch.core.cancellation import CancellationToken
from capfetch.providers.default_shares import lookup_default_shares

# Deterministic base prices for common symbols (first trading day of 2010)
_STUB_BASE_PRICES: dict[str, float] = {
    "AAPL.US": 30.57,
    "MSFT.US": 30.96,
    "GOOGL.US": 313.69,
    "AMZN.US": 133.52,
    "NVDA.US": 18.49,
    "META.US": 38.23,
    "TSLA.US": 23.89,
    "JPM.US": 43.68,
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Weekends have no data. Prices grow a little every year and carry a
    dividend adjustment before 2020 so adjustment notes show up. Shares come
    from the static default table. Answers are instant, so tokens are ignored.
    """

    def __init__(self, seed: int = 42, missing_symbols: Iterable[str] = ()):
        """Initialize with optional random seed and symbols that never have data."""
        self._seed = seed
        self._missing = {s.upper() for s in missing_symbols}

    def get_eod_prices(
        self,
        symbol: str,
        on_date: date,
        token: Optional[CancellationToken] = None,
    ) -> list[dict[str, Any]]:
        """Return one stub row for weekdays, nothing for weekends."""
        upper_symbol = symbol.upper()
        if upper_symbol in self._missing or on_date.weekday() >= 5:
            return []

        base = _STUB_BASE_PRICES.get(upper_symbol)
        if base is None:
            # Stable per symbol across runs
            rng = random.Random(f"{self._seed}:{upper_symbol}")
            base = round(20 + rng.random() * 180, 2)

        years = on_date.year - 2010
        close = round(base * (1.15 ** years), 2)
        adjusted = round(close * 0.97, 2) if on_date.year < 2020 else close
        return [
            {
                "date": on_date.isoformat(),
                "open": close,
                "high": close,
                "low": close,
                "close": close,
                "adjusted_close": adjusted,
                "volume": 1_000_000,
            }
        ]

    def get_shares_stats(
        self,
        symbol: str,
        as_of: date,
        token: Optional[CancellationToken] = None,
    ) -> Optional[dict[str, Any]]:
        """Return the static share count as if the provider reported it."""
        shares = lookup_default_shares(symbol)
        if symbol.upper() in self._missing or shares is None:
            return None
        return {"SharesOutstanding": shares}
