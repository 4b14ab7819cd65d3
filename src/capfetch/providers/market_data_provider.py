"""Market data provider protocol."""

from datetime import date
from typing import Any, Optional, Protocol

from capfetch.core.cancellation import CancellationToken


class MarketDataProvider(Protocol):
    """
    Protocol for upstream end-of-day and fundamentals sources.

    Implementations return empty results when the provider simply has no data
    and raise TransportError for non-2xx answers or network failures. Calls are
    blocking. When a token is given, cancelling it should abort the request in
    flight and raise CancelledError.
    """

    def get_eod_prices(
        self,
        symbol: str,
        on_date: date,
        token: Optional[CancellationToken] = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch end-of-day rows for exactly ``on_date``.

        Each row carries at least ``date``, ``close`` and ``adjusted_close``.
        Returns an empty list on weekends, holidays or unknown symbols.
        """
        ...

    def get_shares_stats(
        self,
        symbol: str,
        as_of: date,
        token: Optional[CancellationToken] = None,
    ) -> Optional[dict[str, Any]]:
        """
        Fetch the shares-outstanding figure closest to ``as_of``.

        Returns a mapping carrying the figure under one of the known field
        aliases, or None when the provider has nothing for the symbol.
        """
        ...
