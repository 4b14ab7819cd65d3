"""Market data providers module."""

from capfetch.providers.market_data_provider import MarketDataProvider
from capfetch.providers.eodhd_provider import EodhdMarketDataProvider
from capfetch.providers.stub_provider import StubMarketDataProvider
from capfetch.providers.default_shares import (
    DEFAULT_FALLBACK_SHARES,
    DEFAULT_SHARES,
    lookup_default_shares,
)

__all__ = [
    "MarketDataProvider",
    "EodhdMarketDataProvider",
    "StubMarketDataProvider",
    "DEFAULT_FALLBACK_SHARES",
    "DEFAULT_SHARES",
    "lookup_default_shares",
]
