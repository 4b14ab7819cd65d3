"""Service layer - batch fetching and result shaping."""

from capfetch.services.market_cap_calculator import MarketCapFigures, compute_market_cap
from capfetch.services.retry import with_retry
from capfetch.services.request_resolver import RequestResolver, normalize_ticker, display_ticker
from capfetch.services.batch_orchestrator import BatchOrchestrator
from capfetch.services.result_aggregator import ResultAggregator

__all__ = [
    "MarketCapFigures",
    "compute_market_cap",
    "with_retry",
    "RequestResolver",
    "normalize_ticker",
    "display_ticker",
    "BatchOrchestrator",
    "ResultAggregator",
]
