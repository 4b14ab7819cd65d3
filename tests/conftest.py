"""
Pytest configuration and fixtures for market cap fetcher tests.

This module provides:
- Scripted and blocking fake providers (no network)
- Resolver, orchestrator and exporter fixtures with zero delays
- A FastAPI TestClient bound to an isolated AppContext
"""

import threading
import time
from datetime import date
from typing import Any, Callable, Optional

import pytest
from fastapi.testclient import TestClient

from capfetch.app_context import AppContext, set_app_context
from capfetch.config.settings import Settings, reset_settings
from capfetch.core.cancellation import CancellationToken
from capfetch.csv import CsvExporter
from capfetch.domain.models import BatchSnapshot, BatchStatus, MarketCapRecord, SharesSource
from capfetch.main import app
from capfetch.providers.stub_provider import StubMarketDataProvider
from capfetch.services import BatchOrchestrator, RequestResolver, ResultAggregator


# Generous upper bound for worker threads in tests; runs finish in milliseconds
JOIN_TIMEOUT = 5.0


# =============================================================================
# ROW HELPERS
# =============================================================================


def eod_row(on_date: date, close: float, adjusted_close: Optional[float] = None) -> dict[str, Any]:
    """Build one EOD row the way the provider returns it."""
    return {
        "date": on_date.isoformat(),
        "open": close,
        "high": close,
        "low": close,
        "close": close,
        "adjusted_close": close if adjusted_close is None else adjusted_close,
        "volume": 1000,
    }


def make_record(
    ticker: str,
    year: int,
    adjusted: float = 100.0,
    shares: int = 1_000_000_000,
    **overrides: Any,
) -> MarketCapRecord:
    """Build a MarketCapRecord with consistent derived fields."""
    requested = overrides.pop("requested_date", date(year, 1, 5))
    market_cap = adjusted * shares
    fields = dict(
        ticker=ticker,
        year=year,
        requested_date=requested,
        resolved_date=overrides.pop("resolved_date", requested),
        raw_price=overrides.pop("raw_price", adjusted),
        adjusted_price=adjusted,
        shares=shares,
        shares_source=SharesSource.HISTORICAL,
        market_cap=market_cap,
        market_cap_billions=market_cap / 1_000_000_000,
        formatted_market_cap=f"${market_cap:,.0f}",
    )
    fields.update(overrides)
    return MarketCapRecord(**fields)


# =============================================================================
# FAKE PROVIDERS
# =============================================================================


class ScriptedProvider:
    """
    Provider answering from fixed scripts.

    ``prices`` maps (symbol, date) to rows, an exception to raise, or a tuple
    of those consumed one per call. Unscripted prices are empty; unscripted
    shares are None. Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        prices: Optional[dict[tuple[str, date], Any]] = None,
        shares: Optional[dict[str, Any]] = None,
    ):
        self.prices = dict(prices or {})
        self.shares = dict(shares or {})
        self.calls: list[tuple[str, str, date]] = []
        self._lock = threading.Lock()

    def get_eod_prices(self, symbol: str, on_date: date, token: Any = None) -> list[dict[str, Any]]:
        with self._lock:
            self.calls.append(("eod", symbol, on_date))
            outcome = self._next(self.prices, (symbol, on_date), [])
        return self._unwrap(outcome)

    def get_shares_stats(self, symbol: str, as_of: date, token: Any = None) -> Optional[dict[str, Any]]:
        with self._lock:
            self.calls.append(("shares", symbol, as_of))
            outcome = self._next(self.shares, symbol, None)
        return self._unwrap(outcome)

    def price_calls(self, symbol: Optional[str] = None) -> list[date]:
        return [d for kind, s, d in self.calls if kind == "eod" and (symbol is None or s == symbol)]

    @staticmethod
    def _next(script: dict, key: Any, default: Any) -> Any:
        outcome = script.get(key, default)
        if isinstance(outcome, tuple):
            # Sequence of outcomes, last one repeats
            if len(outcome) > 1:
                script[key] = outcome[1:]
            return outcome[0]
        return outcome

    @staticmethod
    def _unwrap(outcome: Any) -> Any:
        if isinstance(outcome, Exception):
            raise outcome
        if callable(outcome):
            return outcome()
        return outcome


class BlockingProvider:
    """
    Wraps a provider and blocks one EOD call until released.

    ``reached`` is set when the blocked call starts; setting ``release`` lets
    it finish. The blocked call ignores the token, like a request that cannot
    be interrupted. ``max_in_flight`` is the most calls ever open at once.
    """

    def __init__(self, inner: Any, block_symbol: str, block_date: date):
        self._inner = inner
        self._block = (block_symbol, block_date)
        self.reached = threading.Event()
        self.release = threading.Event()
        self.calls: list[tuple[str, date]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def get_eod_prices(self, symbol: str, on_date: date, token: Any = None) -> list[dict[str, Any]]:
        self._enter()
        try:
            with self._lock:
                self.calls.append((symbol, on_date))
            if (symbol, on_date) == self._block and not self.release.is_set():
                self.reached.set()
                self.release.wait(JOIN_TIMEOUT)
            return self._inner.get_eod_prices(symbol, on_date)
        finally:
            self._leave()

    def get_shares_stats(self, symbol: str, as_of: date, token: Any = None) -> Optional[dict[str, Any]]:
        self._enter()
        try:
            return self._inner.get_shares_stats(symbol, as_of)
        finally:
            self._leave()

    def _enter(self) -> None:
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)

    def _leave(self) -> None:
        with self._lock:
            self.in_flight -= 1


class SnapshotRecorder:
    """Progress listener that keeps every published snapshot."""

    def __init__(self):
        self.snapshots: list[BatchSnapshot] = []
        self._lock = threading.Lock()
        self._condition = threading.Condition(self._lock)

    def __call__(self, snapshot: BatchSnapshot) -> None:
        with self._condition:
            self.snapshots.append(snapshot)
            self._condition.notify_all()

    def wait_for(self, predicate: Callable[[BatchSnapshot], bool], timeout: float = JOIN_TIMEOUT) -> bool:
        with self._condition:
            return self._condition.wait_for(
                lambda: any(predicate(s) for s in self.snapshots),
                timeout=timeout,
            )


# =============================================================================
# DATES
# =============================================================================


TEST_YEAR_DATES = {
    2020: date(2020, 1, 7),
    2021: date(2021, 1, 5),
    2022: date(2022, 1, 4),
}


@pytest.fixture
def year_dates() -> dict[int, date]:
    return dict(TEST_YEAR_DATES)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


def make_resolver(provider: Any, **overrides: Any) -> RequestResolver:
    """Resolver with no backoff so retries run instantly."""
    options = {"max_attempts": 3, "backoff_seconds": 0.0, "fallback_days": 5}
    options.update(overrides)
    return RequestResolver(provider=provider, **options)


def make_orchestrator(provider: Any, year_dates: Optional[dict] = None, **overrides: Any) -> BatchOrchestrator:
    """Orchestrator with no inter-request delay."""
    return BatchOrchestrator(
        resolver=make_resolver(provider),
        default_year_dates=year_dates if year_dates is not None else TEST_YEAR_DATES,
        default_delay_ms=0,
        **overrides,
    )


def run_to_end(orchestrator: BatchOrchestrator, *args: Any, **kwargs: Any) -> BatchSnapshot:
    """Start a batch and wait for it to finish."""
    orchestrator.start(*args, **kwargs)
    assert orchestrator.join(JOIN_TIMEOUT), "batch did not finish"
    return orchestrator.get_snapshot()


@pytest.fixture
def token() -> CancellationToken:
    return CancellationToken()


@pytest.fixture
def stub_provider() -> StubMarketDataProvider:
    """Deterministic stub where ZZZZ never has data."""
    return StubMarketDataProvider(seed=42, missing_symbols=["ZZZZ.US"])


@pytest.fixture
def orchestrator(stub_provider) -> BatchOrchestrator:
    return make_orchestrator(stub_provider)


@pytest.fixture
def aggregator() -> ResultAggregator:
    return ResultAggregator()


@pytest.fixture
def csv_exporter(aggregator) -> CsvExporter:
    return CsvExporter(aggregator=aggregator)


# =============================================================================
# API FIXTURES
# =============================================================================


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings for offline tests: stub provider, no delays, tmp export dir."""
    reset_settings()
    return Settings(
        _env_file=None,
        market_data_provider="stub",
        default_delay_ms=0,
        backoff_seconds=0.0,
        data_dir=tmp_path,
    )


@pytest.fixture
def app_context(test_settings, stub_provider) -> AppContext:
    context = AppContext(settings=test_settings, provider=stub_provider)
    set_app_context(context)
    yield context
    context.close()
    set_app_context(None)


@pytest.fixture
def client(app_context) -> TestClient:
    """TestClient bound to the isolated AppContext."""
    with TestClient(app) as test_client:
        yield test_client


def wait_for_status(client: TestClient, *statuses: BatchStatus, timeout: float = JOIN_TIMEOUT) -> dict:
    """Poll GET /batch/progress until the status is one of ``statuses``."""
    wanted = {s.value for s in statuses}
    deadline = time.monotonic() + timeout
    body = client.get("/batch/progress").json()
    while body["status"] not in wanted:
        if time.monotonic() > deadline:
            raise AssertionError(f"status never reached {wanted}: {body}")
        time.sleep(0.01)
        body = client.get("/batch/progress").json()
    return body
