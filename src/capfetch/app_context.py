"""Application context for in-process service management.

Owns the single batch orchestrator of the process together with the provider,
resolver and exporters it is wired to. The HTTP layer reads everything from
here.
"""

from datetime import date
from typing import Optional

from capfetch.config.settings import Settings, get_settings
from capfetch.config.year_dates import load_year_dates
from capfetch.csv import CsvExporter
from capfetch.providers import (
    EodhdMarketDataProvider,
    MarketDataProvider,
    StubMarketDataProvider,
)
from capfetch.services import BatchOrchestrator, RequestResolver, ResultAggregator


def build_provider(settings: Settings) -> MarketDataProvider:
    """Create the upstream provider selected in settings."""
    if settings.market_data_provider.lower() == "stub":
        return StubMarketDataProvider()
    return EodhdMarketDataProvider(
        api_token=settings.eodhd_api_token,
        base_url=settings.eodhd_base_url,
        timeout=settings.request_timeout_seconds,
    )


class AppContext:
    """
    Application context providing access to all services.

    Services are created lazily on first access and live for the lifetime of
    the context, so every request sees the same orchestrator.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[MarketDataProvider] = None,
    ):
        """
        Initialize application context.

        Args:
            settings: Optional settings. Uses the global settings if not provided.
            provider: Optional upstream provider. Built from settings if not provided.
        """
        self._settings = settings
        self._provider = provider

        # Service instances (lazy initialized)
        self._year_dates: Optional[dict[int, date]] = None
        self._resolver: Optional[RequestResolver] = None
        self._orchestrator: Optional[BatchOrchestrator] = None
        self._aggregator: Optional[ResultAggregator] = None
        self._csv_exporter: Optional[CsvExporter] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def provider(self) -> MarketDataProvider:
        if self._provider is None:
            self._provider = build_provider(self.settings)
        return self._provider

    @property
    def year_dates(self) -> dict[int, date]:
        """Default year -> target date map (built-ins plus the override file)."""
        if self._year_dates is None:
            self._year_dates = load_year_dates(self.settings)
        return dict(self._year_dates)

    @property
    def resolver(self) -> RequestResolver:
        if self._resolver is None:
            settings = self.settings
            self._resolver = RequestResolver(
                provider=self.provider,
                max_attempts=settings.max_attempts,
                backoff_seconds=settings.backoff_seconds,
                fallback_days=settings.fallback_days,
                exchange_suffix=settings.default_exchange_suffix,
                fallback_shares=settings.fallback_shares,
            )
        return self._resolver

    @property
    def orchestrator(self) -> BatchOrchestrator:
        if self._orchestrator is None:
            settings = self.settings
            self._orchestrator = BatchOrchestrator(
                resolver=self.resolver,
                default_year_dates=self.year_dates,
                default_delay_ms=settings.default_delay_ms,
                publish_every=settings.publish_every,
            )
        return self._orchestrator

    @property
    def aggregator(self) -> ResultAggregator:
        if self._aggregator is None:
            self._aggregator = ResultAggregator(
                exchange_suffix=self.settings.default_exchange_suffix,
            )
        return self._aggregator

    @property
    def csv_exporter(self) -> CsvExporter:
        if self._csv_exporter is None:
            self._csv_exporter = CsvExporter(aggregator=self.aggregator)
        return self._csv_exporter

    def close(self) -> None:
        """Stop any active batch and release the provider."""
        if self._orchestrator is not None and self._orchestrator.status.is_active:
            self._orchestrator.stop()
        close = getattr(self._provider, "close", None)
        if callable(close):
            close()


# Global application context (one batch per process)
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: Optional[AppContext]) -> None:
    """Set the global application context."""
    global _app_context
    _app_context = context
