"""Dependency injection for FastAPI."""

from datetime import date

from fastapi import Depends

from capfetch.app_context import AppContext, get_app_context
from capfetch.config.settings import Settings
from capfetch.csv import CsvExporter
from capfetch.services import BatchOrchestrator


def get_context() -> AppContext:
    """Provide the process-wide AppContext."""
    return get_app_context()


def get_orchestrator(context: AppContext = Depends(get_context)) -> BatchOrchestrator:
    """Provide the BatchOrchestrator instance."""
    return context.orchestrator


def get_csv_exporter(context: AppContext = Depends(get_context)) -> CsvExporter:
    """Provide the CsvExporter instance."""
    return context.csv_exporter


def get_year_dates(context: AppContext = Depends(get_context)) -> dict[int, date]:
    """Provide the default year -> target date map."""
    return context.year_dates


def get_context_settings(context: AppContext = Depends(get_context)) -> Settings:
    """Provide the settings the context was built with."""
    return context.settings
