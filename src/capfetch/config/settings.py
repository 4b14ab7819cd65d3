"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default root for exported CSV files."""
    return Path.home() / "Documents" / "Market Cap Data"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Market Cap Fetcher"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Export directory root; exports land in <data_dir>/exports unless export_dir is set
    data_dir: Optional[Path] = None
    export_dir: Optional[Path] = None

    # Upstream provider
    market_data_provider: str = "eodhd"
    eodhd_api_token: str = "demo"
    eodhd_base_url: str = "https://eodhd.com/api"
    # None means no per-call timeout; a hung call blocks the batch
    request_timeout_seconds: Optional[float] = None

    # Batch behavior
    default_delay_ms: int = 100
    max_attempts: int = 3
    backoff_seconds: float = 1.0
    fallback_days: int = 5
    default_exchange_suffix: str = ".US"
    fallback_shares: int = 1_000_000_000
    publish_every: int = 1

    # Optional CSV (year,date) merged over the built-in year dates
    year_dates_file: Optional[Path] = None

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_export_dir(self) -> Path:
        """Get the directory saved CSV exports are written to."""
        export_dir = self.export_dir or self.get_data_dir() / "exports"
        export_dir.mkdir(parents=True, exist_ok=True)
        return export_dir


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
