"""Batch historical market cap fetcher."""

__version__ = "0.1.0"
