#!/usr/bin/env python3
"""
Write sample import files for the batch endpoints.

Creates, under the configured data directory (or the path given):
  tickers.csv     - a random pick of well-known US tickers
  year_dates.csv  - the built-in year -> target date table

Usage: from project root:
  ./venv/bin/python scripts/generate_sample_inputs.py [output_dir] [count]
"""

import csv
import random
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from capfetch.config.settings import get_settings
from capfetch.config.year_dates import DEFAULT_YEAR_DATES
from capfetch.providers.default_shares import DEFAULT_SHARES
from capfetch.services.request_resolver import display_ticker


def generate_sample_inputs(output_dir: Path, count: int = 20, seed: int = 42) -> None:
    """Write tickers.csv and year_dates.csv into output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)

    rng = random.Random(seed)
    tickers = sorted(display_ticker(t) for t in DEFAULT_SHARES)
    picked = rng.sample(tickers, min(count, len(tickers)))

    tickers_path = output_dir / "tickers.csv"
    with open(tickers_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["ticker"])
        for ticker in picked:
            writer.writerow([ticker])
    print(f"✓ {len(picked)} tickers written to {tickers_path}")

    dates_path = output_dir / "year_dates.csv"
    with open(dates_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["year", "date"])
        for year, target in sorted(DEFAULT_YEAR_DATES.items()):
            writer.writerow([year, target.isoformat()])
    print(f"✓ {len(DEFAULT_YEAR_DATES)} year dates written to {dates_path}")


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else get_settings().get_data_dir()
    n = int(sys.argv[2]) if len(sys.argv) > 2 else 20
    generate_sample_inputs(out, n)
