"""Market capitalization math."""

from dataclasses import dataclass
from typing import Optional

BILLION = 1_000_000_000

# Differences at or below one cent are treated as unadjusted
ADJUSTMENT_TOLERANCE = 0.01


@dataclass(frozen=True)
class MarketCapFigures:
    """Derived market-cap values for one quote."""

    market_cap: float
    market_cap_billions: float
    formatted_market_cap: str
    adjustment_note: Optional[str] = None


def format_market_cap(market_cap: float) -> str:
    """Format as whole US dollars, e.g. ``$2,345,678,901``."""
    return f"${market_cap:,.0f}"


def adjustment_note(raw_price: float, adjusted_price: float) -> Optional[str]:
    """Describe a split/dividend adjustment, or None when prices agree."""
    if abs(adjusted_price - raw_price) <= ADJUSTMENT_TOLERANCE:
        return None
    if raw_price <= 0:
        return "Split/dividend adjusted price used"
    pct = (adjusted_price / raw_price - 1) * 100
    return f"Split/dividend adjusted price used ({pct:.1f}% adjustment)"


def compute_market_cap(raw_price: float, adjusted_price: float, shares: float) -> MarketCapFigures:
    """Market cap uses the adjusted price; the raw price only feeds the note."""
    market_cap = adjusted_price * shares
    return MarketCapFigures(
        market_cap=market_cap,
        market_cap_billions=market_cap / BILLION,
        formatted_market_cap=format_market_cap(market_cap),
        adjustment_note=adjustment_note(raw_price, adjusted_price),
    )
