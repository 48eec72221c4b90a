"""Domain models for strongly-typed data throughout the application.

Usage:
    from swingdesk.domain import PriceBar, PriceHistory

    history: PriceHistory = await provider.get_history("RELIANCE")
"""

from swingdesk.domain.analysis import (
    IndicatorSnapshot,
    StoredAnalysis,
)
from swingdesk.domain.price import (
    PriceBar,
    PriceHistory,
)


__all__ = [
    "IndicatorSnapshot",
    "PriceBar",
    "PriceHistory",
    "StoredAnalysis",
]
