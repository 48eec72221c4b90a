"""Application services: price providers, on-demand analysis and the morning scan."""

from .analysis import AnalysisService, normalize_symbol, position_sizing
from .morning_scan import MorningScanService
from .price_provider import PriceHistoryProvider, YFinancePriceProvider, to_provider_symbol


__all__ = [
    "AnalysisService",
    "MorningScanService",
    "PriceHistoryProvider",
    "YFinancePriceProvider",
    "normalize_symbol",
    "position_sizing",
    "to_provider_symbol",
]
