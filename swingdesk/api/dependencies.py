"""API dependencies wiring the store, price provider and services.

Each dependency can be swapped in tests via ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from swingdesk.cache.store import AnalysisStore, InMemoryAnalysisStore
from swingdesk.cache.valkey_store import ValkeyAnalysisStore
from swingdesk.core.config import settings
from swingdesk.services.analysis import AnalysisService
from swingdesk.services.morning_scan import MorningScanService
from swingdesk.services.price_provider import PriceHistoryProvider, YFinancePriceProvider


__all__ = [
    "get_analysis_service",
    "get_morning_scan_service",
    "get_price_provider",
    "get_store",
]


@lru_cache
def get_store() -> AnalysisStore:
    """Process-wide analysis store for the configured backend."""
    if settings.cache_backend == "valkey":
        return ValkeyAnalysisStore()
    return InMemoryAnalysisStore()


@lru_cache
def get_price_provider() -> PriceHistoryProvider:
    return YFinancePriceProvider()


def get_analysis_service(
    store: AnalysisStore = Depends(get_store),
    provider: PriceHistoryProvider = Depends(get_price_provider),
) -> AnalysisService:
    return AnalysisService(provider=provider, store=store)


def get_morning_scan_service(
    store: AnalysisStore = Depends(get_store),
    provider: PriceHistoryProvider = Depends(get_price_provider),
) -> MorningScanService:
    return MorningScanService(provider=provider, store=store)
