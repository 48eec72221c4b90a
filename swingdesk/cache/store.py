"""Analysis store contract and the in-memory implementation.

The store holds, per symbol:
- the most recent analysis with its expiry instant
- indicator snapshots keyed by date
- recent price bars keyed by date
plus one morning scan result per calendar day.

Usage:
    store = InMemoryAnalysisStore()
    await store.upsert_analysis(stored)
    cached = await store.get_fresh_analysis("RELIANCE", now)
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import date, datetime
from typing import Any, Protocol

from swingdesk.domain.analysis import IndicatorSnapshot, StoredAnalysis
from swingdesk.domain.price import PriceBar


class AnalysisStore(Protocol):
    """Persistence seam for the analysis orchestrator and morning scan."""

    async def get_fresh_analysis(self, symbol: str, now: datetime) -> StoredAnalysis | None: ...

    async def upsert_analysis(self, analysis: StoredAnalysis) -> None: ...

    async def get_latest_indicator_snapshot(self, symbol: str) -> IndicatorSnapshot | None: ...

    async def upsert_indicator_snapshot(self, snapshot: IndicatorSnapshot) -> None: ...

    async def get_recent_price_bars(self, symbol: str, limit: int) -> list[PriceBar]: ...

    async def upsert_price_bars(self, symbol: str, bars: Sequence[PriceBar]) -> None: ...

    async def get_morning_scan(self, day: date) -> dict[str, Any] | None: ...

    async def put_morning_scan(self, day: date, payload: dict[str, Any]) -> None: ...


class InMemoryAnalysisStore:
    """Process-local store. Suitable for development, tests and single workers."""

    def __init__(self) -> None:
        self._analyses: dict[str, StoredAnalysis] = {}
        self._snapshots: dict[str, dict[date, IndicatorSnapshot]] = {}
        self._prices: dict[str, dict[date, PriceBar]] = {}
        self._scans: dict[date, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def get_fresh_analysis(self, symbol: str, now: datetime) -> StoredAnalysis | None:
        analysis = self._analyses.get(symbol)
        if analysis is not None and analysis.is_fresh(now):
            return analysis
        return None

    async def upsert_analysis(self, analysis: StoredAnalysis) -> None:
        async with self._lock:
            self._analyses[analysis.symbol] = analysis

    async def get_latest_indicator_snapshot(self, symbol: str) -> IndicatorSnapshot | None:
        by_date = self._snapshots.get(symbol)
        if not by_date:
            return None
        return by_date[max(by_date)]

    async def upsert_indicator_snapshot(self, snapshot: IndicatorSnapshot) -> None:
        async with self._lock:
            self._snapshots.setdefault(snapshot.symbol, {})[snapshot.date] = snapshot

    async def get_recent_price_bars(self, symbol: str, limit: int) -> list[PriceBar]:
        by_date = self._prices.get(symbol, {})
        return [by_date[d] for d in sorted(by_date)[-limit:]] if limit > 0 else []

    async def upsert_price_bars(self, symbol: str, bars: Sequence[PriceBar]) -> None:
        async with self._lock:
            by_date = self._prices.setdefault(symbol, {})
            for bar in bars:
                by_date[bar.date] = bar

    async def get_morning_scan(self, day: date) -> dict[str, Any] | None:
        return self._scans.get(day)

    async def put_morning_scan(self, day: date, payload: dict[str, Any]) -> None:
        async with self._lock:
            self._scans[day] = payload
