"""Valkey-backed analysis store.

Key layout (all under ``swingdesk:v1:<prefix>:``):
    analysis:<SYMBOL>        JSON StoredAnalysis, EX = seconds until expiry
    indicators:<SYMBOL>      hash date -> JSON IndicatorSnapshot
    prices:<SYMBOL>          hash date -> JSON PriceBar
    morning:<YYYY-MM-DD>     JSON morning scan payload, EX = 1 day
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Sequence
from datetime import date, datetime
from typing import Any, Union

from redis.asyncio import Redis

from swingdesk.core.exceptions import StoreError
from swingdesk.core.logging import get_logger
from swingdesk.domain.analysis import IndicatorSnapshot, StoredAnalysis
from swingdesk.domain.price import PriceBar

from .client import get_valkey_client


logger = get_logger("cache.valkey_store")

CACHE_PREFIX = "swingdesk"
CACHE_VERSION = "v1"

MORNING_SCAN_TTL = 24 * 60 * 60


def cache_key(*parts: Union[str, int, float], prefix: str = "cache") -> str:
    """
    Generate a consistent cache key from parts.

    Usage:
        cache_key("analysis", "TCS") -> "swingdesk:v1:cache:analysis:TCS"
    """
    sanitized = [str(part).replace(":", "_") for part in parts]
    return f"{CACHE_PREFIX}:{CACHE_VERSION}:{prefix}:{':'.join(sanitized)}"


class ValkeyAnalysisStore:
    """AnalysisStore over a Redis-protocol server."""

    def __init__(
        self,
        client_factory: Callable[[], Awaitable[Redis]] = get_valkey_client,
        prefix: str = "store",
    ) -> None:
        self._client_factory = client_factory
        self.prefix = prefix

    def _key(self, *parts: Union[str, int, float]) -> str:
        return cache_key(*parts, prefix=self.prefix)

    async def get_fresh_analysis(self, symbol: str, now: datetime) -> StoredAnalysis | None:
        try:
            client = await self._client_factory()
            raw = await client.get(self._key("analysis", symbol))
            if raw is None:
                logger.debug(f"Cache miss: analysis {symbol}")
                return None
            analysis = StoredAnalysis.model_validate_json(raw)
        except Exception as e:
            # Unreachable server and unreadable entries both count as a miss
            logger.warning(f"Analysis cache get failed for {symbol}: {e}")
            return None
        # The server TTL is coarse; expiry is decided on the stored instant.
        return analysis if analysis.is_fresh(now) else None

    async def upsert_analysis(self, analysis: StoredAnalysis) -> None:
        client = await self._client_factory()
        ttl = int((analysis.expires_at - analysis.created_at).total_seconds())
        try:
            await client.set(
                self._key("analysis", analysis.symbol),
                analysis.model_dump_json(),
                ex=max(ttl, 1),
            )
        except Exception as e:
            raise StoreError(f"Failed to store analysis for {analysis.symbol}") from e

    async def get_latest_indicator_snapshot(self, symbol: str) -> IndicatorSnapshot | None:
        try:
            client = await self._client_factory()
            rows = await client.hgetall(self._key("indicators", symbol))
            if not rows:
                return None
            return IndicatorSnapshot.model_validate_json(rows[max(rows)])
        except Exception as e:
            logger.warning(f"Indicator snapshot get failed for {symbol}: {e}")
            return None

    async def upsert_indicator_snapshot(self, snapshot: IndicatorSnapshot) -> None:
        client = await self._client_factory()
        try:
            await client.hset(
                self._key("indicators", snapshot.symbol),
                snapshot.date.isoformat(),
                snapshot.model_dump_json(),
            )
        except Exception as e:
            raise StoreError(f"Failed to store indicators for {snapshot.symbol}") from e

    async def get_recent_price_bars(self, symbol: str, limit: int) -> list[PriceBar]:
        if limit <= 0:
            return []
        try:
            client = await self._client_factory()
            rows = await client.hgetall(self._key("prices", symbol))
            return [PriceBar.model_validate_json(rows[d]) for d in sorted(rows)[-limit:]]
        except Exception as e:
            logger.warning(f"Price bars get failed for {symbol}: {e}")
            return []

    async def upsert_price_bars(self, symbol: str, bars: Sequence[PriceBar]) -> None:
        if not bars:
            return
        client = await self._client_factory()
        mapping = {bar.date.isoformat(): bar.model_dump_json() for bar in bars}
        try:
            await client.hset(self._key("prices", symbol), mapping=mapping)
        except Exception as e:
            raise StoreError(f"Failed to store prices for {symbol}") from e

    async def get_morning_scan(self, day: date) -> dict[str, Any] | None:
        try:
            client = await self._client_factory()
            raw = await client.get(self._key("morning", day.isoformat()))
            return json.loads(raw) if raw is not None else None
        except Exception as e:
            logger.warning(f"Morning scan cache get failed for {day}: {e}")
            return None

    async def put_morning_scan(self, day: date, payload: dict[str, Any]) -> None:
        client = await self._client_factory()
        try:
            await client.set(
                self._key("morning", day.isoformat()),
                json.dumps(payload, default=str),
                ex=MORNING_SCAN_TTL,
            )
        except Exception as e:
            raise StoreError("Failed to store morning scan") from e
