"""
Morning scan over the configured watchlist.

Every watchlist symbol is fetched and scored concurrently (bounded by a
semaphore). A symbol whose fetch or scoring fails is dropped and logged; the
scan still returns whatever succeeded. The result is kept per calendar day and
reused unless a refresh is forced.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import date, datetime

from pydantic import ValidationError

from swingdesk.cache.store import AnalysisStore
from swingdesk.core.config import Settings, settings as default_settings
from swingdesk.core.exceptions import NoDataError
from swingdesk.core.logging import get_logger
from swingdesk.quant_engine.indicators import compute_indicators
from swingdesk.quant_engine.signals import MorningScanStrategy, SignalContext, round_price
from swingdesk.schemas.analysis import MorningScanResponse, ScanRecommendation
from swingdesk.services.analysis import Clock, utc_now
from swingdesk.services.price_provider import PriceHistoryProvider


logger = get_logger("services.morning_scan")


class MorningScanService:
    """Rank watchlist symbols by morning-scan confidence."""

    def __init__(
        self,
        provider: PriceHistoryProvider,
        store: AnalysisStore,
        *,
        watchlist: Sequence[str] | None = None,
        top_n: int | None = None,
        concurrency: int | None = None,
        clock: Clock = utc_now,
        config: Settings | None = None,
    ) -> None:
        cfg = config or default_settings
        self.provider = provider
        self.store = store
        self.watchlist = list(watchlist if watchlist is not None else cfg.morning_watchlist)
        self.top_n = top_n if top_n is not None else cfg.morning_top_n
        self.concurrency = concurrency if concurrency is not None else cfg.morning_concurrency
        self.macd_mode = cfg.macd_signal_mode
        self.clock = clock
        self.strategy = MorningScanStrategy()

    async def run(self, force_refresh: bool = False) -> MorningScanResponse:
        now = self.clock()
        today = now.date()

        if not force_refresh:
            cached = await self._stored_scan(today)
            if cached is not None:
                logger.info(f"Returning stored morning scan for {today}")
                return cached

        response = await self._scan(now)

        try:
            await self.store.put_morning_scan(
                today, response.model_dump(mode="json", by_alias=True)
            )
        except Exception as e:
            logger.warning(f"Failed to store morning scan: {e}")

        return response

    async def _stored_scan(self, today: date) -> MorningScanResponse | None:
        stored = await self.store.get_morning_scan(today)
        if stored is None:
            return None
        try:
            return MorningScanResponse.model_validate(stored)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable stored morning scan for {today}: {e}")
            return None

    async def _scan(self, now: datetime) -> MorningScanResponse:
        semaphore = asyncio.Semaphore(max(1, self.concurrency))

        async def bounded(symbol: str) -> ScanRecommendation:
            async with semaphore:
                return await self.scan_symbol(symbol)

        outcomes = await asyncio.gather(
            *(bounded(symbol) for symbol in self.watchlist),
            return_exceptions=True,
        )

        picks: list[ScanRecommendation] = []
        for symbol, outcome in zip(self.watchlist, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Morning scan skipped {symbol}: {outcome}")
                continue
            picks.append(outcome)

        # sorted() is stable, so ties keep watchlist order
        picks = sorted(picks, key=lambda p: p.confidence, reverse=True)[: self.top_n]

        logger.info(
            f"Morning scan complete: {len(picks)} picks from {len(self.watchlist)} symbols"
        )
        return MorningScanResponse(
            success=True,
            recommendations=picks,
            generated_at=now,
            total_analyzed=len(self.watchlist),
        )

    async def scan_symbol(self, symbol: str) -> ScanRecommendation:
        """Fetch and score one watchlist symbol."""
        history = await self.provider.get_history(symbol)
        if not history.current_price:
            raise NoDataError(f"No current price for {symbol}", details={"symbol": symbol})

        price = float(history.current_price)
        indicators = compute_indicators(
            history.bars,
            current_volume=history.current_volume,
            macd_mode=self.macd_mode,
        )
        result = self.strategy.evaluate(
            SignalContext(
                indicators=indicators,
                current_price=price,
                reference_ma=indicators.dma50,
                closes=history.closes,
                volumes=history.volumes,
                current_volume=history.current_volume,
            )
        )

        return ScanRecommendation(
            symbol=symbol,
            company_name=history.company_name or symbol,
            signal=result.signal.value,
            buying_price=result.entry_price,
            selling_price=result.target,
            stop_loss=result.stop_loss,
            confidence=result.confidence,
            reasons=result.reasons,
            dma20=round_price(result.metrics["dma20"]),
            dma30=round_price(result.metrics["dma30"]),
            volume=int(history.current_volume),
        )
