"""
On-demand stock analysis.

Orchestrates one analysis per request:

    fresh cached analysis?  -> rebuild the record from the store (no indicator work)
    otherwise               -> fetch history, compute indicators, run the signal
                               strategy, persist, return

The store and the clock are injected so cache freshness is testable without a
server or wall-clock time. Persistence happens after the record is built and
never fails the request.

Usage:
    service = AnalysisService(provider=YFinancePriceProvider(), store=InMemoryAnalysisStore())
    record = await service.analyze("RELIANCE")
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta, timezone

from swingdesk.cache.store import AnalysisStore
from swingdesk.core.config import Settings, settings as default_settings
from swingdesk.core.exceptions import InvalidSymbolError, NoDataError
from swingdesk.core.logging import get_logger
from swingdesk.domain.analysis import IndicatorSnapshot, StoredAnalysis
from swingdesk.domain.price import PriceBar
from swingdesk.quant_engine.indicators import IndicatorSet, compute_indicators
from swingdesk.quant_engine.signals import SignalContext, SignalResult, SignalStrategy, get_strategy
from swingdesk.quant_engine.support_resistance import estimate_levels
from swingdesk.schemas.analysis import (
    AnalysisRecord,
    ChartBar,
    PositionSizing,
    SupportResistanceView,
    TechnicalsView,
)
from swingdesk.services.price_provider import PriceHistoryProvider


logger = get_logger("services.analysis")

Clock = Callable[[], datetime]

# Display defaults when a cached analysis has no stored indicator snapshot
FALLBACK_DMA_FACTOR = 0.98
FALLBACK_RSI = 50.0
FALLBACK_ATR = 10.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_symbol(symbol: str) -> str:
    """Trim and upper-case a user-supplied symbol."""
    normalized = (symbol or "").strip().upper()
    if not normalized:
        raise InvalidSymbolError()
    return normalized


def position_sizing(current_price: float, cfg: Settings) -> PositionSizing:
    """Fixed exposure sizing: floor(exposure / price) shares."""
    shares = math.floor(cfg.position_exposure / current_price) if current_price > 0 else 0
    return PositionSizing(
        portfolio_value=cfg.portfolio_value,
        recommended_shares=shares,
        exposure=cfg.position_exposure,
        max_risk=cfg.position_max_risk,
    )


def _chart(bars: Sequence[PriceBar]) -> list[ChartBar]:
    return [ChartBar.model_validate(bar) for bar in bars]


class AnalysisService:
    """Cache-aware analysis orchestrator for a single symbol."""

    def __init__(
        self,
        provider: PriceHistoryProvider,
        store: AnalysisStore,
        *,
        strategy: SignalStrategy | None = None,
        clock: Clock = utc_now,
        config: Settings | None = None,
    ) -> None:
        self.provider = provider
        self.store = store
        self.config = config or default_settings
        self.strategy = strategy or get_strategy(self.config.analysis_strategy)
        self.clock = clock
        self.ttl = timedelta(hours=self.config.analysis_ttl_hours)

    async def analyze(self, symbol: str, force_refresh: bool = False) -> AnalysisRecord:
        """Return a fresh cached analysis or compute a new one."""
        symbol = normalize_symbol(symbol)
        now = self.clock()

        if not force_refresh:
            cached = await self.store.get_fresh_analysis(symbol, now)
            if cached is not None:
                logger.info(f"Returning cached analysis for {symbol}")
                return await self._from_cache(cached, now)

        return await self._fresh(symbol, now)

    # ------------------------------------------------------------------
    # Cache hit
    # ------------------------------------------------------------------

    async def _from_cache(self, cached: StoredAnalysis, now: datetime) -> AnalysisRecord:
        snapshot, bars = await asyncio.gather(
            self.store.get_latest_indicator_snapshot(cached.symbol),
            self.store.get_recent_price_bars(cached.symbol, self.config.chart_bars),
        )
        price = cached.current_price

        if snapshot is not None:
            technicals = TechnicalsView(
                price=price,
                dma50=snapshot.dma50,
                rsi14=snapshot.rsi14,
                macd_signal=snapshot.macd_direction,
                volume_vs_avg=snapshot.volume_ratio,
                atr14=snapshot.atr14,
            )
        else:
            technicals = TechnicalsView(
                price=price,
                dma50=price * FALLBACK_DMA_FACTOR,
                rsi14=FALLBACK_RSI,
                macd_signal="NEUTRAL",
                volume_vs_avg=1.0,
                atr14=FALLBACK_ATR,
            )

        levels = estimate_levels(price)
        return AnalysisRecord(
            symbol=cached.symbol,
            company_name=cached.company_name or cached.symbol,
            signal=cached.signal,
            confidence=cached.confidence,
            current_price=price,
            entry_price=cached.entry_price,
            stop_loss=cached.stop_loss,
            target=cached.target,
            risk_reward=cached.risk_reward or "1:2",
            reasons=list(cached.reasons),
            recommendation=cached.recommendation,
            strategy=cached.strategy,
            technicals=technicals,
            position_sizing=position_sizing(price, self.config),
            chart_data=_chart(bars),
            support_resistance=SupportResistanceView(**levels.to_dict()),
            cached=True,
            generated_at=cached.created_at,
        )

    # ------------------------------------------------------------------
    # Fresh analysis
    # ------------------------------------------------------------------

    async def _fresh(self, symbol: str, now: datetime) -> AnalysisRecord:
        logger.info(f"Fetching fresh data for {symbol}")
        history = await self.provider.get_history(symbol)

        if not history.current_price:
            logger.warning(f"Unable to fetch current stock price for {symbol}")
            raise NoDataError(details={"symbol": symbol})

        price = float(history.current_price)
        indicators = compute_indicators(
            history.bars,
            current_volume=history.current_volume,
            macd_mode=self.config.macd_signal_mode,
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
        levels = estimate_levels(price)
        chart_bars = history.bars[-self.config.chart_bars:]
        company_name = history.company_name or symbol

        record = AnalysisRecord(
            symbol=symbol,
            company_name=company_name,
            signal=result.signal.value,
            confidence=result.confidence,
            current_price=price,
            entry_price=result.entry_price,
            stop_loss=result.stop_loss,
            target=result.target,
            risk_reward=result.risk_reward,
            reasons=result.reasons,
            recommendation=result.recommendation,
            strategy=result.strategy,
            technicals=TechnicalsView(
                price=price,
                dma50=indicators.dma50,
                rsi14=indicators.rsi14,
                macd_signal=indicators.macd.direction,
                volume_vs_avg=indicators.volume_ratio,
                atr14=indicators.atr14,
            ),
            position_sizing=position_sizing(price, self.config),
            chart_data=_chart(chart_bars),
            support_resistance=SupportResistanceView(**levels.to_dict()),
            cached=False,
            generated_at=now,
        )

        await self._persist(symbol, company_name, price, now, chart_bars, indicators, result)

        logger.info(
            f"Analysis complete for {symbol}: {result.signal.value} {result.confidence}",
            extra={"symbol": symbol, "signal": result.signal.value, "strategy": result.strategy},
        )
        return record

    async def _persist(
        self,
        symbol: str,
        company_name: str,
        price: float,
        now: datetime,
        bars: Sequence[PriceBar],
        indicators: IndicatorSet,
        result: SignalResult,
    ) -> None:
        """Write prices, indicators and the analysis concurrently; failures are logged."""
        today: date = now.date()
        stored = StoredAnalysis(
            symbol=symbol,
            company_name=company_name,
            signal=result.signal.value,
            confidence=result.confidence,
            current_price=price,
            entry_price=result.entry_price,
            stop_loss=result.stop_loss,
            target=result.target,
            risk_reward=result.risk_reward,
            reasons=result.reasons,
            recommendation=result.recommendation,
            strategy=result.strategy,
            created_at=now,
            expires_at=now + self.ttl,
        )
        writes = {
            "price_bars": self.store.upsert_price_bars(symbol, bars),
            "indicators": self.store.upsert_indicator_snapshot(
                IndicatorSnapshot.from_indicators(symbol, today, indicators)
            ),
            "analysis": self.store.upsert_analysis(stored),
        }
        outcomes = await asyncio.gather(*writes.values(), return_exceptions=True)
        for name, outcome in zip(writes, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Failed to persist {name} for {symbol}: {outcome}")
