"""Analysis domain models persisted by the analysis store."""

from __future__ import annotations

from datetime import date as DateType
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field


if TYPE_CHECKING:
    from swingdesk.quant_engine.indicators import IndicatorSet


class StoredAnalysis(BaseModel):
    """Cached result of an on-demand analysis.

    Fresh while ``expires_at`` is in the future.
    """

    symbol: str
    company_name: str | None = None
    signal: str
    confidence: int
    current_price: float
    entry_price: float
    stop_loss: float
    target: float
    risk_reward: str = "1:2"
    reasons: list[str] = Field(default_factory=list)
    recommendation: str | None = None
    strategy: str = "margin"
    created_at: datetime
    expires_at: datetime

    def is_fresh(self, now: datetime) -> bool:
        return self.expires_at > now


class IndicatorSnapshot(BaseModel):
    """Indicator values stored for a symbol and date."""

    symbol: str
    date: DateType
    rsi14: float
    macd_line: float
    macd_signal: float
    macd_histogram: float
    dma50: float
    dma200: float
    atr14: float
    volume_sma20: float
    volume_ratio: float

    @classmethod
    def from_indicators(cls, symbol: str, day: DateType, ind: IndicatorSet) -> "IndicatorSnapshot":
        return cls(
            symbol=symbol,
            date=day,
            rsi14=ind.rsi14,
            macd_line=ind.macd.line,
            macd_signal=ind.macd.signal,
            macd_histogram=ind.macd.histogram,
            dma50=ind.dma50,
            dma200=ind.dma200,
            atr14=ind.atr14,
            volume_sma20=ind.volume_sma20,
            volume_ratio=ind.volume_ratio,
        )

    @property
    def macd_direction(self) -> str:
        if self.macd_line > self.macd_signal:
            return "BULLISH"
        if self.macd_line < self.macd_signal:
            return "BEARISH"
        return "NEUTRAL"
