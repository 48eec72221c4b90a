"""Pydantic schemas for stock analysis and the morning scan.

Responses serialize with camelCase keys for the web client.
"""

from __future__ import annotations

from datetime import date as DateType
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model emitting camelCase aliases and accepting either spelling."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Requests
# ============================================================================


class AnalyzeRequest(CamelModel):
    """Body of POST /analysis."""

    symbol: str = Field(..., min_length=1, max_length=20, description="Ticker symbol")
    force_refresh: bool = Field(False, description="Ignore a fresh cached analysis")


# ============================================================================
# Analysis record
# ============================================================================


class TechnicalsView(CamelModel):
    """Indicator set projected for display."""

    price: float
    dma50: float = Field(..., description="Reference (50-day) moving average")
    rsi14: float
    macd_signal: str = Field(..., description="BULLISH, BEARISH or NEUTRAL")
    volume_vs_avg: float
    atr14: float


class PositionSizing(CamelModel):
    """Fixed-exposure position sizing for the current price."""

    portfolio_value: float
    recommended_shares: int
    exposure: float
    max_risk: float


class ChartBar(CamelModel):
    """One OHLCV bar for charting."""

    date: DateType
    open: float
    high: float
    low: float
    close: float
    volume: int


class SupportResistanceView(CamelModel):
    support: list[float] = Field(default_factory=list, description="Descending away from price")
    resistance: list[float] = Field(default_factory=list, description="Ascending away from price")


class AnalysisRecord(CamelModel):
    """Complete on-demand analysis for one symbol."""

    symbol: str
    company_name: str
    signal: str = Field(..., description="BUY, SELL, HOLD or AVOID")
    confidence: int = Field(..., ge=0, le=100)
    current_price: float
    entry_price: float
    stop_loss: float
    target: float
    risk_reward: str = Field(..., examples=["1:1.5"])
    reasons: list[str] = Field(default_factory=list)
    recommendation: str | None = None
    timeframe: str = "1-3 days"
    strategy: str = "margin"
    technicals: TechnicalsView
    position_sizing: PositionSizing
    chart_data: list[ChartBar] = Field(default_factory=list)
    support_resistance: SupportResistanceView
    cached: bool = False
    generated_at: datetime


# ============================================================================
# Morning scan
# ============================================================================


class ScanRecommendation(CamelModel):
    """One watchlist symbol scored by the morning scan."""

    symbol: str
    company_name: str
    signal: str = Field(..., description="BUY, HOLD or SELL")
    buying_price: float
    selling_price: float
    stop_loss: float
    confidence: int
    reasons: list[str] = Field(default_factory=list)
    dma20: float
    dma30: float
    volume: int


class MorningScanResponse(CamelModel):
    """Top watchlist picks sorted by confidence (descending)."""

    success: bool = True
    recommendations: list[ScanRecommendation] = Field(default_factory=list)
    generated_at: datetime
    total_analyzed: int
