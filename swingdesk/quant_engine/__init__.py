"""
Technical analysis engine
=========================

Pure, synchronous building blocks used by the analysis services:

- indicators: RSI, SMA, EMA, MACD, ATR and volume ratio
- signals: named signal strategies (margin, morning_scan, swing)
- support_resistance: percentage-offset support/resistance bands

Nothing in this package performs I/O or mutates shared state.
"""

from __future__ import annotations

from swingdesk.quant_engine.indicators import (
    IndicatorSet,
    MacdResult,
    atr,
    compute_indicators,
    ema,
    macd,
    macd_line_series,
    rsi,
    sma,
    volume_ratio,
)
from swingdesk.quant_engine.signals import (
    MarginScoringStrategy,
    MorningScanStrategy,
    Signal,
    SignalContext,
    SignalResult,
    SignalStrategy,
    SwingScoringStrategy,
    get_strategy,
)
from swingdesk.quant_engine.support_resistance import SupportResistance, estimate_levels


__all__ = [
    "IndicatorSet",
    "MacdResult",
    "MarginScoringStrategy",
    "MorningScanStrategy",
    "Signal",
    "SignalContext",
    "SignalResult",
    "SignalStrategy",
    "SupportResistance",
    "SwingScoringStrategy",
    "atr",
    "compute_indicators",
    "ema",
    "estimate_levels",
    "get_strategy",
    "macd",
    "macd_line_series",
    "rsi",
    "sma",
    "volume_ratio",
]
