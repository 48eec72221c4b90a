"""
Technical indicator library.

Pure functions over ordered (oldest first) price and volume series. Every
indicator degrades to a neutral or degenerate value on short input instead of
raising, so partial histories lower signal quality rather than abort analysis:

    rsi -> 50, sma -> last price, ema -> last price (or 0 when empty), atr -> 0

Usage:
    from swingdesk.quant_engine.indicators import rsi, sma, macd, compute_indicators

    closes = [100.0, 101.5, 99.0, 102.0, ...]
    rsi_value = rsi(closes, period=14)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal, Sequence

import numpy as np

from swingdesk.domain.price import PriceBar


MacdMode = Literal["approx", "ema"]

# Signal line approximation used by the default MACD variant
MACD_SIGNAL_FACTOR = 0.8
MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL_PERIOD = 9

VOLUME_SMA_PERIOD = 20


@dataclass(frozen=True)
class MacdResult:
    """MACD line, signal and histogram plus the signal variant used."""

    line: float
    signal: float
    histogram: float
    mode: MacdMode = "approx"

    @property
    def direction(self) -> Literal["BULLISH", "BEARISH", "NEUTRAL"]:
        if self.line > self.signal:
            return "BULLISH"
        if self.line < self.signal:
            return "BEARISH"
        return "NEUTRAL"


@dataclass(frozen=True)
class IndicatorSet:
    """Indicators derived from a price bar sequence ending at a reference date."""

    rsi14: float
    dma50: float
    dma200: float
    macd: MacdResult
    atr14: float
    volume_sma20: float
    volume_ratio: float

    def to_dict(self) -> dict:
        return asdict(self)


def rsi(prices: Sequence[float], period: int = 14) -> float:
    """
    Relative Strength Index using a simple mean of the last ``period`` moves.

    Returns 50 when fewer than ``period + 1`` observations exist and 100 when
    the average loss is exactly zero.
    """
    if len(prices) < period + 1:
        return 50.0

    deltas = np.diff(np.asarray(prices, dtype=float))
    gains = np.clip(deltas, 0, None)
    losses = np.clip(-deltas, 0, None)

    avg_gain = float(gains[-period:].sum()) / period
    avg_loss = float(losses[-period:].sum()) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def sma(prices: Sequence[float], period: int) -> float:
    """Simple moving average of the last ``period`` values.

    With fewer than ``period`` values the most recent value is returned as is.
    """
    if len(prices) == 0:
        return 0.0
    if len(prices) < period:
        return float(prices[-1])
    return float(np.mean(np.asarray(prices[-period:], dtype=float)))


def ema(prices: Sequence[float], period: int) -> float:
    """
    Exponential moving average with k = 2 / (period + 1).

    Seeded with the first price of the series rather than an SMA of the first
    ``period`` values; early values are biased towards that first observation.
    """
    if len(prices) == 0:
        return 0.0
    if len(prices) < period:
        return float(prices[-1])

    k = 2.0 / (period + 1)
    value = float(prices[0])
    for price in prices[1:]:
        value = float(price) * k + value * (1.0 - k)
    return value


def ema_series(prices: Sequence[float], period: int) -> list[float]:
    """EMA at every index, seeded with the first price."""
    if len(prices) == 0:
        return []

    k = 2.0 / (period + 1)
    value = float(prices[0])
    out = [value]
    for price in prices[1:]:
        value = float(price) * k + value * (1.0 - k)
        out.append(value)
    return out


def macd_line_series(prices: Sequence[float]) -> list[float]:
    """
    MACD line at every index, with the same short-series rule as ``ema``.

    Before ``period`` prices are available an EMA is the latest price, so the
    line is 0 until 12 prices and ``ema12 - price`` until 26. The last element
    always equals the scalar line from ``macd``.
    """
    fast = ema_series(prices, MACD_FAST)
    slow = ema_series(prices, MACD_SLOW)
    out = []
    for i, price in enumerate(prices):
        f = fast[i] if i + 1 >= MACD_FAST else float(price)
        s = slow[i] if i + 1 >= MACD_SLOW else float(price)
        out.append(f - s)
    return out


def macd(prices: Sequence[float], mode: MacdMode = "approx") -> MacdResult:
    """
    MACD line, signal and histogram.

    ``approx`` (default): signal = line * 0.8.
    ``ema``: signal = 9-period EMA of the MACD line series. The histogram sign
    can differ between the two variants.
    """
    line = ema(prices, MACD_FAST) - ema(prices, MACD_SLOW)

    if mode == "ema":
        signal = ema(macd_line_series(prices), MACD_SIGNAL_PERIOD)
    elif mode == "approx":
        signal = line * MACD_SIGNAL_FACTOR
    else:
        raise ValueError(f"Unknown MACD mode: {mode}")

    return MacdResult(line=line, signal=signal, histogram=line - signal, mode=mode)


def true_ranges(bars: Sequence[PriceBar]) -> list[float]:
    """True range for every bar after the first."""
    out = []
    for prev, bar in zip(bars, bars[1:]):
        out.append(
            max(
                bar.high - bar.low,
                abs(bar.high - prev.close),
                abs(bar.low - prev.close),
            )
        )
    return out


def atr(bars: Sequence[PriceBar], period: int = 14) -> float:
    """Average True Range over the last ``period`` true ranges (0 if too short)."""
    if len(bars) < period:
        return 0.0

    recent = true_ranges(bars)[-period:]
    return sum(recent) / period


def volume_ratio(current_volume: float, volumes: Sequence[float], period: int = VOLUME_SMA_PERIOD) -> float:
    """Current volume relative to its moving average; a zero average counts as 1."""
    average = sma(volumes, period)
    return float(current_volume) / (average or 1.0)


def compute_indicators(
    bars: Sequence[PriceBar],
    current_volume: float | None = None,
    macd_mode: MacdMode = "approx",
) -> IndicatorSet:
    """
    Compute the full indicator set for a bar sequence.

    Args:
        bars: Price bars, oldest first
        current_volume: Latest session volume; defaults to the last bar's volume
        macd_mode: MACD signal line variant

    Returns:
        IndicatorSet
    """
    closes = [bar.close for bar in bars]
    volumes = [float(bar.volume) for bar in bars]

    if current_volume is None:
        current_volume = volumes[-1] if volumes else 0.0

    volume_avg = sma(volumes, VOLUME_SMA_PERIOD)

    return IndicatorSet(
        rsi14=rsi(closes, 14),
        dma50=sma(closes, 50),
        dma200=sma(closes, 200),
        macd=macd(closes, mode=macd_mode),
        atr14=atr(bars, 14),
        volume_sma20=volume_avg,
        volume_ratio=volume_ratio(current_volume, volumes),
    )
