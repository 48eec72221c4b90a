"""
Signal strategies - turn an indicator set and a price into a trading signal.

Each strategy is a distinct scoring policy behind the same contract:

    strategy.evaluate(context) -> SignalResult

- ``margin``: on-demand BUY/AVOID vote counting; confidence is driven by the
  margin between bullish and bearish votes, floored at 55 and capped at 95.
- ``morning_scan``: watchlist BUY/HOLD/SELL with fixed confidence steps
  (50 base, 75 bullish, +10 on a volume spike, 70 bearish) over 20/30-day
  moving averages and 5-day momentum.
- ``swing``: weighted trend/RSI/MACD/volume point scores with BUY/HOLD/SELL
  and a recommendation sentence.

The policies have different confidence semantics and are kept separate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence

from swingdesk.quant_engine.indicators import IndicatorSet, sma


# =============================================================================
# Data Classes
# =============================================================================


class Signal(str, Enum):
    """Categorical trading signal."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"
    AVOID = "AVOID"


@dataclass
class SignalContext:
    """Everything a strategy may look at for one symbol."""

    indicators: IndicatorSet
    current_price: float
    reference_ma: float
    closes: Sequence[float] = ()
    volumes: Sequence[float] = ()
    current_volume: float = 0.0


@dataclass
class SignalResult:
    """Signal, confidence, reasons and the derived price levels."""

    signal: Signal
    confidence: int
    reasons: list[str]
    entry_price: float
    stop_loss: float
    target: float
    risk_reward: str
    strategy: str
    recommendation: str | None = None
    metrics: dict[str, float] = field(default_factory=dict)


class SignalStrategy(Protocol):
    """A named scoring policy that produces a SignalResult."""

    name: str

    def evaluate(self, context: SignalContext) -> SignalResult: ...


# =============================================================================
# Helpers
# =============================================================================


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def round_price(value: float) -> float:
    """Round a currency amount to cent (paisa) precision, halves upward.

    ``round()`` sends exact halves to the even neighbour (100.125 -> 100.12);
    prices here always round half up (100.125 -> 100.13).
    """
    return math.floor(value * 100 + 0.5) / 100


def format_risk_reward(risk: float, reward: float) -> str:
    """Format as "1:<reward/risk>" with one decimal; non-positive risk gives "1:2"."""
    if risk > 0:
        return f"1:{reward / risk:.1f}"
    return "1:2"


# =============================================================================
# Margin strategy (on-demand analysis)
# =============================================================================


RSI_OVERSOLD = 30
RSI_OVERBOUGHT = 70
HIGH_VOLUME_RATIO = 1.2


class MarginScoringStrategy:
    """BUY/AVOID by bullish vs bearish vote count."""

    name = "margin"

    def evaluate(self, context: SignalContext) -> SignalResult:
        ind = context.indicators
        price = context.current_price
        reasons: list[str] = []
        bullish = 0
        bearish = 0

        if ind.rsi14 < RSI_OVERSOLD:
            bullish += 2
            reasons.append("RSI Oversold")
        elif ind.rsi14 > RSI_OVERBOUGHT:
            bearish += 2
            reasons.append("RSI Overbought")

        if price > context.reference_ma:
            bullish += 1
            reasons.append("Above 50 DMA")
        else:
            bearish += 1
            reasons.append("Below 50 DMA")

        if ind.macd.line > ind.macd.signal:
            bullish += 1
            reasons.append("MACD Bullish")
        else:
            bearish += 1
            reasons.append("MACD Bearish")

        if ind.volume_ratio > HIGH_VOLUME_RATIO:
            bullish += 1
            reasons.append("High Volume")

        signal = Signal.BUY if bullish > bearish else Signal.AVOID
        confidence = clamp(abs(bullish - bearish) / 5 * 100, 55, 95)

        entry = price * 1.002 if signal is Signal.BUY else price
        stop = price * 0.95
        target = price * 1.08

        return SignalResult(
            signal=signal,
            confidence=int(round(confidence)),
            reasons=reasons,
            entry_price=round_price(entry),
            stop_loss=round_price(stop),
            target=round_price(target),
            risk_reward=format_risk_reward(entry - stop, target - entry),
            strategy=self.name,
        )


# =============================================================================
# Morning scan strategy (watchlist batch)
# =============================================================================


SCAN_FAST_MA = 20
SCAN_SLOW_MA = 30
SCAN_MOMENTUM_DAYS = 5
SCAN_MOMENTUM_PCT = 2.0
SCAN_VOLUME_PERIOD = 10
SCAN_VOLUME_SPIKE = 1.2

SCAN_BASE_CONFIDENCE = 50
SCAN_BULLISH_CONFIDENCE = 75
SCAN_BEARISH_CONFIDENCE = 70
SCAN_VOLUME_BONUS = 10


def momentum_pct(closes: Sequence[float], days: int = SCAN_MOMENTUM_DAYS) -> float:
    """Percent change of the last close over ``days`` sessions (0 if too short)."""
    if len(closes) < days + 1:
        return 0.0
    base = closes[-(days + 1)]
    if not base:
        return 0.0
    return (closes[-1] - base) / base * 100.0


class MorningScanStrategy:
    """BUY/HOLD/SELL with fixed confidence steps over short windows."""

    name = "morning_scan"

    def evaluate(self, context: SignalContext) -> SignalResult:
        price = context.current_price
        closes = list(context.closes)
        volumes = list(context.volumes)

        dma20 = sma(closes, SCAN_FAST_MA) if closes else price
        dma30 = sma(closes, SCAN_SLOW_MA) if closes else price
        momentum = momentum_pct(closes)
        avg_volume = sma(volumes, SCAN_VOLUME_PERIOD)
        volume_spike = context.current_volume > avg_volume * SCAN_VOLUME_SPIKE

        reasons: list[str] = []

        if price > dma20 > dma30 and momentum > SCAN_MOMENTUM_PCT:
            signal = Signal.BUY
            confidence = SCAN_BULLISH_CONFIDENCE
            reasons += [
                "Price above 20 DMA",
                "20 DMA above 30 DMA",
                f"5-day momentum +{momentum:.1f}%",
            ]
            if volume_spike:
                confidence += SCAN_VOLUME_BONUS
                reasons.append("Volume spike")
        elif price < dma20 < dma30 and momentum < -SCAN_MOMENTUM_PCT:
            signal = Signal.SELL
            confidence = SCAN_BEARISH_CONFIDENCE
            reasons += [
                "Price below 20 DMA",
                "20 DMA below 30 DMA",
                f"5-day momentum {momentum:.1f}%",
            ]
        else:
            signal = Signal.HOLD
            confidence = SCAN_BASE_CONFIDENCE
            reasons.append("No clear trend")
            if volume_spike:
                confidence += SCAN_VOLUME_BONUS
                reasons.append("Volume spike")

        entry = price
        stop = price * 0.97
        target = price * 1.05

        return SignalResult(
            signal=signal,
            confidence=confidence,
            reasons=reasons,
            entry_price=round_price(entry),
            stop_loss=round_price(stop),
            target=round_price(target),
            risk_reward=format_risk_reward(entry - stop, target - entry),
            strategy=self.name,
            metrics={
                "dma20": dma20,
                "dma30": dma30,
                "momentum_pct": momentum,
                "avg_volume": avg_volume,
            },
        )


# =============================================================================
# Swing strategy (weighted scores)
# =============================================================================


class SwingScoringStrategy:
    """Weighted trend (40) / RSI (30) / MACD (20) / volume (10) scoring."""

    name = "swing"

    def evaluate(self, context: SignalContext) -> SignalResult:
        ind = context.indicators
        price = context.current_price
        ma = context.reference_ma
        closes = list(context.closes) or [price]
        volumes = list(context.volumes)
        reasons: list[str] = []
        buy_score = 0
        sell_score = 0

        # Trend
        lookback = closes[-5] if len(closes) >= 5 else closes[0]
        rising = closes[-1] > lookback
        falling = closes[-1] < lookback
        if price > ma and rising:
            buy_score += 40
            reasons.append("Strong uptrend: Price above 50 DMA with recent momentum")
        elif price < ma and falling:
            sell_score += 40
            reasons.append("Downtrend: Price below 50 DMA with negative momentum")
        elif price > ma:
            buy_score += 20
            reasons.append("Price above 50 DMA but momentum weakening")

        # RSI
        rsi = ind.rsi14
        if rsi < 30:
            buy_score += 30
            reasons.append(f"RSI oversold at {rsi:.1f} - potential bounce")
        elif 30 < rsi < 45:
            buy_score += 20
            reasons.append(f"RSI recovering from oversold at {rsi:.1f}")
        elif 70 < rsi < 80:
            sell_score += 20
            reasons.append(f"RSI overbought at {rsi:.1f} - potential correction")
        elif rsi > 80:
            sell_score += 30
            reasons.append(f"RSI severely overbought at {rsi:.1f} - high risk")

        # MACD
        line, macd_signal = ind.macd.line, ind.macd.signal
        if line > macd_signal and line > 0:
            buy_score += 20
            reasons.append("MACD bullish crossover with positive momentum")
        elif line < macd_signal and line < 0:
            sell_score += 20
            reasons.append("MACD bearish crossover with negative momentum")

        # Volume confirmation
        if volumes:
            recent_volume = volumes[-1]
            avg_volume = sum(volumes[-20:]) / 20
            if recent_volume > avg_volume * 1.5:
                if buy_score > sell_score:
                    buy_score += 10
                    reasons.append(f"High volume confirmation ({recent_volume / 1000:.0f}K vs avg)")
                elif sell_score > buy_score:
                    sell_score += 10
                    reasons.append("High volume on weakness - distribution")

        confidence = clamp(max(buy_score, sell_score), 60, 95)

        if buy_score >= 70:
            signal = Signal.BUY
            recommendation = (
                f"Strong buy opportunity. Enter on dips with {price * 0.02:.2f} risk per share."
            )
        elif buy_score >= 50 and buy_score > sell_score * 1.3:
            signal = Signal.BUY
            recommendation = "Good entry point. Monitor price action and volume for confirmation."
        elif sell_score >= 70:
            signal = Signal.SELL
            recommendation = "Exit positions or take profits. Risk of further downside."
        elif sell_score >= 50 and sell_score > buy_score * 1.3:
            signal = Signal.SELL
            recommendation = "Consider reducing positions. Watch for support levels."
        else:
            signal = Signal.HOLD
            recommendation = "Wait for better entry/exit signals. Current risk-reward not favorable."

        if signal is Signal.BUY:
            entry, stop, target = price * 1.002, price * 0.95, price * 1.10
        elif signal is Signal.SELL:
            entry, stop, target = price * 0.998, price * 1.05, price * 0.90
        else:
            entry, stop, target = price, price * 0.97, price * 1.06

        return SignalResult(
            signal=signal,
            confidence=int(round(confidence)),
            reasons=reasons,
            entry_price=round_price(entry),
            stop_loss=round_price(stop),
            target=round_price(target),
            risk_reward=format_risk_reward(abs(entry - stop), abs(target - entry)),
            strategy=self.name,
            recommendation=recommendation,
        )


# =============================================================================
# Registry
# =============================================================================


STRATEGIES: dict[str, type] = {
    MarginScoringStrategy.name: MarginScoringStrategy,
    MorningScanStrategy.name: MorningScanStrategy,
    SwingScoringStrategy.name: SwingScoringStrategy,
}


def get_strategy(name: str) -> SignalStrategy:
    """Instantiate a strategy by name."""
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown signal strategy: {name}") from None
