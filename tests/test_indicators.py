"""Tests for the technical indicator library."""

from __future__ import annotations

import numpy as np
import pytest

from conftest import make_bars
from swingdesk.quant_engine.indicators import (
    MACD_SIGNAL_FACTOR,
    atr,
    compute_indicators,
    ema,
    ema_series,
    macd,
    macd_line_series,
    rsi,
    sma,
    true_ranges,
    volume_ratio,
)


class TestRsi:
    """RSI over the last ``period`` moves."""

    def test_short_series_is_neutral(self):
        assert rsi([100.0] * 14, period=14) == 50.0
        assert rsi([], period=14) == 50.0

    def test_monotonic_increase_is_100(self):
        assert rsi([float(i) for i in range(1, 31)]) == 100.0

    def test_monotonic_decrease_is_0(self):
        assert rsi([float(i) for i in range(30, 0, -1)]) == pytest.approx(0.0)

    def test_bounded(self):
        np.random.seed(42)
        prices = list(100 + np.cumsum(np.random.randn(200)))
        for end in range(15, 200, 7):
            value = rsi(prices[:end])
            assert 0.0 <= value <= 100.0

    def test_balanced_moves(self):
        # 7 gains and 7 losses of equal size
        prices = [100.0]
        for i in range(14):
            prices.append(prices[-1] + (1.0 if i % 2 == 0 else -1.0))
        assert rsi(prices) == pytest.approx(50.0)


class TestMovingAverages:
    def test_sma_empty(self):
        assert sma([], 20) == 0.0

    def test_sma_short_returns_last(self):
        assert sma([1.0, 2.0, 3.0], 20) == 3.0

    def test_sma_uses_last_period_values(self):
        assert sma([100.0, 1.0, 2.0, 3.0], 3) == pytest.approx(2.0)

    def test_ema_empty_and_short(self):
        assert ema([], 12) == 0.0
        assert ema([5.0, 7.0], 12) == 7.0

    def test_ema_constant_series(self):
        assert ema([42.0] * 30, 12) == pytest.approx(42.0)

    def test_ema_seeded_with_first_price(self):
        k = 2.0 / 4
        expected = 2.0 * k + 1.0 * (1 - k)
        expected = 3.0 * k + expected * (1 - k)
        assert ema([1.0, 2.0, 3.0], 3) == pytest.approx(expected)

    def test_ema_series_last_matches_ema(self):
        prices = [float(i) for i in range(1, 40)]
        assert ema_series(prices, 12)[-1] == pytest.approx(ema(prices, 12))
        assert len(ema_series(prices, 12)) == len(prices)


class TestMacd:
    def test_approx_signal_is_scaled_line(self):
        prices = [100.0 + i for i in range(60)]
        result = macd(prices)
        assert result.mode == "approx"
        assert result.signal == pytest.approx(result.line * MACD_SIGNAL_FACTOR)
        assert result.histogram == pytest.approx(result.line - result.signal)

    def test_rising_series_is_bullish_in_approx_mode(self):
        result = macd([100.0 + i for i in range(60)])
        assert result.line > 0
        assert result.direction == "BULLISH"

    def test_ema_mode_constant_series(self):
        result = macd([50.0] * 60, mode="ema")
        assert result.line == pytest.approx(0.0)
        assert result.signal == pytest.approx(0.0)
        assert result.direction == "NEUTRAL"

    def test_ema_mode_differs_from_approx(self):
        prices = [100.0 + i for i in range(60)]
        assert macd(prices, mode="ema").signal != pytest.approx(macd(prices).signal)

    def test_line_series_matches_scalar_line_on_short_history(self):
        prices = [100.0 + (i % 5) * 1.5 for i in range(20)]
        series = macd_line_series(prices)

        assert len(series) == 20
        assert series[:11] == [0.0] * 11
        for i in range(11, 20):
            assert series[i] == pytest.approx(ema(prices[: i + 1], 12) - prices[i])
        assert series[-1] == pytest.approx(macd(prices).line)

    def test_ema_mode_short_history_uses_consistent_series(self):
        prices = [100.0 + (i % 5) * 1.5 for i in range(20)]
        result = macd(prices, mode="ema")
        assert result.signal == pytest.approx(ema(macd_line_series(prices), 9))

    def test_line_series_long_history_is_ema_difference(self):
        prices = [100.0 + i for i in range(40)]
        series = macd_line_series(prices)
        assert series[-1] == pytest.approx(ema(prices, 12) - ema(prices, 26))
        assert series[30] == pytest.approx(ema(prices[:31], 12) - ema(prices[:31], 26))

    def test_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            macd([1.0] * 30, mode="bogus")


class TestAtrAndVolume:
    def test_atr_short_is_zero(self):
        assert atr(make_bars([100.0] * 5)) == 0.0

    def test_atr_constant_bars(self):
        bars = make_bars([100.0] * 30)
        # high - low = 2.0 and previous close sits inside the range
        assert atr(bars) == pytest.approx(2.0)

    def test_true_ranges_length(self):
        assert len(true_ranges(make_bars([100.0] * 10))) == 9

    def test_volume_ratio(self):
        assert volume_ratio(2000, [1000] * 20) == pytest.approx(2.0)

    def test_volume_ratio_zero_average(self):
        assert volume_ratio(500, [0] * 20) == pytest.approx(500.0)
        assert volume_ratio(0, []) == 0.0


class TestComputeIndicators:
    def test_defaults_current_volume_to_last_bar(self):
        bars = make_bars([100.0 + i for i in range(60)], volumes=[1000] * 59 + [3000])
        ind = compute_indicators(bars)
        assert ind.volume_ratio == pytest.approx(3000 / sma([1000] * 59 + [3000], 20))

    def test_short_history_degrades(self):
        bars = make_bars([100.0, 101.0, 102.0])
        ind = compute_indicators(bars)
        assert ind.rsi14 == 50.0
        assert ind.dma50 == 102.0
        assert ind.dma200 == 102.0
        assert ind.atr14 == 0.0

    def test_empty_history(self):
        ind = compute_indicators([])
        assert ind.rsi14 == 50.0
        assert ind.dma50 == 0.0
        assert ind.macd.line == 0.0
        assert ind.volume_ratio == 0.0

    def test_macd_mode_is_forwarded(self):
        bars = make_bars([100.0 + i for i in range(60)])
        assert compute_indicators(bars, macd_mode="ema").macd.mode == "ema"

    def test_to_dict(self):
        ind = compute_indicators(make_bars([100.0] * 30))
        data = ind.to_dict()
        assert set(data) >= {"rsi14", "dma50", "dma200", "macd", "atr14", "volume_ratio"}
        assert set(data["macd"]) >= {"line", "signal", "histogram"}
