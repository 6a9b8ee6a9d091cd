"""Deterministic tests for the indicator library.

All tests use fixed candle fixtures. Same input = same output, always.
"""

import pytest

from fxadvisor.analysis.indicators import (
    BOLLINGER,
    MA_CROSS,
    TREND_STRUCTURE,
    bollinger_signal,
    break_of_structure_signal,
    compute_indicators,
    ema_series,
    engulfing_signal,
    fibonacci_zone_signal,
    liquidity_grab_signal,
    ma_cross_signal,
    macd_signal,
    rsi_signal,
    rsi_value,
    trend_structure_signal,
    volume_spike_signal,
)
from fxadvisor.analysis.models import Candle, Label


# ── Candle fixtures ──────────────────────────────────────────────────────


def _make_candle(i: int, o: float, h: float, l: float, c: float) -> Candle:
    return Candle(time=f"2025-01-01T{i:04d}", open=o, high=h, low=l, close=c)


def _from_closes(closes: list[float], wick: float = 0.00002) -> list[Candle]:
    """Candles whose open is the previous close, with a small wick each side."""
    candles = []
    prev = closes[0]
    for i, c in enumerate(closes):
        o = prev
        candles.append(_make_candle(i, o, max(o, c) + wick, min(o, c) - wick, c))
        prev = c
    return candles


def _rising(n: int = 50, start: float = 1.1000, end: float = 1.1050) -> list[Candle]:
    step = (end - start) / (n - 1)
    return _from_closes([start + i * step for i in range(n)])


def _falling(n: int = 50, start: float = 1.1050, end: float = 1.1000) -> list[Candle]:
    step = (start - end) / (n - 1)
    return _from_closes([start - i * step for i in range(n)])


# ── Trend / MA cross ─────────────────────────────────────────────────────


class TestTrend:
    def test_rising_closes_bullish(self):
        assert trend_structure_signal(_rising()).label == Label.BULLISH
        assert ma_cross_signal(_rising()).label == Label.BULLISH

    def test_falling_closes_bearish(self):
        assert trend_structure_signal(_falling()).label == Label.BEARISH
        assert ma_cross_signal(_falling()).label == Label.BEARISH

    def test_flat_closes_neutral(self):
        flat = _from_closes([1.25] * 60)
        assert trend_structure_signal(flat).label == Label.NEUTRAL
        assert ma_cross_signal(flat).label == Label.NEUTRAL

    def test_ma_cross_short_history_is_neutral(self):
        """Fewer than 50 candles cannot produce a comparable SMA50."""
        result = ma_cross_signal(_rising(n=49))
        assert result.name == MA_CROSS
        assert result.label == Label.NEUTRAL

    def test_trend_single_candle_neutral(self):
        assert trend_structure_signal(_rising()[:1]).label == Label.NEUTRAL


# ── RSI ──────────────────────────────────────────────────────────────────


class TestRSI:
    def test_all_gains_overbought(self):
        closes = [1.0 + i * 0.001 for i in range(20)]
        assert rsi_value(closes) == pytest.approx(100.0)
        assert rsi_signal(_from_closes(closes)).label == Label.OVERBOUGHT

    def test_all_losses_oversold(self):
        closes = [1.0 - i * 0.001 for i in range(20)]
        assert rsi_value(closes) == pytest.approx(0.0)
        assert rsi_signal(_from_closes(closes)).label == Label.OVERSOLD

    def test_flat_is_midpoint(self):
        assert rsi_value([1.0] * 20) == pytest.approx(50.0)

    def test_known_value(self):
        # 14 deltas: 7 gains of 2, 7 losses of 1 → RS = 2 → RSI = 66.67
        closes = [10.0]
        for _ in range(7):
            closes.append(closes[-1] + 2)
            closes.append(closes[-1] - 1)
        assert rsi_value(closes) == pytest.approx(100 - 100 / 3)
        assert rsi_signal(_from_closes(closes)).label == Label.NEUTRAL

    def test_bounded(self):
        closes = [1.0, 1.3, 0.9, 1.4, 1.35, 1.2, 1.25, 0.8, 1.1, 1.05,
                  1.6, 1.0, 0.95, 1.02, 1.5, 1.49, 1.7]
        value = rsi_value(closes)
        assert 0.0 <= value <= 100.0

    def test_short_history_neutral(self):
        assert rsi_signal(_rising(n=10)).label == Label.NEUTRAL


# ── MACD ─────────────────────────────────────────────────────────────────


class TestMACD:
    def test_ema_series_seeded_with_first_value(self):
        ema = ema_series([2.0, 4.0], period=3)
        assert ema[0] == 2.0
        assert ema[1] == pytest.approx(3.0)  # k = 0.5

    def test_accelerating_rise_bullish(self):
        assert macd_signal(_rising()).label == Label.BULLISH

    def test_steady_fall_bearish(self):
        assert macd_signal(_falling()).label == Label.BEARISH

    def test_short_history_neutral(self):
        assert macd_signal(_rising(n=25)).label == Label.NEUTRAL


# ── Bollinger / volume ───────────────────────────────────────────────────


class TestBollinger:
    def test_breakout_above(self):
        candles = _from_closes([1.0] * 19 + [1.5])
        result = bollinger_signal(candles)
        assert result.name == BOLLINGER
        assert result.label == Label.BREAKOUT_ABOVE

    def test_breakout_below(self):
        candles = _from_closes([1.0] * 19 + [0.5])
        assert bollinger_signal(candles).label == Label.BREAKOUT_BELOW

    def test_steady_trend_within_bands(self):
        assert bollinger_signal(_rising()).label == Label.WITHIN_BANDS


class TestVolumeSpike:
    def test_wide_latest_range_is_high(self):
        candles = [_make_candle(i, 1.0, 1.001, 1.0, 1.0005) for i in range(20)]
        candles.append(_make_candle(20, 1.0, 1.005, 1.0, 1.004))
        assert volume_spike_signal(candles).label == Label.HIGH

    def test_uniform_ranges_normal(self):
        candles = [_make_candle(i, 1.0, 1.001, 1.0, 1.0005) for i in range(21)]
        assert volume_spike_signal(candles).label == Label.NORMAL


# ── Fibonacci ────────────────────────────────────────────────────────────


class TestFibonacci:
    def _window(self, last_close: float) -> list[Candle]:
        return [
            _make_candle(0, 1.0, 1.2, 1.0, 1.15),
            _make_candle(1, 1.15, 1.16, 1.05, last_close),
        ]

    def test_close_in_golden_zone(self):
        # high 1.2, low 1.0 → zone 1.0764 .. 1.1236
        assert fibonacci_zone_signal(self._window(1.10)).label == Label.IN_ZONE

    def test_close_outside_zone(self):
        assert fibonacci_zone_signal(self._window(1.15)).label == Label.OUTSIDE_ZONE

    def test_rising_trend_close_near_high_outside(self):
        assert fibonacci_zone_signal(_rising()).label == Label.OUTSIDE_ZONE


# ── Price action ─────────────────────────────────────────────────────────


class TestEngulfing:
    def test_bullish_engulfing(self):
        candles = [
            _make_candle(0, 1.1000, 1.1010, 1.0890, 1.0900),
            _make_candle(1, 1.0890, 1.1060, 1.0880, 1.1050),
        ]
        assert engulfing_signal(candles).label == Label.BULLISH_ENGULFING

    def test_bearish_engulfing(self):
        candles = [
            _make_candle(0, 1.0900, 1.1010, 1.0890, 1.1000),
            _make_candle(1, 1.1010, 1.1020, 1.0850, 1.0860),
        ]
        assert engulfing_signal(candles).label == Label.BEARISH_ENGULFING

    def test_same_direction_no_pattern(self):
        assert engulfing_signal(_rising()).label == Label.NO_PATTERN

    def test_inside_bar_no_pattern(self):
        candles = [
            _make_candle(0, 1.1000, 1.1010, 1.0890, 1.0900),
            _make_candle(1, 1.0920, 1.0990, 1.0910, 1.0980),
        ]
        assert engulfing_signal(candles).label == Label.NO_PATTERN


class TestBreakOfStructure:
    def _prior(self) -> list[Candle]:
        return [
            _make_candle(0, 1.0950, 1.1000, 1.0940, 1.0980),
            _make_candle(1, 1.0980, 1.1010, 1.0960, 1.0990),
        ]

    def test_bullish_bos(self):
        candles = self._prior() + [_make_candle(2, 1.0990, 1.1030, 1.0985, 1.1020)]
        assert break_of_structure_signal(candles).label == Label.BULLISH_BOS

    def test_bearish_bos(self):
        candles = self._prior() + [_make_candle(2, 1.0990, 1.0995, 1.0900, 1.0920)]
        assert break_of_structure_signal(candles).label == Label.BEARISH_BOS

    def test_inside_range_no_bos(self):
        candles = self._prior() + [_make_candle(2, 1.0990, 1.1000, 1.0970, 1.0995)]
        assert break_of_structure_signal(candles).label == Label.NO_BOS

    def test_only_two_prior_candles_count(self):
        """An older, higher high outside the 2-candle window is ignored."""
        older = [_make_candle(9, 1.10, 1.2000, 1.09, 1.11)]
        candles = older + self._prior() + [_make_candle(2, 1.0990, 1.1030, 1.0985, 1.1020)]
        assert break_of_structure_signal(candles).label == Label.BULLISH_BOS


class TestLiquidityGrab:
    def _prior(self) -> list[Candle]:
        return [
            _make_candle(0, 1.0970, 1.1000, 1.0950, 1.0980),
            _make_candle(1, 1.0980, 1.0995, 1.0960, 1.0975),
        ]

    def test_bullish_grab(self):
        candles = self._prior() + [_make_candle(2, 1.0975, 1.0985, 1.0940, 1.0970)]
        assert liquidity_grab_signal(candles).label == Label.BULLISH_LIQUIDITY_GRAB

    def test_bearish_grab(self):
        candles = self._prior() + [_make_candle(2, 1.0975, 1.1015, 1.0965, 1.0980)]
        assert liquidity_grab_signal(candles).label == Label.BEARISH_LIQUIDITY_GRAB

    def test_breakdown_without_recovery_is_not_a_grab(self):
        candles = self._prior() + [_make_candle(2, 1.0975, 1.0980, 1.0930, 1.0935)]
        assert liquidity_grab_signal(candles).label == Label.NO_LIQUIDITY_GRAB


# ── Full reading set ─────────────────────────────────────────────────────


class TestComputeIndicators:
    def test_ten_readings_in_fixed_order(self):
        results = compute_indicators(_rising())
        assert len(results) == 10
        assert results[0].name == TREND_STRUCTURE
        assert results[1].name == MA_CROSS

    def test_empty_input_never_raises(self):
        results = compute_indicators([])
        assert len(results) == 10

    def test_deterministic(self):
        assert compute_indicators(_rising()) == compute_indicators(_rising())
