"""Technical indicators — qualitative readings from candle data. Pure functions, no I/O.

Every public ``*_signal`` function takes a candle sequence (oldest-first)
and returns an ``IndicatorResult``.  When the sequence is shorter than the
indicator's lookback the neutral / no-signal label is returned instead of
raising, so the analysis pipeline always produces a full reading set.
"""

import math

from fxadvisor.analysis.models import Candle, IndicatorResult, Label


TREND_STRUCTURE = "Trend Structure"
MA_CROSS = "MA 20/50 Cross"
RSI = "RSI 14"
MACD = "MACD 12/26/9"
BOLLINGER = "Bollinger Bands 20/2"
VOLUME_SPIKE = "Volume Spike"
FIBONACCI = "Fibonacci Zone"
CANDLE_PATTERN = "Candlestick Pattern"
BREAK_OF_STRUCTURE = "Break of Structure"
LIQUIDITY_GRAB = "Liquidity Grab"


# ── Numeric helpers ──────────────────────────────────────────────────────


def sma(values: list[float], period: int) -> float:
    """Simple average of the last *period* values."""
    window = values[-period:]
    return sum(window) / len(window)


def ema_series(values: list[float], period: int) -> list[float]:
    """Exponential moving average series, same length as *values*.

    ``EMA_i = value_i × k + EMA_{i-1} × (1 - k)`` with ``k = 2 / (period + 1)``,
    seeded with the first value.
    """
    if not values:
        return []
    k = 2.0 / (period + 1)
    ema = [values[0]]
    for v in values[1:]:
        ema.append(v * k + ema[-1] * (1 - k))
    return ema


def rsi_value(closes: list[float], period: int = 14) -> float:
    """RSI over the last *period* close-to-close deltas.

    RS = average gain / average loss, RSI = 100 - 100 / (1 + RS).
    A window with no losses reads 100 (or 50 when it has no gains either),
    so the result stays within [0, 100].
    """
    deltas = [closes[i] - closes[i - 1] for i in range(1, len(closes))][-period:]
    if not deltas:
        return 50.0
    avg_gain = sum(d for d in deltas if d > 0) / len(deltas)
    avg_loss = sum(-d for d in deltas if d < 0) / len(deltas)
    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 50.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def _closes(candles: list[Candle]) -> list[float]:
    return [c.close for c in candles]


def _direction_label(a: float, b: float) -> Label:
    """Bullish if *a* > *b*, Bearish if less, else Neutral."""
    if a > b:
        return Label.BULLISH
    if a < b:
        return Label.BEARISH
    return Label.NEUTRAL


# ── Trend ────────────────────────────────────────────────────────────────


def trend_structure_signal(candles: list[Candle]) -> IndicatorResult:
    """Compare the first and last close of the window."""
    if len(candles) < 2:
        return IndicatorResult(TREND_STRUCTURE, Label.NEUTRAL)
    return IndicatorResult(
        TREND_STRUCTURE, _direction_label(candles[-1].close, candles[0].close)
    )


def ma_cross_signal(
    candles: list[Candle],
    fast: int = 20,
    slow: int = 50,
) -> IndicatorResult:
    """SMA(*fast*) vs SMA(*slow*) of closes.

    Needs at least *slow* candles; fewer reads Neutral because a shortened
    slow average would not be comparable.
    """
    if len(candles) < slow:
        return IndicatorResult(MA_CROSS, Label.NEUTRAL)
    closes = _closes(candles)
    return IndicatorResult(MA_CROSS, _direction_label(sma(closes, fast), sma(closes, slow)))


# ── Momentum ─────────────────────────────────────────────────────────────


def rsi_signal(
    candles: list[Candle],
    period: int = 14,
    overbought: float = 70.0,
    oversold: float = 30.0,
) -> IndicatorResult:
    """Overbought above *overbought*, Oversold below *oversold*."""
    if len(candles) < period + 1:
        return IndicatorResult(RSI, Label.NEUTRAL)
    value = rsi_value(_closes(candles), period)
    if value > overbought:
        return IndicatorResult(RSI, Label.OVERBOUGHT)
    if value < oversold:
        return IndicatorResult(RSI, Label.OVERSOLD)
    return IndicatorResult(RSI, Label.NEUTRAL)


def macd_signal(
    candles: list[Candle],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> IndicatorResult:
    """MACD line (EMA fast − EMA slow) against its EMA signal line."""
    if len(candles) < slow:
        return IndicatorResult(MACD, Label.NEUTRAL)
    closes = _closes(candles)
    ema_fast = ema_series(closes, fast)
    ema_slow = ema_series(closes, slow)
    macd_line = [f - s for f, s in zip(ema_fast, ema_slow)]
    signal_line = ema_series(macd_line, signal)
    return IndicatorResult(MACD, _direction_label(macd_line[-1], signal_line[-1]))


# ── Volatility ───────────────────────────────────────────────────────────


def bollinger_signal(
    candles: list[Candle],
    period: int = 20,
    std_dev: float = 2.0,
) -> IndicatorResult:
    """Latest close against mean ± *std_dev* × population σ of the last *period* closes."""
    if len(candles) < period:
        return IndicatorResult(BOLLINGER, Label.WITHIN_BANDS)
    window = _closes(candles)[-period:]
    mean = sum(window) / period
    sigma = math.sqrt(sum((x - mean) ** 2 for x in window) / period)
    upper = mean + std_dev * sigma
    lower = mean - std_dev * sigma
    close = candles[-1].close
    if close > upper:
        return IndicatorResult(BOLLINGER, Label.BREAKOUT_ABOVE)
    if close < lower:
        return IndicatorResult(BOLLINGER, Label.BREAKOUT_BELOW)
    return IndicatorResult(BOLLINGER, Label.WITHIN_BANDS)


def volume_spike_signal(
    candles: list[Candle],
    lookback: int = 20,
    multiplier: float = 1.5,
) -> IndicatorResult:
    """Volume proxy: the latest high-low range against the average prior range.

    The candle source carries no volume, so bar range stands in for it.
    High when the latest range exceeds *multiplier* × the mean of up to
    *lookback* prior ranges.
    """
    if len(candles) < 2:
        return IndicatorResult(VOLUME_SPIKE, Label.NORMAL)
    ranges = [c.high - c.low for c in candles]
    prior = ranges[-lookback - 1 : -1]
    average = sum(prior) / len(prior)
    if ranges[-1] > multiplier * average:
        return IndicatorResult(VOLUME_SPIKE, Label.HIGH)
    return IndicatorResult(VOLUME_SPIKE, Label.NORMAL)


# ── Levels ───────────────────────────────────────────────────────────────


def fibonacci_zone_signal(candles: list[Candle]) -> IndicatorResult:
    """Is the latest close inside the 38.2 %–61.8 % retracement band?

    Levels are measured down from the window high over the full
    high-low range; both bounds are inclusive.
    """
    if len(candles) < 2:
        return IndicatorResult(FIBONACCI, Label.OUTSIDE_ZONE)
    high = max(c.high for c in candles)
    low = min(c.low for c in candles)
    span = high - low
    if span <= 0:
        return IndicatorResult(FIBONACCI, Label.OUTSIDE_ZONE)
    level_382 = high - 0.382 * span
    level_618 = high - 0.618 * span
    if level_618 <= candles[-1].close <= level_382:
        return IndicatorResult(FIBONACCI, Label.IN_ZONE)
    return IndicatorResult(FIBONACCI, Label.OUTSIDE_ZONE)


# ── Price action ─────────────────────────────────────────────────────────


def engulfing_signal(candles: list[Candle]) -> IndicatorResult:
    """Two-candle engulfing pattern on the latest pair of candles.

    Bullish engulfing: previous candle bearish, current bullish, and the
    current body covers the previous body.  Bearish is the mirror image.
    """
    if len(candles) < 2:
        return IndicatorResult(CANDLE_PATTERN, Label.NO_PATTERN)
    prev, cur = candles[-2], candles[-1]
    prev_bullish = prev.close > prev.open
    prev_bearish = prev.close < prev.open
    cur_bullish = cur.close > cur.open
    cur_bearish = cur.close < cur.open

    if (
        prev_bearish and cur_bullish
        and cur.open <= prev.close and cur.close >= prev.open
    ):
        return IndicatorResult(CANDLE_PATTERN, Label.BULLISH_ENGULFING)
    if (
        prev_bullish and cur_bearish
        and cur.open >= prev.close and cur.close <= prev.open
    ):
        return IndicatorResult(CANDLE_PATTERN, Label.BEARISH_ENGULFING)
    return IndicatorResult(CANDLE_PATTERN, Label.NO_PATTERN)


def break_of_structure_signal(
    candles: list[Candle],
    lookback: int = 2,
) -> IndicatorResult:
    """Latest close beyond the high/low of the prior *lookback* candles."""
    if len(candles) < lookback + 1:
        return IndicatorResult(BREAK_OF_STRUCTURE, Label.NO_BOS)
    prior = candles[-lookback - 1 : -1]
    recent_high = max(c.high for c in prior)
    recent_low = min(c.low for c in prior)
    close = candles[-1].close
    if close > recent_high:
        return IndicatorResult(BREAK_OF_STRUCTURE, Label.BULLISH_BOS)
    if close < recent_low:
        return IndicatorResult(BREAK_OF_STRUCTURE, Label.BEARISH_BOS)
    return IndicatorResult(BREAK_OF_STRUCTURE, Label.NO_BOS)


def liquidity_grab_signal(
    candles: list[Candle],
    lookback: int = 2,
) -> IndicatorResult:
    """Wick through the prior *lookback* candles' extreme, close back inside.

    Bullish: the latest low sweeps below the prior low but the candle closes
    above it.  Bearish: the latest high sweeps above the prior high but the
    candle closes below it.
    """
    if len(candles) < lookback + 1:
        return IndicatorResult(LIQUIDITY_GRAB, Label.NO_LIQUIDITY_GRAB)
    prior = candles[-lookback - 1 : -1]
    prior_low = min(c.low for c in prior)
    prior_high = max(c.high for c in prior)
    cur = candles[-1]
    if cur.low < prior_low and cur.close > prior_low:
        return IndicatorResult(LIQUIDITY_GRAB, Label.BULLISH_LIQUIDITY_GRAB)
    if cur.high > prior_high and cur.close < prior_high:
        return IndicatorResult(LIQUIDITY_GRAB, Label.BEARISH_LIQUIDITY_GRAB)
    return IndicatorResult(LIQUIDITY_GRAB, Label.NO_LIQUIDITY_GRAB)


# ── Full reading set ─────────────────────────────────────────────────────


def compute_indicators(candles: list[Candle]) -> list[IndicatorResult]:
    """Run every indicator over *candles* in a fixed order."""
    return [
        trend_structure_signal(candles),
        ma_cross_signal(candles),
        rsi_signal(candles),
        macd_signal(candles),
        bollinger_signal(candles),
        volume_spike_signal(candles),
        fibonacci_zone_signal(candles),
        engulfing_signal(candles),
        break_of_structure_signal(candles),
        liquidity_grab_signal(candles),
    ]
