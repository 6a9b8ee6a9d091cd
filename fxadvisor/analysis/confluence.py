"""Confluence scoring — counts how many indicator readings lean each way.

Membership is a fixed mapping from ``Label`` to side.  Labels outside both
sets (Neutral, Within Bands, No Pattern, ...) count toward neither side, so
``bullish_count + bearish_count`` never exceeds the number of readings.
"""

from enum import Enum

from fxadvisor.analysis.models import Bias, ConfluenceTally, IndicatorResult, Label


BULLISH_LABELS: frozenset[Label] = frozenset({
    Label.BULLISH,
    Label.OVERSOLD,
    Label.BREAKOUT_ABOVE,
    Label.HIGH,
    Label.IN_ZONE,
    Label.BULLISH_ENGULFING,
    Label.BULLISH_BOS,
    Label.BULLISH_LIQUIDITY_GRAB,
})

BEARISH_LABELS: frozenset[Label] = frozenset({
    Label.BEARISH,
    Label.OVERBOUGHT,
    Label.BREAKOUT_BELOW,
    Label.BEARISH_ENGULFING,
    Label.BEARISH_BOS,
    Label.BEARISH_LIQUIDITY_GRAB,
})


class TieBreak(str, Enum):
    """How an equal bullish/bearish count resolves."""

    BEARISH = "bearish"  # historical behaviour: anything not strictly bullish sells
    NEUTRAL = "neutral"


def score_confluence(
    results: list[IndicatorResult],
    tie_break: TieBreak = TieBreak.BEARISH,
) -> ConfluenceTally:
    """Tally bullish and bearish readings and derive the overall bias.

    Bullish when bullish readings strictly outnumber bearish ones.  Bearish
    when they are strictly fewer, and on a tie unless *tie_break* is
    ``TieBreak.NEUTRAL``.
    """
    bullish = sum(1 for r in results if r.label in BULLISH_LABELS)
    bearish = sum(1 for r in results if r.label in BEARISH_LABELS)

    if bullish > bearish:
        bias = Bias.BULLISH
    elif bullish == bearish and tie_break == TieBreak.NEUTRAL:
        bias = Bias.NEUTRAL
    else:
        bias = Bias.BEARISH

    return ConfluenceTally(
        bullish_count=bullish,
        bearish_count=bearish,
        overall_bias=bias,
    )


def agreeing_indicators(
    results: list[IndicatorResult],
    bias: Bias,
) -> list[IndicatorResult]:
    """Return the readings that point the same way as *bias*."""
    if bias == Bias.BULLISH:
        return [r for r in results if r.label in BULLISH_LABELS]
    if bias == Bias.BEARISH:
        return [r for r in results if r.label in BEARISH_LABELS]
    return []
