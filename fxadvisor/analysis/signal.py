"""Trade signal synthesis — pure math, no I/O.

Fixed-offset policy around the current price, measured in instrument
points (see ``INSTRUMENT_POINT_VALUES``):

    Buy:  entry = price + 1,  SL = price - 10,  TP = price + 12
    Sell: entry = price - 1,  SL = price + 10,  TP = price - 12

The offsets do not adapt to volatility; a 10-point stop is as wide on a
quiet session as on a news spike.
"""

from dataclasses import dataclass
from typing import Optional

from fxadvisor.analysis.confluence import agreeing_indicators
from fxadvisor.analysis.models import (
    Bias,
    Direction,
    IndicatorResult,
    TradeSignal,
    point_value,
    price_precision,
)


@dataclass(frozen=True)
class OffsetPolicy:
    """Entry/stop/target distances from the current price, in points."""

    entry: float = 1.0
    stop_loss: float = 10.0
    take_profit: float = 12.0


DEFAULT_OFFSETS = OffsetPolicy()


def _build_reason(
    symbol: str,
    bias: Bias,
    indicators: Optional[list[IndicatorResult]],
) -> str:
    trend = "bullish" if bias == Bias.BULLISH else "bearish"
    action = "buying" if bias == Bias.BULLISH else "selling"
    agreeing = agreeing_indicators(indicators or [], bias)
    if agreeing:
        names = ", ".join(r.name for r in agreeing)
        confluence = f"the confluence of {trend} indicators such as {names}"
    else:
        confluence = "no single indicator dominating"
    return (
        f"Given the {trend} trend in {symbol} and {confluence}, "
        f"it is advisable to look for {action} opportunities."
    )


def synthesize_signal(
    bias: Bias,
    price: float,
    symbol: str,
    indicators: Optional[list[IndicatorResult]] = None,
    offsets: OffsetPolicy = DEFAULT_OFFSETS,
) -> Optional[TradeSignal]:
    """Turn an overall bias and the current price into a ``TradeSignal``.

    Args:
        bias: Overall confluence bias.
        price: Current market price.
        symbol: Instrument, e.g. ``"EUR/USD"``; selects the point size.
        indicators: Readings used to name the agreeing indicators in the reason.
        offsets: Distances in points (default 1 / 10 / 12).

    Returns:
        ``TradeSignal``, or ``None`` for a ``Neutral`` bias.
    """
    if bias == Bias.NEUTRAL:
        return None

    point = point_value(symbol)
    digits = price_precision(symbol) + 1
    sign = 1.0 if bias == Bias.BULLISH else -1.0

    return TradeSignal(
        symbol=symbol,
        direction=Direction.BUY if bias == Bias.BULLISH else Direction.SELL,
        entry_price=round(price + sign * offsets.entry * point, digits),
        stop_loss=round(price - sign * offsets.stop_loss * point, digits),
        take_profit=round(price + sign * offsets.take_profit * point, digits),
        current_price=price,
        reason=_build_reason(symbol, bias, indicators),
    )


def format_trade_signal(signal: TradeSignal) -> str:
    """Render the signal block handed to the language model."""
    p = price_precision(signal.symbol)
    return (
        f"📈 Direction: {signal.direction.value}\n"
        f"🎯 Entry: {signal.entry_price:.{p}f}\n"
        f"🛑 Stop Loss: {signal.stop_loss:.{p}f}\n"
        f"🎯 Take Profit: {signal.take_profit:.{p}f}\n"
        f"📝 Reason: {signal.reason} "
        f"Current price is {signal.current_price:.{p}f}."
    )
