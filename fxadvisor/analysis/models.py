"""Analysis data models — typed representations for indicator and signal outputs."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Candle:
    """A single OHLC price bar. Sequences are ordered oldest-first."""

    time: str
    open: float
    high: float
    low: float
    close: float


class Label(str, Enum):
    """Qualitative outcome of an indicator."""

    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"
    OVERBOUGHT = "Overbought"
    OVERSOLD = "Oversold"
    BREAKOUT_ABOVE = "Breakout Above"
    BREAKOUT_BELOW = "Breakout Below"
    WITHIN_BANDS = "Within Bands"
    HIGH = "High"
    NORMAL = "Normal"
    IN_ZONE = "In Zone"
    OUTSIDE_ZONE = "Outside Zone"
    BULLISH_ENGULFING = "Bullish Engulfing"
    BEARISH_ENGULFING = "Bearish Engulfing"
    NO_PATTERN = "No Pattern"
    BULLISH_BOS = "Bullish BOS"
    BEARISH_BOS = "Bearish BOS"
    NO_BOS = "No BOS"
    BULLISH_LIQUIDITY_GRAB = "Bullish Liquidity Grab"
    BEARISH_LIQUIDITY_GRAB = "Bearish Liquidity Grab"
    NO_LIQUIDITY_GRAB = "No Liquidity Grab"


class Bias(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class Direction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class IndicatorResult:
    """One indicator's qualitative reading, e.g. ``("RSI 14", Label.OVERSOLD)``."""

    name: str
    label: Label


@dataclass(frozen=True)
class ConfluenceTally:
    """Bullish/bearish agreement across a set of indicator readings."""

    bullish_count: int
    bearish_count: int
    overall_bias: Bias


@dataclass(frozen=True)
class TradeSignal:
    """A concrete trade idea derived from the confluence bias."""

    symbol: str
    direction: Direction
    entry_price: float
    stop_loss: float
    take_profit: float
    current_price: float
    reason: str


# ── Instrument metadata ──────────────────────────────────────────────────

# Size of one signal offset unit per instrument.  Offsets are expressed in
# these units, not scaled by volatility.
INSTRUMENT_POINT_VALUES: dict[str, float] = {
    "XAU/USD": 1.0,
    "BTC/USD": 1.0,
    "NAS100": 1.0,
    "US500": 1.0,
    "EUR/USD": 0.0001,
    "GBP/USD": 0.0001,
    "USD/JPY": 0.01,
}

INSTRUMENT_PRICE_PRECISION: dict[str, int] = {
    "XAU/USD": 2,
    "BTC/USD": 2,
    "NAS100": 2,
    "US500": 2,
    "EUR/USD": 5,
    "GBP/USD": 5,
    "USD/JPY": 3,
}


def point_value(symbol: str) -> float:
    """Return the offset unit for *symbol* (``1.0`` when unknown)."""
    return INSTRUMENT_POINT_VALUES.get(symbol, 1.0)


def price_precision(symbol: str) -> int:
    """Return the number of decimals used when displaying *symbol* prices."""
    return INSTRUMENT_PRICE_PRECISION.get(symbol, 2)
