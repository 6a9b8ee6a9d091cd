"""Intent detection for incoming chat text — language, greeting, analysis, symbol.

Pure functions, no I/O.  Symbol detection runs before any market-data
fetch so an unsupported instrument is rejected without an upstream call.
"""

import re
from enum import Enum
from typing import Optional

from fxadvisor.errors import ValidationFailure


class Language(str, Enum):
    ENGLISH = "English"
    ARABIC = "Arabic"


DEFAULT_SYMBOL = "XAU/USD"

_ARABIC_RE = re.compile(r"[\u0600-\u06FF]")
_WORD_RE = re.compile(r"[a-z0-9&]+")
# Instrument shapes: "DOGE/USD" and compact "AUDCAD".
_SLASH_PAIR_RE = re.compile(r"\b([A-Za-z]{3,5})/([A-Za-z]{3,5})\b")
_COMPACT_PAIR_RE = re.compile(r"\b([A-Za-z]{3})([A-Za-z]{3})\b")

GREETINGS = ("hi", "hello", "hey")
ARABIC_GREETINGS = ("مرحبا", "اهلا")

ANALYSIS_KEYWORDS = ("analyze", "analyse", "analysis", "حلل", "تحليل")

# Checked in order; the first prefix match wins.
SYMBOL_ALIASES: list[tuple[tuple[str, ...], str]] = [
    (("gold", "xau"), "XAU/USD"),
    (("btc", "bitcoin"), "BTC/USD"),
    (("eur",), "EUR/USD"),
    (("gbp", "cable"), "GBP/USD"),
    (("jpy", "usdjpy", "yen"), "USD/JPY"),
    (("nasdaq", "nas"), "NAS100"),
    (("sp500", "s&p", "spx", "us500"), "US500"),
]

ARABIC_SYMBOL_ALIASES: list[tuple[str, str]] = [
    ("ذهب", "XAU/USD"),
    ("بيتكوين", "BTC/USD"),
    ("يورو", "EUR/USD"),
    ("باوند", "GBP/USD"),
    ("ين", "USD/JPY"),
    ("ناسداك", "NAS100"),
]

SUPPORTED_SYMBOLS: frozenset[str] = frozenset(s for _, s in SYMBOL_ALIASES)

# Currency and coin codes that instrument pairs are built from.
CURRENCY_CODES = frozenset({
    "USD", "EUR", "GBP", "JPY", "CHF", "AUD", "CAD", "NZD", "CNY", "CNH",
    "HKD", "SGD", "SEK", "NOK", "DKK", "PLN", "HUF", "CZK", "TRY", "ZAR",
    "MXN", "BRL", "INR", "RUB", "KRW", "AED", "SAR", "XAU", "XAG",
    "BTC", "ETH", "LTC", "XRP", "SOL", "ADA", "DOGE", "USDT",
})


def detect_language(text: str) -> Language:
    """Arabic if the text contains any Arabic-block character, else English."""
    return Language.ARABIC if _ARABIC_RE.search(text) else Language.ENGLISH


def _words(text: str) -> list[str]:
    return _WORD_RE.findall(text.lower())


def is_greeting(text: str) -> bool:
    """True when the text contains a greeting word."""
    words = _words(text)
    if any(w in GREETINGS for w in words):
        return True
    return any(g in text for g in ARABIC_GREETINGS)


def is_analysis_request(text: str) -> bool:
    """True when the text asks for an analysis."""
    lowered = text.lower()
    return any(k in lowered for k in ANALYSIS_KEYWORDS)


def detect_symbol(text: str) -> str:
    """Resolve the instrument a message refers to.

    Known aliases are matched as word prefixes, with ``/`` splitting words
    (``"eurusd"``, ``"EUR/USD"`` and ``"eur"`` all map to EUR/USD).  When no
    alias matches but the message names a pair built from currency codes,
    such as ``"DOGE/USD"`` or ``"AUDCAD"``, ``ValidationFailure`` is raised.
    Anything else, capitalised prose included, falls back to
    ``DEFAULT_SYMBOL``.
    """
    words = _words(text)
    for prefixes, symbol in SYMBOL_ALIASES:
        if any(w.startswith(p) for w in words for p in prefixes):
            return symbol

    for alias, symbol in ARABIC_SYMBOL_ALIASES:
        if alias in text.split():
            return symbol

    unknown = _unsupported_pair(text)
    if unknown:
        raise _unsupported(unknown)
    return DEFAULT_SYMBOL


def resolve_symbol(symbol: str) -> str:
    """Resolve an explicitly requested instrument, e.g. a query parameter.

    Accepts a supported symbol in ``EUR/USD``, ``EUR-USD``, ``EUR_USD`` or
    ``EURUSD`` form, or an exact alias such as ``"gold"``.  Unlike
    ``detect_symbol`` there is no default: anything else raises
    ``ValidationFailure``.
    """
    cleaned = symbol.strip().upper().replace("_", "/").replace("-", "/")
    compact = cleaned.replace("/", "")
    for supported in sorted(SUPPORTED_SYMBOLS):
        if compact == supported.replace("/", ""):
            return supported

    lowered = symbol.strip().lower()
    for aliases, supported in SYMBOL_ALIASES:
        if lowered in aliases:
            return supported
    for alias, supported in ARABIC_SYMBOL_ALIASES:
        if symbol.strip() == alias:
            return supported
    raise _unsupported(symbol.strip() or symbol)


def _unsupported_pair(text: str) -> Optional[str]:
    for base, quote in _SLASH_PAIR_RE.findall(text):
        if base.upper() in CURRENCY_CODES or quote.upper() in CURRENCY_CODES:
            return f"{base}/{quote}".upper()
    for base, quote in _COMPACT_PAIR_RE.findall(text):
        if base.upper() in CURRENCY_CODES and quote.upper() in CURRENCY_CODES:
            return f"{base}{quote}".upper()
    return None


def _unsupported(symbol: str) -> ValidationFailure:
    return ValidationFailure(
        f"Unsupported symbol: {symbol}. "
        f"Supported: {', '.join(sorted(SUPPORTED_SYMBOLS))}"
    )
