"""Prompt composition — renders computed market context for the language model.

The market summary block is deterministic for a given input and can be
parsed back into the indicator readings it was rendered from.
"""

import logging
import pathlib
from dataclasses import dataclass

from fxadvisor.analysis.models import (
    ConfluenceTally,
    IndicatorResult,
    Label,
    price_precision,
)
from fxadvisor.chat.intent import Language

logger = logging.getLogger("fxadvisor")

DEFAULT_SYSTEM_PROMPT = (
    "You are ForexAdvisor, an expert forex trading assistant. "
    "Provide professional, data-driven trading advice for forex market analysis. "
    "Focus on technical indicators, market trends, and risk management. "
    "Be concise, precise and professional. "
    "Avoid discussing topics unrelated to forex trading."
)

CHART_SYSTEM_PROMPT = (
    "You are ForexAdvisor, an expert forex trading assistant analyzing chart images. "
    "Provide professional, detailed analysis based on the forex chart image. "
    "Focus on identifying patterns, support/resistance levels, indicators, "
    "and clear trading recommendations. Be concise, precise and professional. "
    "If the image is not a forex chart, kindly inform the user that you can "
    "only analyze forex charts."
)

DEFAULT_CHART_PROMPT = "Please analyze this forex chart."

GREETING_REPLY = (
    "Welcome! I’m here to help you trade with confidence and discipline. "
    "How can I assist you with your trading today?"
)

ACKNOWLEDGEMENT_REPLY = {
    Language.ENGLISH: (
        "I’m doing great, thank you for asking! I’m here to help you with your "
        "trading. What would you like to analyze or discuss today?"
    ),
    Language.ARABIC: (
        "أنا بخير، شكرًا لسؤالك! أنا هنا لمساعدتك في التداول. "
        "ما الذي تود تحليله أو مناقشته اليوم؟"
    ),
}

_INDICATORS_HEADER = "Indicators:"
_ITEM_PREFIX = "- "


@dataclass(frozen=True)
class PromptContext:
    """Everything the language model sees for one request."""

    market_summary: str
    user_input: str
    language: Language


def load_system_prompt(path: str) -> str:
    """Read the system prompt from *path*, or use the built-in default."""
    prompt_file = pathlib.Path(path)
    if prompt_file.is_file():
        text = prompt_file.read_text(encoding="utf-8").strip()
        if text:
            return text
    logger.info("No system prompt at %s, using built-in default", path)
    return DEFAULT_SYSTEM_PROMPT


def language_directive(language: Language) -> str:
    return f"Please respond fully in {language.value}."


def render_market_summary(
    symbol: str,
    price: float,
    indicators: list[IndicatorResult],
    tally: ConfluenceTally,
) -> str:
    """Render price, indicator readings, and confluence as a text block."""
    p = price_precision(symbol)
    lines = [
        f"Symbol: {symbol}",
        f"Current price: {price:.{p}f}",
        _INDICATORS_HEADER,
    ]
    lines.extend(f"{_ITEM_PREFIX}{r.name}: {r.label.value}" for r in indicators)
    lines.append(
        f"Confluence: {tally.bullish_count} bullish / {tally.bearish_count} bearish"
    )
    lines.append(f"Overall bias: {tally.overall_bias.value}")
    return "\n".join(lines)


def parse_market_summary(block: str) -> list[IndicatorResult]:
    """Recover the indicator readings from a rendered market summary.

    Raises ``ValueError`` if a listed label is not a known ``Label``.
    """
    results: list[IndicatorResult] = []
    in_indicators = False
    for line in block.splitlines():
        if line == _INDICATORS_HEADER:
            in_indicators = True
            continue
        if not in_indicators:
            continue
        if not line.startswith(_ITEM_PREFIX):
            break
        name, _, label = line[len(_ITEM_PREFIX):].rpartition(": ")
        results.append(IndicatorResult(name=name, label=Label(label)))
    return results


def compose_analysis_prompt(context: PromptContext, signal_block: str) -> str:
    """User prompt for a fresh analysis: market context, signal, request."""
    return (
        f"{language_directive(context.language)}\n\n"
        f"Market context:\n{context.market_summary}\n\n"
        f"Here is the computed trade signal and reason:\n{signal_block}\n\n"
        f"User request: {context.user_input}\n\n"
        "Please phrase this professionally, clearly, and motivationally."
    )


def compose_followup_prompt(context: PromptContext) -> str:
    """User prompt for a follow-up that reuses the session's cached analysis."""
    return (
        f"{language_directive(context.language)}\n\n"
        f"Most recent analysis for this conversation:\n{context.market_summary}\n\n"
        f"User message: {context.user_input}\n\n"
        "Answer in the context of that analysis."
    )
