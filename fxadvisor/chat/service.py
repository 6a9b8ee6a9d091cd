"""Advisor service — runs one chat request through the analysis pipeline.

Flow for an analysis request:

    symbol detection → live price + candles → indicators → confluence
    → trade signal → prompt → language model

Greetings and other non-analysis messages skip the pipeline.  A session
that already holds an analysis answers follow-ups against that cached
summary; a session without one gets a canned acknowledgement.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from fxadvisor.analysis.confluence import TieBreak, score_confluence
from fxadvisor.analysis.indicators import compute_indicators
from fxadvisor.analysis.models import (
    Candle,
    ConfluenceTally,
    IndicatorResult,
    TradeSignal,
)
from fxadvisor.analysis.signal import format_trade_signal, synthesize_signal
from fxadvisor.chat.intent import (
    detect_language,
    detect_symbol,
    is_analysis_request,
    is_greeting,
)
from fxadvisor.chat.prompt import (
    ACKNOWLEDGEMENT_REPLY,
    CHART_SYSTEM_PROMPT,
    DEFAULT_CHART_PROMPT,
    DEFAULT_SYSTEM_PROMPT,
    GREETING_REPLY,
    PromptContext,
    compose_analysis_prompt,
    compose_followup_prompt,
    language_directive,
    render_market_summary,
)
from fxadvisor.chat.sessions import ChatMessage, SessionStore
from fxadvisor.errors import ValidationFailure

logger = logging.getLogger("fxadvisor")

NO_TRADE_TEXT = "No trade: bullish and bearish readings are balanced."


class MarketDataSource(Protocol):
    async def fetch_candles(
        self, symbol: str, interval: str = "1h", count: int = 50,
    ) -> list[Candle]:
        ...

    async def get_live_price(self, symbol: str) -> float:
        ...


class LanguageModel(Protocol):
    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        ...

    async def complete_with_image(
        self, system_prompt: str, user_prompt: str, image: bytes, mime_type: str,
    ) -> str:
        ...


@dataclass(frozen=True)
class MarketAnalysis:
    """Result of the indicator → confluence → signal stages for one symbol."""

    symbol: str
    price: float
    indicators: list[IndicatorResult]
    tally: ConfluenceTally
    signal: Optional[TradeSignal]
    market_summary: str

    @property
    def signal_block(self) -> str:
        return format_trade_signal(self.signal) if self.signal else NO_TRADE_TEXT

    def to_dict(self) -> dict:
        signal = None
        if self.signal is not None:
            signal = {
                "direction": self.signal.direction.value,
                "entry": self.signal.entry_price,
                "stop_loss": self.signal.stop_loss,
                "take_profit": self.signal.take_profit,
                "reason": self.signal.reason,
            }
        return {
            "symbol": self.symbol,
            "price": self.price,
            "indicators": [
                {"name": r.name, "value": r.label.value} for r in self.indicators
            ],
            "confluence": {
                "bullish": self.tally.bullish_count,
                "bearish": self.tally.bearish_count,
                "bias": self.tally.overall_bias.value,
            },
            "signal": signal,
        }


@dataclass(frozen=True)
class ChatReply:
    result: str
    session_id: str


class AdvisorService:
    """Orchestrates market data, analysis, sessions, and the language model."""

    def __init__(
        self,
        market: MarketDataSource,
        llm: LanguageModel,
        sessions: SessionStore,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        candle_interval: str = "1h",
        candle_count: int = 50,
        tie_break: TieBreak = TieBreak.BEARISH,
    ) -> None:
        self._market = market
        self._llm = llm
        self._sessions = sessions
        self._system_prompt = system_prompt
        self._interval = candle_interval
        self._count = candle_count
        self._tie_break = tie_break

    @property
    def sessions(self) -> SessionStore:
        return self._sessions

    async def analyze_market(self, symbol: str) -> MarketAnalysis:
        """Fetch price and candles for *symbol* and run the analysis stages."""
        price = await self._market.get_live_price(symbol)
        candles = await self._market.fetch_candles(
            symbol, interval=self._interval, count=self._count,
        )

        indicators = compute_indicators(candles)
        tally = score_confluence(indicators, tie_break=self._tie_break)
        signal = synthesize_signal(tally.overall_bias, price, symbol, indicators)
        summary = render_market_summary(symbol, price, indicators, tally)

        logger.info(
            "Analysis %s price=%s bullish=%d bearish=%d bias=%s",
            symbol, price, tally.bullish_count, tally.bearish_count,
            tally.overall_bias.value,
        )
        return MarketAnalysis(
            symbol=symbol,
            price=price,
            indicators=indicators,
            tally=tally,
            signal=signal,
            market_summary=summary,
        )

    async def handle_chat(
        self,
        text: Optional[str],
        session_id: Optional[str] = None,
    ) -> ChatReply:
        """Answer one chat message.

        Raises ``ValidationFailure`` for empty input or an unsupported
        symbol (before any market-data call), ``UpstreamDataFailure`` and
        ``GatewayFailure`` from the collaborators.
        """
        if text is None or not text.strip():
            raise ValidationFailure("Missing input")

        session = self._sessions.get_or_create(session_id)
        sid = session.session_id
        language = detect_language(text)
        received = time.time()
        summary = None

        # The turn is recorded only once every upstream call has succeeded
        if is_analysis_request(text):
            symbol = detect_symbol(text)
            analysis = await self.analyze_market(symbol)
            context = PromptContext(
                market_summary=analysis.market_summary,
                user_input=text,
                language=language,
            )
            result = await self._llm.complete(
                self._system_prompt,
                compose_analysis_prompt(context, analysis.signal_block),
            )
            summary = f"{analysis.market_summary}\n\n{analysis.signal_block}"
        elif is_greeting(text):
            result = GREETING_REPLY
        else:
            cached = self._sessions.get_signal_summary(sid)
            if cached is None:
                result = ACKNOWLEDGEMENT_REPLY[language]
            else:
                context = PromptContext(
                    market_summary=cached, user_input=text, language=language,
                )
                result = await self._llm.complete(
                    self._system_prompt, compose_followup_prompt(context),
                )

        self._record(sid, "user", text, timestamp=received)
        if summary is not None:
            self._sessions.set_signal_summary(sid, summary)
        self._record(sid, "assistant", result)
        return ChatReply(result=result, session_id=sid)

    async def analyze_chart(
        self,
        image: bytes,
        mime_type: str,
        prompt: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> ChatReply:
        """Send an uploaded chart image to the vision model."""
        if not image:
            raise ValidationFailure("No image file uploaded")
        if not mime_type or not mime_type.startswith("image/"):
            raise ValidationFailure("Only image files are allowed")

        session = self._sessions.get_or_create(session_id)
        sid = session.session_id
        text = prompt.strip() if prompt and prompt.strip() else DEFAULT_CHART_PROMPT
        received = time.time()

        user_prompt = f"{language_directive(detect_language(text))}\n\n{text}"
        result = await self._llm.complete_with_image(
            CHART_SYSTEM_PROMPT, user_prompt, image, mime_type,
        )
        self._record(sid, "user", text, kind="image", timestamp=received)
        self._record(sid, "assistant", result)
        return ChatReply(result=result, session_id=sid)

    def _record(
        self,
        session_id: str,
        role: str,
        content: str,
        kind: str = "text",
        timestamp: Optional[float] = None,
    ) -> None:
        self._sessions.append_message(
            session_id,
            ChatMessage(
                role=role,
                content=content,
                timestamp=timestamp if timestamp is not None else time.time(),
                type=kind,
            ),
        )
