"""Demo forex market data — rates, news, and economic calendar.

Serves generated data shaped like a market-data vendor's, persisted to
JSON files under the data directory so restarts keep the last snapshot.
Rates follow a small random walk around fixed base prices on each
``refresh()``, at most once per refresh interval when served through
``refresh_if_stale()``.
"""

import json
import logging
import pathlib
import random
import time
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

logger = logging.getLogger("fxadvisor")

POPULAR_SYMBOLS: list[str] = [
    "EUR/USD", "USD/JPY", "GBP/USD", "USD/CHF",
    "AUD/USD", "USD/CAD", "NZD/USD", "EUR/GBP",
    "EUR/JPY", "GBP/JPY",
]

BASE_PRICES: dict[str, float] = {
    "EUR/USD": 1.10752,
    "USD/JPY": 148.056,
    "GBP/USD": 1.27841,
    "USD/CHF": 0.89645,
    "AUD/USD": 0.65847,
    "USD/CAD": 1.36524,
    "NZD/USD": 0.61286,
    "EUR/GBP": 0.86635,
    "EUR/JPY": 164.073,
    "GBP/JPY": 189.375,
}

_HALF_SPREAD = 0.0002
_VOLATILITY = 0.0005  # ±5 pips per refresh
_MAX_NEWS = 20

_RATES_FILE = "forex_rates.json"
_NEWS_FILE = "market_news.json"
_CALENDAR_FILE = "economic_calendar.json"


@dataclass(frozen=True)
class ForexRate:
    symbol: str
    bid: float
    ask: float
    timestamp: float
    change: float
    change_percentage: float

    @property
    def mid(self) -> float:
        return (self.bid + self.ask) / 2


@dataclass(frozen=True)
class MarketNews:
    id: str
    title: str
    summary: str
    url: str
    source: str
    timestamp: float
    sentiment: str  # "positive" | "neutral" | "negative"
    impact: str  # "high" | "medium" | "low"


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    country: str
    date: str  # YYYY-MM-DD
    time: str
    impact: str
    forecast: str
    previous: str


_DEMO_HEADLINES: list[tuple[str, str, str, str, str, int]] = [
    (
        "Fed Signals Possible Rate Cut in Next Meeting",
        "Federal Reserve officials hinted at a potential interest rate cut in the "
        "upcoming meeting, citing improved inflation data and moderate economic growth.",
        "Financial Times", "positive", "high", 1,
    ),
    (
        "ECB Holds Rates Steady Despite Growth Concerns",
        "The European Central Bank maintained its key interest rates on Thursday, "
        "despite growing concerns about economic slowdown in the eurozone.",
        "Bloomberg", "neutral", "medium", 2,
    ),
    (
        "Bank of Japan Considers Policy Adjustment as Yen Weakens",
        "The Bank of Japan is reviewing its monetary policy stance as the yen "
        "continues to depreciate against major currencies, sources say.",
        "Reuters", "neutral", "medium", 3,
    ),
    (
        "US Dollar Strengthens on Robust Employment Data",
        "The US dollar gained against major currencies after the latest employment "
        "report showed stronger than expected job growth in the previous month.",
        "CNBC", "positive", "high", 5,
    ),
    (
        "Oil Prices Surge Amid Middle East Tensions",
        "Crude oil prices jumped 3% on renewed geopolitical tensions in the Middle "
        "East, potentially affecting currency markets and inflation outlooks.",
        "Wall Street Journal", "negative", "high", 24,
    ),
]


def normalize_symbol(symbol: str) -> str:
    """Accept ``EUR/USD``, ``EUR_USD``, ``EUR-USD`` or ``eurusd``."""
    s = symbol.strip().upper().replace("_", "/").replace("-", "/")
    if "/" not in s and len(s) == 6:
        s = f"{s[:3]}/{s[3:]}"
    return s


class ForexDataService:
    """Holds the current demo rates, news, and calendar."""

    def __init__(
        self,
        data_dir: str = "data",
        rng: Optional[random.Random] = None,
        refresh_interval: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._data_dir = pathlib.Path(data_dir)
        self._rng = rng or random.Random()
        self._refresh_interval = refresh_interval
        self._clock = clock
        self._last_refresh: Optional[float] = None
        self._rates: dict[str, ForexRate] = {}
        self._news: list[MarketNews] = []
        self._calendar: list[CalendarEvent] = []

        self._load_cached_data()
        if not self._rates:
            self._seed_rates()
        if not self._news:
            self._update_news()
        if not self._calendar:
            self._update_calendar()

    # ── Queries ──────────────────────────────────────────────────────────

    def get_rates(self) -> dict[str, ForexRate]:
        return dict(self._rates)

    def get_rate(self, symbol: str) -> Optional[ForexRate]:
        return self._rates.get(normalize_symbol(symbol))

    def get_news(self, limit: int = 10) -> list[MarketNews]:
        return self._news[:limit]

    def get_economic_calendar(
        self,
        days: int = 7,
        today: Optional[date] = None,
    ) -> list[CalendarEvent]:
        """Events dated from *today* through *today* + *days*, inclusive."""
        start = today or datetime.now(timezone.utc).date()
        end = start + timedelta(days=days)
        return [
            e for e in self._calendar
            if start <= date.fromisoformat(e.date) <= end
        ]

    # ── Updates ──────────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Advance rates one random-walk step, roll news and calendar, persist."""
        self._update_rates()
        self._update_news()
        self._update_calendar()
        self._save_cached_data()
        self._last_refresh = self._clock()

    def refresh_if_stale(self) -> bool:
        """Refresh when the last refresh is older than the refresh interval.

        Returns True when a refresh ran.
        """
        if (
            self._last_refresh is not None
            and self._clock() - self._last_refresh < self._refresh_interval
        ):
            return False
        self.refresh()
        return True

    def _seed_rates(self) -> None:
        now = self._clock()
        for symbol in POPULAR_SYMBOLS:
            base = BASE_PRICES[symbol]
            self._rates[symbol] = ForexRate(
                symbol=symbol,
                bid=round(base - _HALF_SPREAD, 5),
                ask=round(base + _HALF_SPREAD, 5),
                timestamp=now,
                change=0.0,
                change_percentage=0.0,
            )

    def _update_rates(self) -> None:
        now = self._clock()
        for symbol in POPULAR_SYMBOLS:
            base = BASE_PRICES[symbol]
            current = self._rates.get(symbol)
            mid = current.mid if current else base
            new_mid = mid + (self._rng.random() - 0.5) * _VOLATILITY * 2
            change = new_mid - base
            self._rates[symbol] = ForexRate(
                symbol=symbol,
                bid=round(new_mid - _HALF_SPREAD, 5),
                ask=round(new_mid + _HALF_SPREAD, 5),
                timestamp=now,
                change=round(change, 5),
                change_percentage=round(change / base * 100, 3),
            )

    def _update_news(self) -> None:
        now = self._clock()
        fresh = [
            MarketNews(
                id=f"news-{int(now)}-{i}",
                title=title,
                summary=summary,
                url="https://example.com/" + title.lower().replace(" ", "-"),
                source=source,
                timestamp=now - hours_ago * 3600,
                sentiment=sentiment,
                impact=impact,
            )
            for i, (title, summary, source, sentiment, impact, hours_ago)
            in enumerate(_DEMO_HEADLINES, start=1)
        ]
        known = {n.title for n in fresh}
        older = [n for n in self._news if n.title not in known]
        self._news = (fresh + older)[:_MAX_NEWS]

    def _update_calendar(self, today: Optional[date] = None) -> None:
        start = today or datetime.now(timezone.utc).date()
        events: list[CalendarEvent] = []
        for i in range(14):
            day = (start + timedelta(days=i)).isoformat()
            if i % 2 == 0:
                events.append(CalendarEvent(
                    f"event-{day}-1", "US Non-Farm Payrolls", "United States",
                    day, "12:30 GMT", "high", "180K", "175K",
                ))
                events.append(CalendarEvent(
                    f"event-{day}-2", "Unemployment Rate", "United States",
                    day, "12:30 GMT", "high", "3.9%", "4.0%",
                ))
            if i % 3 == 0:
                events.append(CalendarEvent(
                    f"event-{day}-3", "ECB Interest Rate Decision", "Eurozone",
                    day, "11:45 GMT", "high", "3.75%", "3.75%",
                ))
            if i % 4 == 0:
                events.append(CalendarEvent(
                    f"event-{day}-4", "BoE Monetary Policy Report", "United Kingdom",
                    day, "11:00 GMT", "medium", "5.0%", "5.0%",
                ))
        self._calendar = events

    # ── Persistence ──────────────────────────────────────────────────────

    def _save_cached_data(self) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._write(_RATES_FILE, {s: asdict(r) for s, r in self._rates.items()})
            self._write(_NEWS_FILE, [asdict(n) for n in self._news])
            self._write(_CALENDAR_FILE, [asdict(e) for e in self._calendar])
        except OSError as exc:
            logger.error("Failed to save cached forex data: %s", exc)

    def _write(self, name: str, payload) -> None:
        (self._data_dir / name).write_text(
            json.dumps(payload, indent=2) + "\n", encoding="utf-8",
        )

    def _load_cached_data(self) -> None:
        try:
            rates = self._read(_RATES_FILE)
            if rates:
                self._rates = {s: ForexRate(**r) for s, r in rates.items()}
            news = self._read(_NEWS_FILE)
            if news:
                self._news = [MarketNews(**n) for n in news]
            calendar = self._read(_CALENDAR_FILE)
            if calendar:
                self._calendar = [CalendarEvent(**e) for e in calendar]
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Ignoring unreadable forex cache: %s", exc)

    def _read(self, name: str):
        path = self._data_dir / name
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))
