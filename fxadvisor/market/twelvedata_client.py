"""Twelve Data REST API async client.

Supplies the analysis pipeline with candle history and live prices.
Failures are not retried; they surface as ``UpstreamDataFailure``.
"""

import logging

import httpx

from fxadvisor.analysis.models import Candle
from fxadvisor.config import Config
from fxadvisor.errors import UpstreamDataFailure

logger = logging.getLogger("fxadvisor")


class TwelveDataClient:
    """Async client for the Twelve Data ``/time_series`` and ``/price`` endpoints."""

    def __init__(self, config: Config) -> None:
        self._base_url = config.twelve_data_base_url
        self._api_key = config.twelve_data_api_key
        self._timeout = config.request_timeout_seconds

    async def _get(self, path: str, params: dict) -> dict:
        """GET *path* and return the decoded JSON body.

        Twelve Data reports some errors with HTTP 200 and
        ``{"status": "error"}``; those are treated like HTTP errors.
        """
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.get(
                    url,
                    params={**params, "apikey": self._api_key},
                    timeout=self._timeout,
                )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Twelve Data %s returned %d", path, exc.response.status_code,
            )
            raise UpstreamDataFailure(
                f"Market data request failed with status {exc.response.status_code}"
            ) from exc
        except httpx.TimeoutException as exc:
            logger.warning("Twelve Data %s timed out", path)
            raise UpstreamDataFailure("Market data request timed out") from exc
        except httpx.TransportError as exc:
            logger.warning("Twelve Data %s transport error (%s)", path, exc)
            raise UpstreamDataFailure("Market data source unreachable") from exc
        except ValueError as exc:
            raise UpstreamDataFailure("Market data response was not valid JSON") from exc

        if isinstance(data, dict) and data.get("status") == "error":
            message = data.get("message", "unknown error")
            logger.warning("Twelve Data %s error: %s", path, message)
            raise UpstreamDataFailure(f"Market data error: {message}")
        return data

    # ── Candle data ──────────────────────────────────────────────────────

    async def fetch_candles(
        self,
        symbol: str,
        interval: str = "1h",
        count: int = 50,
    ) -> list[Candle]:
        """Fetch OHLC bars for *symbol*.

        Args:
            symbol: e.g. ``"EUR/USD"``
            interval: e.g. ``"1h"``, ``"4h"``, ``"1day"``
            count: number of bars to request

        Returns:
            List of ``Candle`` objects ordered oldest-first.
        """
        data = await self._get(
            "/time_series",
            {"symbol": symbol, "interval": interval, "outputsize": count},
        )
        values = data.get("values") or []
        if not values:
            raise UpstreamDataFailure(f"No candle data returned for {symbol}")

        try:
            # The API lists newest first
            candles = [
                Candle(
                    time=v["datetime"],
                    open=float(v["open"]),
                    high=float(v["high"]),
                    low=float(v["low"]),
                    close=float(v["close"]),
                )
                for v in reversed(values)
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamDataFailure(f"Incomplete candle data for {symbol}") from exc

        if len(candles) < count:
            logger.warning(
                "Twelve Data returned %d of %d requested %s candles",
                len(candles), count, symbol,
            )
        return candles

    # ── Prices ───────────────────────────────────────────────────────────

    async def get_live_price(self, symbol: str) -> float:
        """Return the latest traded price for *symbol*."""
        data = await self._get("/price", {"symbol": symbol})
        try:
            return float(data["price"])
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamDataFailure(f"No live price returned for {symbol}") from exc
