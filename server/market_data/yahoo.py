"""
Yahoo Finance chart client

Quotes come from the v8 chart endpoint's `meta` block: regularMarketPrice
against previousClose (or chartPreviousClose). Batches are fetched
concurrently under a small semaphore; a symbol that fails is dropped from
the batch rather than failing it.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

import aiohttp

from market_data.snapshot import Quote
from market_data.symbols import YIELD_SYMBOLS, Instrument, market_label
from newsdesk.core.types import SourceError

logger = logging.getLogger(__name__)

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

# Board moves smaller than this (in percent) read as flat
FLAT_THRESHOLD_PCT = 0.05


def _is_fx(symbol: str) -> bool:
    return symbol.endswith("USD=X") or symbol.endswith("JPY=X") or symbol.endswith("GBP=X")


_YIELDS = frozenset(symbol for symbol, _ in YIELD_SYMBOLS)


def _is_yield(symbol: str) -> bool:
    return symbol in _YIELDS


def format_value(symbol: str, value: float) -> str:
    """Display value for the market board."""
    if _is_fx(symbol):
        return f"{value:.4f}"
    if _is_yield(symbol):
        return f"{value:.3f}%"
    if "=F" in symbol:
        return f"${value:.2f}"
    return f"{value:.2f}"


def format_change(symbol: str, change: float, change_pct: float) -> str:
    """Yields move in basis points, everything else in percent."""
    if _is_yield(symbol):
        bps = change * 100
        return f"{'+' if bps > 0 else ''}{bps:.1f}bp"
    return f"{'+' if change_pct > 0 else ''}{change_pct:.2f}%"


def direction_of(change: float) -> str:
    if change > 0:
        return "up"
    if change < 0:
        return "down"
    return "neutral"


def board_decimals(label: str, price: float) -> int:
    if "BTC" in label or "ETH" in label:
        return 0
    if "KRW" in label:
        return 1
    if label == "DXY":
        return 3
    if "JPY" in label:
        return 2
    if price > 10:
        return 2
    return 4


class YahooChartClient:
    """Async quote fetcher over a shared aiohttp session."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout_seconds: float = 8.0,
        concurrency: int = 2,
    ) -> None:
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._semaphore = asyncio.Semaphore(concurrency)

    async def fetch_meta(self, symbol: str, params: Optional[dict[str, str]] = None) -> dict[str, Any]:
        """Raw chart `meta` for one symbol. Raises SourceError."""
        try:
            async with self._semaphore:
                async with self._session.get(
                    CHART_URL.format(symbol=symbol),
                    params=params or {"interval": "1d", "range": "5d"},
                    headers={"User-Agent": USER_AGENT},
                    timeout=self._timeout,
                ) as resp:
                    resp.raise_for_status()
                    data = await resp.json()
        except asyncio.TimeoutError as e:
            raise SourceError("Quote request timed out", source=symbol) from e
        except aiohttp.ClientResponseError as e:
            raise SourceError(f"HTTP {e.status} for quote", source=symbol, status=e.status) from e
        except aiohttp.ClientError as e:
            raise SourceError(f"Quote request failed: {e}", source=symbol) from e

        result = ((data or {}).get("chart") or {}).get("result") or []
        if not result or "meta" not in result[0]:
            raise SourceError("Chart response has no result", source=symbol)
        return result[0]["meta"]

    async def fetch_quote(self, symbol: str, label: Optional[str] = None) -> Quote:
        """Market-board quote. Raises SourceError when price or close is missing."""
        meta = await self.fetch_meta(symbol)
        current = meta.get("regularMarketPrice")
        previous = meta.get("previousClose") or meta.get("chartPreviousClose")
        if not current or not previous:
            raise SourceError("Quote missing price or previous close", source=symbol)

        change = current - previous
        change_pct = change / previous * 100
        return Quote(
            symbol=symbol,
            label=label or market_label(symbol),
            value=format_value(symbol, current),
            change=format_change(symbol, change, change_pct),
            direction=direction_of(change),
            raw_value=float(current),
            raw_change=float(change),
            fetched_at=datetime.now(timezone.utc),
        )

    async def fetch_board_row(self, instrument: Instrument) -> Quote:
        """FX / commodity board row: percent change, flat under 0.05%."""
        meta = await self.fetch_meta(instrument.symbol, params={"interval": "1d", "range": "5d"})
        price = meta.get("regularMarketPrice") or meta.get("previousClose")
        previous = meta.get("chartPreviousClose") or meta.get("previousClose")
        if not price or not previous:
            raise SourceError("Quote missing price or previous close", source=instrument.symbol)

        change = price - previous
        change_pct = change / previous * 100
        direction = "neutral" if abs(change_pct) < FLAT_THRESHOLD_PCT else direction_of(change)
        decimals = board_decimals(instrument.label, price)
        return Quote(
            symbol=instrument.symbol,
            label=instrument.label,
            value=f"{price:.{decimals}f}",
            change=f"{change_pct:.2f}",
            direction=direction,
            raw_value=float(price),
            raw_change=float(change),
            unit=instrument.unit,
        )

    async def fetch_quotes(self, symbols: Iterable[str]) -> list[Quote]:
        """Quote every symbol concurrently; failed symbols are logged and dropped."""
        symbols = list(symbols)
        results = await asyncio.gather(
            *(self.fetch_quote(s) for s in symbols),
            return_exceptions=True,
        )
        quotes = self._collect(symbols, results)
        logger.info(f"Fetched {len(quotes)}/{len(symbols)} market quotes")
        return quotes

    async def fetch_board(self, instruments: Iterable[Instrument]) -> list[Quote]:
        instruments = list(instruments)
        results = await asyncio.gather(
            *(self.fetch_board_row(i) for i in instruments),
            return_exceptions=True,
        )
        return self._collect([i.symbol for i in instruments], results)

    @staticmethod
    def _collect(symbols: list[str], results: list[Any]) -> list[Quote]:
        quotes: list[Quote] = []
        for symbol, result in zip(symbols, results):
            if isinstance(result, BaseException):
                logger.debug(f"Quote for {symbol} failed: {result}")
                continue
            quotes.append(result)
        return quotes
