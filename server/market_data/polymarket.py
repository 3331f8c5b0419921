"""
Polymarket prediction markets

Pulls the highest-volume open markets from the gamma API and keeps the
ones that read as macro, political or geopolitical.
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import aiohttp

from newsdesk.core.types import SourceError

logger = logging.getLogger(__name__)

GAMMA_API = "https://gamma-api.polymarket.com"
MAX_MARKETS = 20
DIRECTION_VOLUME_FLOOR = 10_000

MARKET_RELEVANT_KEYWORDS: tuple[str, ...] = (
    # Macro / Fed
    "fed", "fomc", "rate", "inflation", "recession", "gdp", "unemployment", "cpi", "pce", "jobs",
    "powell", "treasury", "default", "debt ceiling", "shutdown",
    # Crypto
    "bitcoin", "btc", "ethereum", "eth", "crypto", "sec", "etf",
    # Politics
    "trump", "election", "president", "congress", "senate", "governor",
    # Geopolitics
    "china", "russia", "ukraine", "taiwan", "iran", "israel", "nato", "war", "invasion", "sanctions",
    "tariff", "trade war", "xi jinping", "putin", "zelensky", "north korea",
    # Markets
    "oil", "gold", "stock", "market", "s&p", "nasdaq", "dow", "vix", "crash", "rally",
    # Central banks
    "ecb", "boj", "bank of england", "lagarde", "ueda",
    # Tech / regulation
    "openai", "nvidia", "antitrust", "regulation",
)

EXCLUDE_KEYWORDS: tuple[str, ...] = (
    "nfl", "nba", "mlb", "nhl", "super bowl", "world series", "playoffs", "championship",
    "oscars", "grammy", "emmy", "golden globe", "movie", "film", "album", "song",
    "influencer", "youtube", "twitch", "streamer", "celebrity",
    "bachelor", "love island", "reality tv", "kardashian", "taylor swift", "concert",
    "wrestling", "ufc", "boxing", "fight", "bout", "match", "game score",
)


@dataclass(frozen=True)
class PredictionMarket:
    id: str
    slug: str
    question: str
    probability: float  # 0..1
    volume_24h: float
    direction: str
    category: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "question": self.question,
            "probability": f"{self.probability * 100:.1f}",
            "volume24h": self.volume_24h,
            "direction": self.direction,
            "category": self.category,
        }


def is_relevant(market: Mapping[str, Any]) -> bool:
    text = f"{market.get('question') or ''} {market.get('description') or ''}".lower()
    if not any(k in text for k in MARKET_RELEVANT_KEYWORDS):
        return False
    return not any(k in text for k in EXCLUDE_KEYWORDS)


def categorize(question: str) -> str:
    q = question.lower()
    if any(k in q for k in ("fed", "rate", "inflation", "recession")):
        return "MACRO"
    if any(k in q for k in ("bitcoin", "btc", "eth", "crypto")):
        return "CRYPTO"
    if any(k in q for k in ("trump", "election", "president")):
        return "POLITICS"
    if any(k in q for k in ("china", "russia", "ukraine", "war")):
        return "GEO"
    if any(k in q for k in ("oil", "gold", "commodity")):
        return "COMMODITY"
    return "OTHER"


def parse_probability(outcome_prices: Any) -> float:
    """First outcome price; 0.5 when missing or malformed."""
    if not outcome_prices:
        return 0.5
    try:
        prices = json.loads(outcome_prices) if isinstance(outcome_prices, str) else outcome_prices
        return float(prices[0]) or 0.5
    except (ValueError, TypeError, IndexError):
        return 0.5


def to_prediction_market(market: Mapping[str, Any]) -> PredictionMarket:
    probability = parse_probability(market.get("outcomePrices"))
    volume = float(market.get("volume24hr") or 0)
    direction = "neutral"
    if volume > DIRECTION_VOLUME_FLOOR:
        direction = "up" if probability > 0.5 else "down"
    question = market.get("question") or "Unknown"
    return PredictionMarket(
        id=str(market.get("id", "")),
        slug=market.get("slug") or str(market.get("id", "")),
        question=question,
        probability=probability,
        volume_24h=volume,
        direction=direction,
        category=categorize(question),
    )


class PolymarketClient:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout_seconds: float = 10.0,
        base_url: str = GAMMA_API,
    ) -> None:
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._base_url = base_url

    async def fetch_markets(self, limit: int = MAX_MARKETS) -> list[PredictionMarket]:
        """Top relevant open markets by 24h volume. Raises SourceError."""
        params = {"closed": "false", "limit": "50", "order": "volume24hr", "ascending": "false"}
        try:
            async with self._session.get(
                f"{self._base_url}/markets", params=params, timeout=self._timeout
            ) as resp:
                resp.raise_for_status()
                data = await resp.json()
        except asyncio.TimeoutError as e:
            raise SourceError("Polymarket request timed out", source="polymarket") from e
        except aiohttp.ClientError as e:
            raise SourceError(f"Polymarket request failed: {e}", source="polymarket") from e

        relevant = [m for m in (data or []) if is_relevant(m)]
        return [to_prediction_market(m) for m in relevant[:limit]]
