"""
NewsAPI Client

Top business headlines and keyword searches from newsapi.org.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from newsdesk.core.types import SourceError
from newsdesk.feeds.normalizer import normalize_newsapi_article
from newsdesk.models.news import NewsItem

logger = logging.getLogger(__name__)

BASE_URL = "https://newsapi.org/v2"
PAGE_SIZE = 10


class NewsApiClient:
    """Thin async wrapper over the two NewsAPI endpoints we poll."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        timeout_seconds: float = 10.0,
        base_url: str = BASE_URL,
    ) -> None:
        self._session = session
        self._api_key = api_key
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._base_url = base_url

    async def top_business_headlines(self, limit: int = 5) -> list[NewsItem]:
        data = await self._get(
            "top-headlines",
            {"category": "business", "language": "en", "pageSize": PAGE_SIZE},
            source="NewsAPI",
        )
        return self._to_items(data, limit)

    async def search(self, query: str, limit: int = 5) -> list[NewsItem]:
        data = await self._get(
            "everything",
            {"q": query, "language": "en", "sortBy": "publishedAt", "pageSize": PAGE_SIZE},
            source="NewsAPI search",
        )
        return self._to_items(data, limit)

    async def _get(self, endpoint: str, params: dict[str, Any], source: str) -> dict[str, Any]:
        try:
            async with self._session.get(
                f"{self._base_url}/{endpoint}",
                params={**params, "apiKey": self._api_key},
                timeout=self._timeout,
            ) as resp:
                if resp.status >= 400:
                    raise SourceError(
                        f"HTTP {resp.status} from NewsAPI {endpoint}",
                        source=source,
                        status=resp.status,
                    )
                return await resp.json()
        except asyncio.TimeoutError as e:
            raise SourceError("NewsAPI request timed out", source=source) from e
        except aiohttp.ClientError as e:
            raise SourceError(f"NewsAPI request failed: {e}", source=source) from e

    @staticmethod
    def _to_items(data: dict[str, Any], limit: int) -> list[NewsItem]:
        items: list[NewsItem] = []
        for article in (data.get("articles") or [])[:limit]:
            item = normalize_newsapi_article(article)
            if item is not None:
                items.append(item)
        return items
