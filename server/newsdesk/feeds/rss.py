"""
RSS Feed Client

Fetches a feed over aiohttp and parses it with feedparser.
"""
from __future__ import annotations

import asyncio
import logging

import aiohttp
import feedparser

from newsdesk.core.types import SourceError
from newsdesk.feeds.normalizer import normalize_rss_entry
from newsdesk.feeds.sources import FeedSource
from newsdesk.models.news import NewsItem

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; NewsdeskBot/1.0)"
ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8"


class RssFeedClient:
    """Fetch-and-parse for RSS/Atom sources, sharing one HTTP session."""

    def __init__(self, session: aiohttp.ClientSession, timeout_seconds: float = 10.0) -> None:
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch(self, source: FeedSource, limit: int) -> list[NewsItem]:
        """
        Return up to limit items from the top of the feed.

        Raises SourceError on HTTP errors, timeouts and unparseable feeds.
        """
        try:
            async with self._session.get(
                source.url,
                headers={"User-Agent": USER_AGENT, "Accept": ACCEPT},
                timeout=self._timeout,
                allow_redirects=True,
            ) as resp:
                if resp.status >= 400:
                    raise SourceError(
                        f"HTTP {resp.status} from feed",
                        source=source.name,
                        status=resp.status,
                    )
                body = await resp.read()
        except asyncio.TimeoutError as e:
            raise SourceError("Feed request timed out", source=source.name) from e
        except aiohttp.ClientError as e:
            raise SourceError(f"Feed request failed: {e}", source=source.name) from e

        parsed = feedparser.parse(body)
        if parsed.bozo and not parsed.entries:
            raise SourceError(
                f"Unparseable feed: {parsed.get('bozo_exception')}",
                source=source.name,
            )

        items: list[NewsItem] = []
        for entry in parsed.entries[:limit]:
            item = normalize_rss_entry(entry, source.name)
            if item is not None:
                items.append(item)
        return items
