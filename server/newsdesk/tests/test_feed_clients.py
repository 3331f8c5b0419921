"""
Tests for newsdesk.feeds.rss and newsdesk.feeds.newsapi

The aiohttp session is replaced with a fake whose get() returns canned
responses; no network access.
"""
import asyncio

import aiohttp
import pytest

from newsdesk.core.types import SourceError
from newsdesk.feeds.newsapi import NewsApiClient
from newsdesk.feeds.rss import RssFeedClient
from newsdesk.feeds.sources import FeedSource
from newsdesk.models.news import Column

RSS_BODY = """<?xml version="1.0"?>
<rss version="2.0"><channel><title>Test</title>
<item><title>First story</title><link>https://x/1</link>
<pubDate>Tue, 04 Mar 2025 12:00:00 GMT</pubDate></item>
<item><title>Second story</title><link>https://x/2</link></item>
<item><title>Third story</title><link>https://x/3</link></item>
</channel></rss>"""


class FakeResponse:
    def __init__(
        self,
        status: int = 200,
        text: str = "",
        payload: dict | None = None,
        body: bytes | None = None,
    ) -> None:
        self.status = status
        self._body = body if body is not None else text.encode("utf-8")
        self._payload = payload or {}

    async def read(self) -> bytes:
        return self._body

    async def json(self) -> dict:
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self._response = response
        self._error = error
        self.calls: list[tuple[str, dict]] = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self._error is not None:
            raise self._error
        return self._response


SOURCE = FeedSource("Test Feed", "https://feeds.test/rss", Column.BREAKING)


# ── RssFeedClient ─────────────────────────────────────────────────────────────

async def test_rss_fetch_parses_and_limits():
    session = FakeSession(FakeResponse(text=RSS_BODY))
    client = RssFeedClient(session)

    items = await client.fetch(SOURCE, limit=2)

    assert [i.headline for i in items] == ["First story", "Second story"]
    assert items[0].source == "Test Feed"
    assert items[0].published_at is not None
    assert items[1].published_at is None
    url, kwargs = session.calls[0]
    assert url == SOURCE.url
    assert "User-Agent" in kwargs["headers"]


async def test_rss_decodes_declared_non_utf8_feed():
    body = (
        b'<?xml version="1.0" encoding="ISO-8859-1"?>\n'
        b"<rss version=\"2.0\"><channel><title>Markets</title>"
        b"<item><title>Caf\xe9 futures rally</title><link>https://x/c</link></item>"
        b"</channel></rss>"
    )
    client = RssFeedClient(FakeSession(FakeResponse(body=body)))

    items = await client.fetch(SOURCE, limit=3)

    assert [i.headline for i in items] == ["Caf\u00e9 futures rally"]


async def test_rss_http_error_raises_source_error():
    client = RssFeedClient(FakeSession(FakeResponse(status=503)))

    with pytest.raises(SourceError) as exc_info:
        await client.fetch(SOURCE, limit=3)
    assert exc_info.value.status == 503
    assert exc_info.value.source == "Test Feed"


async def test_rss_timeout_raises_source_error():
    client = RssFeedClient(FakeSession(error=asyncio.TimeoutError()))
    with pytest.raises(SourceError, match="timed out"):
        await client.fetch(SOURCE, limit=3)


async def test_rss_client_error_raises_source_error():
    client = RssFeedClient(FakeSession(error=aiohttp.ClientConnectionError("refused")))
    with pytest.raises(SourceError, match="failed"):
        await client.fetch(SOURCE, limit=3)


async def test_rss_garbage_raises_source_error():
    client = RssFeedClient(FakeSession(FakeResponse(text="<html><body>not a feed")))
    with pytest.raises(SourceError, match="Unparseable"):
        await client.fetch(SOURCE, limit=3)


# ── NewsApiClient ─────────────────────────────────────────────────────────────

ARTICLES = {
    "status": "ok",
    "articles": [
        {"title": "One", "url": "https://n/1", "source": {"name": "Reuters"}},
        {"title": "[Removed]", "url": "https://removed.com"},
        {"title": "Two", "url": "https://n/2", "source": {"name": "FT"}},
    ],
}


async def test_top_headlines_query():
    session = FakeSession(FakeResponse(payload=ARTICLES))
    client = NewsApiClient(session, api_key="k", base_url="https://api.test/v2")

    items = await client.top_business_headlines(limit=5)

    assert [i.headline for i in items] == ["One", "Two"]
    url, kwargs = session.calls[0]
    assert url == "https://api.test/v2/top-headlines"
    assert kwargs["params"]["category"] == "business"
    assert kwargs["params"]["apiKey"] == "k"


async def test_search_query_and_limit():
    session = FakeSession(FakeResponse(payload=ARTICLES))
    client = NewsApiClient(session, api_key="k")

    items = await client.search("ukraine OR taiwan", limit=1)

    assert len(items) == 1
    url, kwargs = session.calls[0]
    assert url.endswith("/everything")
    assert kwargs["params"]["q"] == "ukraine OR taiwan"
    assert kwargs["params"]["sortBy"] == "publishedAt"


async def test_newsapi_error_status():
    client = NewsApiClient(FakeSession(FakeResponse(status=429)), api_key="k")
    with pytest.raises(SourceError) as exc_info:
        await client.top_business_headlines()
    assert exc_info.value.status == 429
