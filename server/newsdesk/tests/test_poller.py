"""
Tests for newsdesk.feeds.poller
"""
import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from newsdesk.core.types import SourceError
from newsdesk.feeds.poller import PollerPool, SourcePoller
from newsdesk.models.news import NewsItem


def _items(n: int) -> list[NewsItem]:
    return [
        NewsItem(
            headline=f"headline {i}",
            link=f"https://feed/{i}",
            source="Feed",
            published_at=datetime.now(timezone.utc),
        )
        for i in range(n)
    ]


@pytest.fixture
def sink():
    return AsyncMock(side_effect=lambda items: len(items))


# ── SourcePoller ──────────────────────────────────────────────────────────────

async def test_poll_hands_batch_to_sink(sink):
    fetch = AsyncMock(return_value=_items(3))
    poller = SourcePoller("Feed", fetch, sink)

    assert await poller.poll(limit=3) == 3
    fetch.assert_awaited_once_with(3)
    sink.assert_awaited_once()


async def test_empty_batch_skips_sink(sink):
    poller = SourcePoller("Feed", AsyncMock(return_value=[]), sink)

    assert await poller.poll(limit=3) == 0
    sink.assert_not_awaited()


async def test_failure_increments_counter_and_success_resets(sink):
    fetch = AsyncMock(side_effect=[SourceError("down", source="Feed"), _items(1)])
    poller = SourcePoller("Feed", fetch, sink)

    assert await poller.poll(limit=1) == 0
    assert poller.consecutive_failures == 1

    assert await poller.poll(limit=1) == 1
    assert poller.consecutive_failures == 0


async def test_source_trips_after_threshold(sink):
    fetch = AsyncMock(side_effect=SourceError("down", source="Feed"))
    poller = SourcePoller("Feed", fetch, sink, failure_threshold=2)

    for _ in range(3):
        await poller.poll(limit=1)

    assert poller.is_tripped
    await poller.poll(limit=1)
    assert fetch.await_count == 3
    assert poller.get_stats()["skipped"] == 1


async def test_reset_puts_source_back(sink):
    fetch = AsyncMock(side_effect=SourceError("down", source="Feed"))
    poller = SourcePoller("Feed", fetch, sink, failure_threshold=0)
    await poller.poll(limit=1)
    assert poller.is_tripped

    poller.reset()
    fetch.side_effect = None
    fetch.return_value = _items(2)

    assert await poller.poll(limit=2) == 2


async def test_slow_fetch_times_out(sink):
    async def slow(limit):
        await asyncio.sleep(1)
        return _items(1)

    poller = SourcePoller("Slow", slow, sink, timeout=0.01)

    assert await poller.poll(limit=1) == 0
    assert poller.consecutive_failures == 1


# ── PollerPool ────────────────────────────────────────────────────────────────

async def test_pool_sums_emitted_and_isolates_failures(sink):
    good = SourcePoller("Good", AsyncMock(return_value=_items(2)), sink)
    bad = SourcePoller("Bad", AsyncMock(side_effect=RuntimeError("dns")), sink)
    pool = PollerPool("rss", [bad, good])

    assert await pool.poll_all(limit=5) == 2
    stats = pool.get_stats()
    assert stats["sources"] == 2
    assert stats["tripped"] == 0


async def test_pool_survives_sink_exception():
    failing_sink = AsyncMock(side_effect=RuntimeError("pipeline bug"))
    ok_sink = AsyncMock(return_value=1)
    pool = PollerPool("rss", [
        SourcePoller("A", AsyncMock(return_value=_items(1)), failing_sink),
        SourcePoller("B", AsyncMock(return_value=_items(1)), ok_sink),
    ])

    assert await pool.poll_all(limit=1) == 1
