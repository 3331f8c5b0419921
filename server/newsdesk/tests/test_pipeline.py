"""
Tests for newsdesk.pipeline.pipeline

Runs the real dedup ledger, annotation engine and broadcaster against a
recording subscriber. The clock is pinned so recency is deterministic.
"""
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from newsdesk.analysis.engine import AnnotationEngine
from newsdesk.feeds.poller import PollerPool, SourcePoller
from newsdesk.models.news import Analysis, Column, NewsItem
from newsdesk.pipeline.dedup import DedupLedger
from newsdesk.pipeline.pipeline import MANUAL_SOURCE, NewsPipeline, PipelineContext
from newsdesk.ws_server.broadcaster import Broadcaster
from newsdesk.ws_server.card_store import CardStore

NOW = datetime(2025, 3, 4, 14, 0, tzinfo=timezone.utc)
FED_HEADLINE = "Fed hikes rates by 50bps, surprising markets"


class RecordingSubscriber:
    def __init__(self) -> None:
        self.events: list[dict] = []

    async def send(self, message: str) -> None:
        self.events.append(json.loads(message))


def _item(headline: str = FED_HEADLINE, link: str = "https://x/1", hours_old: float = 2) -> NewsItem:
    return NewsItem(
        headline=headline,
        link=link,
        source="Reuters",
        published_at=NOW - timedelta(hours=hours_old),
    )


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def subscriber():
    return RecordingSubscriber()


@pytest.fixture
def broadcaster(subscriber):
    b = Broadcaster(CardStore(capacity=10))
    b.add(subscriber)
    return b


@pytest.fixture
def pipeline(broadcaster):
    ctx = PipelineContext(
        ledger=DedupLedger(capacity=100),
        engine=AnnotationEngine(),
        broadcaster=broadcaster,
        clock=lambda: NOW,
    )
    return NewsPipeline(ctx)


# ── End to end ────────────────────────────────────────────────────────────────

async def test_fed_hike_produces_high_impact_card(pipeline, subscriber, broadcaster):
    emitted = await pipeline.ingest([_item()], Column.MACRO)

    assert emitted == 1
    macro_events = [e for e in subscriber.events if e["column"] == "macro"]
    assert len(macro_events) == 1
    card = macro_events[0]["data"]
    assert card["headline"] == FED_HEADLINE
    assert card["impact"] == 3
    assert card["horizon"] == "NOW"
    assert "RISK-OFF" in card["tags"]
    assert card["tripwires"]
    assert card["pubDate"] == "2h ago"
    assert card["time"] == "14:00"
    assert card["verified"] is True

    stored = broadcaster.card_store.snapshot_for_new_subscriber()
    assert stored[0]["data"]["headline"] == FED_HEADLINE


async def test_specialised_column_is_mirrored_to_breaking(pipeline, subscriber):
    await pipeline.ingest([_item()], Column.MACRO)

    assert [e["column"] for e in subscriber.events] == ["macro", "breaking"]
    assert pipeline.stats.cards_mirrored == 1


async def test_same_item_in_consecutive_polls_is_emitted_once(pipeline, subscriber):
    first = await pipeline.ingest([_item()], Column.MACRO)
    sent_after_first = len(subscriber.events)

    second = await pipeline.ingest([_item()], Column.MACRO)

    assert first == 1
    assert second == 0
    assert len(subscriber.events) == sent_after_first
    assert pipeline.stats.items_duplicate == 1


# ── Recency ───────────────────────────────────────────────────────────────────

async def test_strict_gate_rejects_nine_hour_old_item(pipeline, subscriber):
    emitted = await pipeline.ingest([_item(hours_old=9)], Column.MACRO)

    assert emitted == 0
    assert subscriber.events == []
    # Passed the coarse gate, so it still occupies a ledger slot
    assert "https://x/1" in pipeline.context.ledger


async def test_coarse_gate_rejects_before_ledger(pipeline):
    await pipeline.ingest([_item(hours_old=50)], Column.MACRO)

    assert "https://x/1" not in pipeline.context.ledger
    assert pipeline.stats.items_stale == 1


async def test_item_without_timestamp_is_processed(pipeline, subscriber):
    item = NewsItem(headline=FED_HEADLINE, link="https://x/2", source="Wire")

    assert await pipeline.ingest([item], Column.MACRO) == 1
    assert subscriber.events[0]["data"]["pubDate"] is None


# ── Routing and flags ─────────────────────────────────────────────────────────

async def test_opinion_piece_is_excluded_and_not_mirrored(pipeline, subscriber):
    item = _item(headline="Weekly outlook: Fed hikes rates by 50bps, surprising markets")

    await pipeline.ingest([item], Column.MACRO)

    assert len(subscriber.events) == 1
    assert subscriber.events[0]["data"]["excludeFromTicker"] is True


async def test_feed_level_exclusion(pipeline, subscriber):
    await pipeline.ingest([_item()], Column.GEO, exclude_from_news=True)

    assert [e["column"] for e in subscriber.events] == ["geo"]
    assert subscriber.events[0]["data"]["excludeFromTicker"] is True


async def test_breaking_feed_is_reclassified(pipeline, subscriber):
    await pipeline.ingest([_item()], Column.BREAKING)

    assert subscriber.events[0]["column"] == "macro"


async def test_suppressed_story_is_not_broadcast(pipeline, subscriber):
    item = _item(headline="Local man, 82, dies after illness", link="https://x/obit")

    assert await pipeline.ingest([item], Column.BREAKING) == 0
    assert subscriber.events == []
    assert pipeline.stats.items_skipped == 1


async def test_headline_only_card_has_blank_payload(pipeline, subscriber):
    item = _item(headline="Gold edges higher in quiet trade", link="https://x/gold")

    await pipeline.ingest([item], Column.COMMODITY)

    card = subscriber.events[0]["data"]
    assert card["headlineOnly"] is True
    assert card["implications"] == []
    assert card["tripwires"] == []
    assert card["impact"] == 0
    assert card["horizon"] == ""


# ── Failure isolation ─────────────────────────────────────────────────────────

async def test_one_failing_item_does_not_stop_the_batch(broadcaster, subscriber):
    engine = MagicMock()
    engine.annotate.side_effect = [RuntimeError("boom"), Analysis()]
    pipeline = NewsPipeline(PipelineContext(DedupLedger(), engine, broadcaster, clock=lambda: NOW))

    emitted = await pipeline.ingest(
        [_item(link="https://x/a"), _item(link="https://x/b")],
        Column.MARKET,
    )

    assert emitted == 1
    assert pipeline.stats.items_failed == 1


async def test_failing_source_does_not_block_sibling(pipeline, subscriber):
    async def broken_fetch(limit):
        raise ConnectionError("feed down")

    async def healthy_fetch(limit):
        return [_item()]

    pool = PollerPool("rss", [
        SourcePoller("A", broken_fetch, pipeline.sink_for(Column.MACRO)),
        SourcePoller("B", healthy_fetch, pipeline.sink_for(Column.MACRO)),
    ])

    assert await pool.poll_all(limit=3) == 1
    assert subscriber.events[0]["data"]["headline"] == FED_HEADLINE


# ── Manual input ──────────────────────────────────────────────────────────────

async def test_manual_card_is_unverified_and_broadcast(pipeline, subscriber):
    card = await pipeline.submit_manual("  Trading halted on NYSE  ", Column.MARKET)

    assert card.verified is False
    assert card.headline == "Trading halted on NYSE"
    assert card.source == MANUAL_SOURCE
    event = subscriber.events[0]
    assert event["column"] == "market"
    assert event["data"]["verified"] is False
    assert event["data"]["implications"] == ["User-submitted item"]


async def test_manual_card_bypasses_dedup(pipeline, subscriber):
    await pipeline.submit_manual("Same headline")
    await pipeline.submit_manual("Same headline")

    assert len(subscriber.events) == 2
    assert len(pipeline.context.ledger) == 0


async def test_manual_card_requires_headline(pipeline):
    with pytest.raises(ValueError):
        await pipeline.submit_manual("   ")


async def test_stats(pipeline):
    await pipeline.ingest([_item(), _item()], Column.MACRO)
    stats = pipeline.get_stats()
    assert stats["items_seen"] == 2
    assert stats["cards_emitted"] == 1
    assert stats["ledger_size"] == 1
