"""
News Pipeline

Dedup -> coarse recency -> strict recency -> column routing -> annotation
-> card -> broadcast. One NewsPipeline instance is shared by every poller;
per-source batches run sequentially inside the poller's own task.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable

from newsdesk.analysis.classifier import is_opinion_or_analysis, resolve_column
from newsdesk.analysis.engine import AnnotationEngine
from newsdesk.models.news import Card, Column, Horizon, NewsItem
from newsdesk.pipeline.dedup import DedupLedger
from newsdesk.pipeline.recency import (
    COARSE_MAX_AGE_HOURS,
    STRICT_MAX_AGE_HOURS,
    format_pub_age,
    is_fresh,
)
from newsdesk.ws_server.broadcaster import Broadcaster
from newsdesk.ws_server.events import new_card_event

logger = logging.getLogger(__name__)

MANUAL_SOURCE = "Manual Input"
MANUAL_IMPLICATION = "User-submitted item"

# Columns whose cards are also shown in the breaking column
MIRRORED_COLUMNS = frozenset({Column.MACRO, Column.GEO, Column.COMMODITY, Column.FX})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PipelineContext:
    """Shared collaborators for every pipeline run."""

    ledger: DedupLedger
    engine: AnnotationEngine
    broadcaster: Broadcaster
    coarse_max_age_hours: float = COARSE_MAX_AGE_HOURS
    strict_max_age_hours: float = STRICT_MAX_AGE_HOURS
    clock: Callable[[], datetime] = field(default=_utcnow)
    mirror_to_breaking: bool = True


@dataclass
class PipelineStats:
    items_seen: int = 0
    items_stale: int = 0
    items_duplicate: int = 0
    items_skipped: int = 0
    items_failed: int = 0
    cards_emitted: int = 0
    cards_mirrored: int = 0
    manual_cards: int = 0


class NewsPipeline:
    """
    Turns admitted NewsItems into broadcast cards.

    Example:
        pipeline = NewsPipeline(PipelineContext(ledger, engine, broadcaster))
        emitted = await pipeline.ingest(items, Column.BREAKING)
    """

    def __init__(self, context: PipelineContext) -> None:
        self._ctx = context
        self._stats = PipelineStats()

    @property
    def context(self) -> PipelineContext:
        return self._ctx

    @property
    def stats(self) -> PipelineStats:
        return self._stats

    def admit(self, item: NewsItem, now: datetime) -> bool:
        """
        Coarse recency gate, then the dedup ledger.

        Stale items are rejected before they reach the ledger so they never
        take up a slot in it.
        """
        self._stats.items_seen += 1
        if not is_fresh(item.published_at, now, self._ctx.coarse_max_age_hours):
            self._stats.items_stale += 1
            return False
        if not self._ctx.ledger.admit(item.identifier):
            self._stats.items_duplicate += 1
            return False
        return True

    async def process(
        self,
        item: NewsItem,
        feed_column: Column,
        exclude_from_news: bool = False,
        now: datetime | None = None,
    ) -> Card | None:
        """
        Annotate and broadcast one admitted item.

        Returns:
            The emitted card, or None if the item was stale or suppressed
        """
        now = now or self._ctx.clock()
        if not is_fresh(item.published_at, now, self._ctx.strict_max_age_hours):
            self._stats.items_stale += 1
            return None

        column = resolve_column(feed_column, item.text.lower())
        is_opinion = is_opinion_or_analysis(item.headline)
        analysis = self._ctx.engine.annotate(item.headline, column, item.body)
        if analysis.skip:
            self._stats.items_skipped += 1
            return None

        excluded = exclude_from_news or is_opinion
        card = Card.from_analysis(
            analysis,
            emitted_at=now,
            column=column,
            headline=item.headline or "No headline",
            link=item.link,
            source=item.source,
            pub_age=format_pub_age(item.published_at, now),
            exclude_from_ticker=excluded,
        )

        await self._ctx.broadcaster.broadcast(new_card_event(column, card))
        self._stats.cards_emitted += 1

        if self._ctx.mirror_to_breaking and column in MIRRORED_COLUMNS and not excluded:
            await self._ctx.broadcaster.broadcast(new_card_event(Column.BREAKING, card))
            self._stats.cards_mirrored += 1

        return card

    async def ingest(
        self,
        items: Iterable[NewsItem],
        feed_column: Column,
        exclude_from_news: bool = False,
    ) -> int:
        """
        Admit and process a batch from one source, in order.

        A failure on one item is logged and does not stop the rest.

        Returns:
            Number of cards emitted (mirrors not counted)
        """
        emitted = 0
        for item in items:
            now = self._ctx.clock()
            if not self.admit(item, now):
                continue
            try:
                card = await self.process(item, feed_column, exclude_from_news, now)
            except Exception as e:
                self._stats.items_failed += 1
                logger.error(
                    f"Failed to process item from {item.source}: {e}",
                    exc_info=True,
                    extra={"source": item.source, "headline": item.headline[:80]},
                )
                continue
            if card is not None:
                emitted += 1
        return emitted

    def sink_for(
        self,
        feed_column: Column,
        exclude_from_news: bool = False,
    ) -> Callable[[list[NewsItem]], object]:
        """Bind a source's routing so a poller can hand batches straight in."""

        async def sink(items: list[NewsItem]) -> int:
            return await self.ingest(items, feed_column, exclude_from_news)

        return sink

    async def submit_manual(
        self,
        headline: str,
        column: Column = Column.BREAKING,
        source: str | None = None,
    ) -> Card:
        """
        Broadcast an operator-submitted card.

        Manual cards bypass dedup, recency and annotation and are marked
        unverified.
        """
        if not headline or not headline.strip():
            raise ValueError("headline must be non-empty")

        card = Card(
            emitted_at=self._ctx.clock(),
            column=column,
            headline=headline.strip(),
            link="",
            source=source or MANUAL_SOURCE,
            verified=False,
            implications=(MANUAL_IMPLICATION,),
            impact=2,
            horizon=Horizon.DAYS,
        )
        await self._ctx.broadcaster.broadcast(new_card_event(column, card))
        self._stats.manual_cards += 1
        logger.info(f"Manual card submitted to {column.value}", extra={"source": card.source})
        return card

    def get_stats(self) -> dict:
        return {
            "items_seen": self._stats.items_seen,
            "items_stale": self._stats.items_stale,
            "items_duplicate": self._stats.items_duplicate,
            "items_skipped": self._stats.items_skipped,
            "items_failed": self._stats.items_failed,
            "cards_emitted": self._stats.cards_emitted,
            "cards_mirrored": self._stats.cards_mirrored,
            "manual_cards": self._stats.manual_cards,
            "ledger_size": len(self._ctx.ledger),
        }
