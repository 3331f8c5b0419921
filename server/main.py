"""
newsdesk server: top-level orchestrator

Runs all services in a single async event loop:
  - feeds: RSS + NewsAPI pollers -> dedup -> recency -> annotation -> broadcast
  - market data: quote / macro / FX / commodity / prediction snapshots on timers
  - ws_server: card history + snapshot handshake, live fan-out, refresh requests
  - api: manual cards, on-demand headline and game analysis, health
  - game tracker: strategic game board updated from recent cards
  - pubsub: optional Redis mirror of every card

Usage:
    cd server
    python main.py          # live feeds
    python main.py --mock   # generated headlines, no feed polling
"""
from __future__ import annotations

import argparse
import asyncio
import functools
import logging
import signal
import sys
from typing import Any

import aiohttp

from newsdesk.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(name)s] %(levelname)s - %(message)s",
)
logger = logging.getLogger("newsdesk")


def _handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Last-resort handler for exceptions no task retrieved. Logs and keeps the loop running."""
    exc = context.get("exception")
    logger.error(
        f"Unhandled exception in event loop: {context.get('message', exc)}",
        exc_info=exc,
    )


def _handle_uncaught(exc_type, exc, tb) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))


async def run(*, use_mock: bool = False) -> None:
    shutdown_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown_event.set)
    loop.set_exception_handler(_handle_loop_exception)
    sys.excepthook = _handle_uncaught

    # ── Fan-out ────────────────────────────────────────────────────
    from newsdesk.ws_server import Broadcaster, CardStore, NewsWebSocketServer

    card_store = CardStore(settings.pipeline.recent_cards)
    broadcaster = Broadcaster(card_store)

    # ── Market data ────────────────────────────────────────────────
    from market_data import FredClient, PolymarketClient, SnapshotHub, YahooChartClient

    session = aiohttp.ClientSession()
    hub = SnapshotHub(
        YahooChartClient(session),
        FredClient(session, settings.api_keys.fred),
        PolymarketClient(session),
        broadcaster=broadcaster,
    )

    # ── Pipeline ───────────────────────────────────────────────────
    from newsdesk.analysis import AnnotationEngine
    from newsdesk.pipeline import DedupLedger, NewsPipeline, PipelineContext

    engine = AnnotationEngine(snapshot_provider=hub.snapshot_values)
    pipeline = NewsPipeline(
        PipelineContext(
            ledger=DedupLedger(settings.pipeline.dedup_capacity),
            engine=engine,
            broadcaster=broadcaster,
            coarse_max_age_hours=settings.pipeline.coarse_max_age_hours,
            strict_max_age_hours=settings.pipeline.strict_max_age_hours,
        )
    )

    # ── Pollers ────────────────────────────────────────────────────
    from newsdesk.feeds import (
        GEO_NEWSAPI_QUERY,
        RSS_FEEDS,
        NewsApiClient,
        PollerPool,
        RssFeedClient,
        SourcePoller,
    )
    from newsdesk.models.news import Column

    cfg = settings.pipeline

    def _poller(name, fetch, column, exclude=False) -> SourcePoller:
        return SourcePoller(
            name,
            fetch,
            pipeline.sink_for(column, exclude),
            failure_threshold=cfg.failure_threshold,
            timeout=cfg.fetch_timeout_seconds,
        )

    rss = RssFeedClient(session, cfg.fetch_timeout_seconds)
    rss_pool = PollerPool(
        "rss",
        [_poller(f.name, functools.partial(rss.fetch, f), f.column, f.exclude_from_news) for f in RSS_FEEDS],
    )

    newsapi_pool: PollerPool | None = None
    newsapi_geo_pool: PollerPool | None = None
    if settings.api_keys.newsapi:
        newsapi = NewsApiClient(session, settings.api_keys.newsapi, cfg.fetch_timeout_seconds)
        newsapi_pool = PollerPool(
            "newsapi", [_poller("NewsAPI", newsapi.top_business_headlines, Column.BREAKING)]
        )
        newsapi_geo_pool = PollerPool(
            "newsapi-geo",
            [_poller("NewsAPI geo", functools.partial(newsapi.search, GEO_NEWSAPI_QUERY), Column.GEO)],
        )
    else:
        logger.info("NEWSAPI_KEY not set, NewsAPI polling disabled")

    # ── Redis mirror ───────────────────────────────────────────────
    from newsdesk.core.types import PublishError
    from newsdesk.pubsub import CardPublisher

    publisher: CardPublisher | None = None
    if settings.redis.enabled:
        publisher = CardPublisher(settings.redis.url)
        try:
            await publisher.connect()
            broadcaster.add_card_sink(publisher.publish_card)
        except PublishError as e:
            logger.warning(f"Redis mirror disabled: {e}")
            publisher = None

    # ── Analyst + HTTP API ─────────────────────────────────────────
    from analyst import GameTracker, GroqClient, HeadlineAnalyst
    from newsdesk.api import HttpApiServer, create_app

    groq: GroqClient | None = None
    analyst: HeadlineAnalyst | None = None
    if settings.api_keys.groq:
        groq = GroqClient(settings.api_keys.groq)
        analyst = HeadlineAnalyst(groq, hub)
    else:
        logger.info("GROQ_API_KEY not set, headline analysis and game updates disabled")
    game_tracker = GameTracker(hub, card_store, completer=groq)

    ws_server = NewsWebSocketServer(
        broadcaster,
        host=settings.websocket_server.host,
        port=settings.websocket_server.port,
        handshake=hub,
    )

    def _stats() -> dict[str, Any]:
        return {
            "pipeline": pipeline.get_stats(),
            "broadcaster": broadcaster.get_stats(),
            "market_data": hub.get_stats(),
            "sources": rss_pool.get_stats(),
            "scheduler": scheduler.get_stats(),
            "game_tracker": game_tracker.get_stats(),
        }

    api_server: HttpApiServer | None = None
    if settings.http_api.enabled:
        api_server = HttpApiServer(
            create_app(pipeline, analyst, _stats),
            settings.http_api.host,
            settings.http_api.port,
        )

    # ── Schedules ──────────────────────────────────────────────────
    from newsdesk.scheduler import Scheduler

    sched = settings.schedule
    scheduler = Scheduler()
    if not use_mock:
        ws_server.set_refresh_handler(lambda: rss_pool.poll_all(cfg.items_per_feed))
        scheduler.add("rss", sched.rss, lambda: rss_pool.poll_all(cfg.items_per_feed))
        if newsapi_pool is not None:
            scheduler.add("newsapi", sched.newsapi, lambda: newsapi_pool.poll_all(5))
            scheduler.add("newsapi-geo", sched.newsapi_geo, lambda: newsapi_geo_pool.poll_all(5))
    scheduler.add("market", sched.market, hub.refresh_and_push_market)
    scheduler.add("macro", sched.macro, hub.refresh_and_push_macro)
    scheduler.add("fx", sched.fx, hub.refresh_and_push_fx)
    scheduler.add("commodities", sched.commodity, hub.refresh_and_push_commodities)
    scheduler.add("prediction", sched.prediction, hub.refresh_and_push_prediction)
    scheduler.add("game_theory", sched.game_theory, game_tracker.run)

    # ── Start services ─────────────────────────────────────────────
    logger.info("Starting newsdesk server")

    await ws_server.start()
    if api_server is not None:
        await api_server.start()

    async def _startup() -> None:
        """Initial fill: a deeper RSS poll, then every data domain once."""
        try:
            if not use_mock:
                emitted = await rss_pool.poll_all(cfg.initial_items_per_feed)
                logger.info(f"Startup poll emitted {emitted} cards")
            await hub.refresh_all()
        except Exception as e:
            logger.error(f"Startup fill failed: {e}", exc_info=True)

    startup_task = asyncio.create_task(_startup())
    scheduler.start()

    mock_task: asyncio.Task | None = None
    if use_mock:
        from mock_feed import run_mock_feed

        mock_task = asyncio.create_task(
            run_mock_feed(
                lambda items, column: pipeline.ingest(items, column),
                interval_range=(1.0, 4.0),
                shutdown=shutdown_event,
            )
        )
        logger.info("Mock news feed started")
    else:
        logger.info(f"Polling {len(RSS_FEEDS)} RSS feeds every {sched.rss:g}s")

    # ── Wait for shutdown ──────────────────────────────────────────
    await shutdown_event.wait()

    # ── Teardown ───────────────────────────────────────────────────
    logger.info("Shutting down...")

    for task in (startup_task, mock_task):
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    await scheduler.stop()
    await ws_server.stop()
    if api_server is not None:
        await api_server.stop()
    if publisher is not None:
        await publisher.close()
    await session.close()

    p_stats = pipeline.get_stats()
    ws_stats = ws_server.get_stats()
    logger.info(
        f"Final - items seen: {p_stats['items_seen']}, "
        f"cards emitted: {p_stats['cards_emitted']}, "
        f"duplicates: {p_stats['items_duplicate']}, "
        f"stale: {p_stats['items_stale']}, "
        f"clients served: {ws_stats.total_connections}, "
        f"tripped sources: {rss_pool.get_stats()['tripped']}"
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="newsdesk server")
    parser.add_argument("--mock", action="store_true", help="Use generated headlines instead of live feeds")
    args = parser.parse_args()
    asyncio.run(run(use_mock=args.mock))
