"""
Mock news feed for running without network access.

Generates realistic market headlines and pushes them through the same
pipeline entry point the real pollers use.

Usage:
    python main.py --mock
"""
from __future__ import annotations

import asyncio
import random
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable

from newsdesk.models.news import Column, NewsItem

B, M, MA, G, C, F = Column.BREAKING, Column.MARKET, Column.MACRO, Column.GEO, Column.COMMODITY, Column.FX

HEADLINES: list[tuple[str, str, Column]] = [
    # (headline, body, feed column)
    # ── Geopolitics ───────────────────────────────────────────────
    ("US deploys additional carrier strike group to Persian Gulf amid rising tensions with Iran", "", G),
    ("Iran's IRGC claims responsibility for missile strikes on US base in Iraq", "", G),
    ("Israel conducts airstrikes on Iranian nuclear facilities, IDF confirms", "", G),
    ("NATO allies invoke Article 4 consultations over Middle East crisis", "", G),
    ("US imposes sweeping sanctions on Iranian oil exports", "", G),
    ("China stages live-fire drills in the Taiwan Strait", "", G),
    ("EU foreign ministers hold emergency summit on Russia sanctions", "", G),
    # ── Macro ─────────────────────────────────────────────────────
    ("Fed hikes rates by 50bps, surprising markets", "", MA),
    ("Federal Reserve signals potential emergency rate cut amid market turmoil", "", MA),
    ("US CPI comes in at 4.1% YoY, above consensus 3.8%", "", MA),
    ("US jobless claims surge to 285K, highest since March 2024", "", MA),
    ("Fed Chair Powell: 'We are monitoring geopolitical risks to price stability'", "", MA),
    ("US GDP growth revised down to 1.1% for Q4", "", MA),
    ("ECB holds rates steady at 3.75%, cites Middle East uncertainty", "", MA),
    ("US manufacturing PMI contracts to 46.2, weakest since 2020", "", MA),
    # ── Markets ───────────────────────────────────────────────────
    ("S&P 500 drops 3.2% in worst single-day decline since March 2023", "", M),
    ("10-year Treasury yield spikes to 5.2% on inflation fears", "", M),
    ("VIX spikes to 38 as equities sell off on geopolitical risk", "", M),
    ("JPMorgan reports record trading revenue on volatility surge", "", M),
    ("NVIDIA beats estimates with $38B revenue, guides higher on AI demand", "", M),
    ("Credit spreads widen sharply as high-yield issuers pull deals", "", M),
    # ── Commodities ───────────────────────────────────────────────
    ("Brent crude surges past $125/barrel on Strait of Hormuz fears", "", C),
    ("Gold hits all-time high of $2,850/oz as investors flee to safety", "", C),
    ("OPEC+ agrees surprise output cut of 1 million barrels per day", "", C),
    ("China copper imports jump as stimulus lifts demand", "", C),
    ("Refinery outage on the Gulf Coast tightens gasoline supply", "", C),
    # ── FX ────────────────────────────────────────────────────────
    ("Dollar index surges to 108.5 on safe-haven flows", "", F),
    ("EUR/USD drops to 1.02 as dollar strengthens on safe-haven demand", "", F),
    ("Bank of Japan intervenes to support yen as USD/JPY hits 162", "", F),
    # ── Breaking ──────────────────────────────────────────────────
    ("Apple reports Q1 earnings miss, revenue down 4% on supply chain disruption", "", B),
    ("Lockheed Martin surges 14% on $8B Pentagon contract", "", B),
    ("Category 5 hurricane makes landfall in Florida, $50B damage estimated", "", B),
    ("Weekly market outlook: what to watch as earnings season peaks", "", B),
]

SOURCES = ["Reuters", "Bloomberg", "AP", "AFP", "Dow Jones", "FT"]

IngestFn = Callable[[list[NewsItem], Column], Awaitable[int]]


def _make_item(headline: str, body: str) -> NewsItem:
    return NewsItem(
        headline=headline,
        link=f"https://mock.newsdesk.local/{uuid.uuid4().hex[:12]}",
        source=random.choice(SOURCES),
        published_at=datetime.now(timezone.utc),
        body=body,
    )


async def run_mock_feed(
    ingest: IngestFn,
    *,
    interval_range: tuple[float, float] = (0.5, 3.0),
    shutdown: asyncio.Event | None = None,
) -> None:
    """Push random headlines into the pipeline at realistic intervals."""
    pool = list(HEADLINES)
    random.shuffle(pool)
    idx = 0

    while shutdown is None or not shutdown.is_set():
        headline, body, column = pool[idx]
        idx += 1
        if idx >= len(pool):
            random.shuffle(pool)
            idx = 0

        await ingest([_make_item(headline, body)], column)

        delay = random.uniform(*interval_range)
        try:
            if shutdown:
                await asyncio.wait_for(shutdown.wait(), timeout=delay)
                break
            else:
                await asyncio.sleep(delay)
        except asyncio.TimeoutError:
            pass
