"""
Feed table

Each RSS source pins a column. breaking and market sources are
re-classified per story; specialised sources keep their column.
"""
from __future__ import annotations

from dataclasses import dataclass

from newsdesk.models.news import Column


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str
    column: Column
    exclude_from_news: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("name must be non-empty")
        if not self.url.startswith(("http://", "https://")):
            raise ValueError(f"url must be http(s), got {self.url!r}")


B, M, MA, G, C, F = Column.BREAKING, Column.MARKET, Column.MACRO, Column.GEO, Column.COMMODITY, Column.FX

RSS_FEEDS: tuple[FeedSource, ...] = (
    # ── Wires ───────────────────────────────────────────────────────
    FeedSource("PR Newswire", "https://www.prnewswire.com/rss/news-releases-list.rss", B),
    FeedSource("PR Newswire Finance", "https://www.prnewswire.com/rss/financial-services-latest-news-list.rss", MA),
    FeedSource("BusinessWire", "https://feed.businesswire.com/rss/home/?rss=G1QFDERJXkJeGVtRWw==", B),
    # ── Breaking ────────────────────────────────────────────────────
    FeedSource("CNBC Top News", "https://www.cnbc.com/id/100003114/device/rss/rss.html", B),
    FeedSource("CNBC Business", "https://www.cnbc.com/id/20910258/device/rss/rss.html", B),
    FeedSource("MarketWatch", "https://feeds.marketwatch.com/marketwatch/topstories/", B),
    FeedSource("BBC Business", "https://feeds.bbci.co.uk/news/business/rss.xml", B),
    FeedSource("The Guardian", "https://www.theguardian.com/world/rss", B),
    FeedSource("WSJ US Business", "https://feeds.a.dj.com/rss/WSJcomUSBusiness.xml", B),
    FeedSource("NYT Business", "https://rss.nytimes.com/services/xml/rss/nyt/Business.xml", B),
    FeedSource("Deutsche Welle Business", "https://rss.dw.com/rdf/rss-en-bus", B),
    # ── Markets ─────────────────────────────────────────────────────
    FeedSource("CNBC Markets", "https://www.cnbc.com/id/10000664/device/rss/rss.html", M),
    FeedSource("MarketWatch Pulse", "https://feeds.marketwatch.com/marketwatch/marketpulse/", M),
    FeedSource("WSJ Markets", "https://feeds.a.dj.com/rss/RSSMarketsMain.xml", M),
    # ── Macro ───────────────────────────────────────────────────────
    FeedSource("Federal Reserve", "https://www.federalreserve.gov/feeds/press_all.xml", MA),
    FeedSource("ECB Press", "https://www.ecb.europa.eu/rss/press.html", MA),
    FeedSource("NY Fed Economics", "https://libertystreeteconomics.newyorkfed.org/feed/", MA),
    # ── Geopolitics ─────────────────────────────────────────────────
    FeedSource("Defense News", "https://www.defensenews.com/arc/outboundfeeds/rss/", G),
    FeedSource("NYT World", "https://rss.nytimes.com/services/xml/rss/nyt/World.xml", G),
    FeedSource("Al Jazeera", "https://www.aljazeera.com/xml/rss/all.xml", G),
    FeedSource("BBC World", "https://feeds.bbci.co.uk/news/world/rss.xml", G),
    FeedSource("Geopolitical Futures", "https://geopoliticalfutures.com/feed/", G, exclude_from_news=True),
    FeedSource("Breaking Defense", "https://breakingdefense.com/feed/", G),
    FeedSource("USNI News", "https://news.usni.org/feed", G),
    FeedSource("The Diplomat", "https://thediplomat.com/feed/", G),
    FeedSource("South China Morning Post", "https://www.scmp.com/rss/91/feed", G),
    # ── Commodities ─────────────────────────────────────────────────
    FeedSource("Mining.com", "https://www.mining.com/feed/", C),
    FeedSource("OilPrice.com", "https://oilprice.com/rss/main", C),
    FeedSource("gCaptain (Shipping)", "https://gcaptain.com/feed/", C),
    FeedSource("Rigzone Oil & Gas", "https://www.rigzone.com/news/rss/rigzone_latest.aspx", C),
    # ── FX ──────────────────────────────────────────────────────────
    FeedSource("ForexLive", "https://www.forexlive.com/feed/news", F),
    FeedSource("FXStreet", "https://www.fxstreet.com/rss/news", F),
    FeedSource("Action Forex", "https://www.actionforex.com/feed/", F),
)

GEO_NEWSAPI_QUERY = "russia OR ukraine OR china OR taiwan OR iran OR israel OR military OR sanctions OR nato"
