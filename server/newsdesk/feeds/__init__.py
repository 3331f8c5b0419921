from newsdesk.feeds.newsapi import NewsApiClient
from newsdesk.feeds.poller import PollerPool, SourcePoller
from newsdesk.feeds.rss import RssFeedClient
from newsdesk.feeds.sources import GEO_NEWSAPI_QUERY, RSS_FEEDS, FeedSource

__all__ = [
    "FeedSource",
    "GEO_NEWSAPI_QUERY",
    "NewsApiClient",
    "PollerPool",
    "RSS_FEEDS",
    "RssFeedClient",
    "SourcePoller",
]
