"""
Market data: quotes, macro indicators, prediction markets and the
snapshot caches that serve them to subscribers and the annotation engine.
"""
from market_data.fred import FredClient
from market_data.hub import SnapshotHub
from market_data.polymarket import PolymarketClient
from market_data.snapshot import MarketSnapshot, Quote, SnapshotCache
from market_data.yahoo import YahooChartClient

__all__ = [
    "FredClient",
    "MarketSnapshot",
    "PolymarketClient",
    "Quote",
    "SnapshotCache",
    "SnapshotHub",
    "YahooChartClient",
]
