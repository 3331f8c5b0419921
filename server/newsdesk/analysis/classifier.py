"""
Column classifier

Keyword scoring that routes a story to a column when its feed does not
pin one. macro and commodity hits count double so they win over generic
geopolitical wording.
"""
from __future__ import annotations

import re

from newsdesk.models.news import Column

COLUMN_KEYWORDS: dict[Column, tuple[str, ...]] = {
    Column.MACRO: (
        "fed", "federal reserve", "ecb", "boj", "central bank", "interest rate",
        "rates", "rate cut", "rate hike", "yield", "yields", "inflation", "cpi", "ppi",
        "jobs", "employment", "payroll", "jobless", "unemployment", "gdp",
        "fomc", "powell", "lagarde", "yellen", "ueda", "bailey", "pboc", "rba", "boe",
        "treasury", "treasuries", "bond", "bonds", "credit", "spread", "curve",
        "monetary", "fiscal", "stimulus", "tightening", "easing", "qe", "qt",
        "liquidity", "repo", "sofr", "libor", "basis point", "bps", "hawkish", "dovish",
    ),
    Column.COMMODITY: (
        "oil", "crude", "brent", "wti", "gold", "silver", "copper",
        "wheat", "corn", "energy", "natgas", "metals", "mining",
        "iron ore", "aluminum", "lithium", "nickel", "zinc",
    ),
    Column.GEO: (
        "ukraine", "taiwan", "iran", "israel", "military",
        "sanctions", "war", "conflict", "nato", "defense", "missile",
        "genocide", "invasion", "troops", "attack",
    ),
    Column.MARKET: ("stock", "equity", "nasdaq", "dow", "sp500", "rally", "selloff"),
}

COLUMN_WEIGHTS: dict[Column, int] = {
    Column.MACRO: 2,
    Column.COMMODITY: 2,
    Column.GEO: 1,
    Column.MARKET: 1,
}

_CHINA_COMMODITY_WORDS = (
    "iron", "copper", "steel", "metal", "commodity", "demand", "export", "import",
)

_OPINION_RE = re.compile(
    r"opinion|analysis|weekly|outlook|forecast|commentary|perspective|editorial|"
    r"preview|recap|summary|review|interview|podcast|newsletter|subscription|"
    r"sign up|what to watch|here's what",
    re.IGNORECASE,
)


def classify_news(text: str) -> Column:
    """Highest weighted keyword score wins; ties keep the earlier column."""
    t = text.lower()
    best_score = 0
    best = Column.BREAKING

    for column, words in COLUMN_KEYWORDS.items():
        score = sum(1 for w in words if w in t) * COLUMN_WEIGHTS.get(column, 1)
        if score > best_score:
            best_score = score
            best = column

    # China demand stories are commodity stories even when they read as geo
    if "china" in t and any(w in t for w in _CHINA_COMMODITY_WORDS):
        best = Column.COMMODITY

    return best


def resolve_column(feed_column: Column, text: str) -> Column:
    """Specialised feeds keep their column; breaking/market feeds are classified."""
    if feed_column not in (Column.BREAKING, Column.MARKET):
        return feed_column
    return classify_news(text)


def is_opinion_or_analysis(headline: str) -> bool:
    return bool(_OPINION_RE.search(headline))
