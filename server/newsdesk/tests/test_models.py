"""
Tests for newsdesk.models.news
"""
from datetime import datetime, timezone

import pytest

from newsdesk.models.news import (
    Analysis,
    Card,
    Column,
    Direction,
    Horizon,
    NewsItem,
    Regime,
)

EMITTED = datetime(2025, 3, 4, 9, 5, tzinfo=timezone.utc)


# ── Column ────────────────────────────────────────────────────────────────────

def test_column_from_string_is_case_insensitive():
    assert Column.from_string(" Macro ") is Column.MACRO


def test_column_from_string_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown column"):
        Column.from_string("sports")


# ── NewsItem ──────────────────────────────────────────────────────────────────

def test_identifier_prefers_link_then_guid_then_headline():
    assert NewsItem("h", "https://x/1", "s", guid="g").identifier == "https://x/1"
    assert NewsItem("h", "", "s", guid="g").identifier == "g"
    assert NewsItem("h", "", "s").identifier == "h"


def test_news_item_needs_headline_or_link():
    with pytest.raises(ValueError):
        NewsItem("", "", "s")


def test_news_item_rejects_naive_timestamp():
    with pytest.raises(ValueError, match="timezone-aware"):
        NewsItem("h", "https://x", "s", published_at=datetime(2025, 1, 1))


# ── Analysis ──────────────────────────────────────────────────────────────────

def test_analysis_bounds():
    with pytest.raises(ValueError):
        Analysis(implications=("a", "b", "c", "d"))
    with pytest.raises(ValueError):
        Analysis(impact=4)
    with pytest.raises(ValueError):
        Analysis(confidence=101)


# ── Card ──────────────────────────────────────────────────────────────────────

def test_card_to_dict_wire_shape():
    analysis = Analysis(
        implications=("Dollar surges",),
        impact=3,
        horizon=Horizon.NOW,
        technical_levels=("DXY: 107",),
        tags=("FLASH",),
        confidence=90,
        next_events=("FOMC minutes",),
        direction=Direction.RISK_OFF,
        regime=Regime.STAGFLATIONARY,
    )
    card = Card.from_analysis(
        analysis,
        emitted_at=EMITTED,
        column=Column.FX,
        headline="Dollar spikes",
        link="https://x/fx",
        source="Reuters",
        pub_age="Just now",
    )

    assert card.to_dict() == {
        "time": "09:05",
        "headline": "Dollar spikes",
        "link": "https://x/fx",
        "source": "Reuters",
        "pubDate": "Just now",
        "verified": True,
        "implications": ["Dollar surges"],
        "impact": 3,
        "horizon": "NOW",
        "tripwires": ["DXY: 107"],
        "tags": ["FLASH"],
        "confidence": 90,
        "nextEvents": ["FOMC minutes"],
        "regime": "STAGFLATIONARY",
        "excludeFromTicker": False,
        "headlineOnly": False,
    }


def test_headline_only_analysis_blanks_card():
    analysis = Analysis(headline_only=True, impact=1, confidence=10, tags=("PRICE-UPDATE",))
    card = Card.from_analysis(
        analysis,
        emitted_at=EMITTED,
        column=Column.COMMODITY,
        headline="Gold edges up",
        link="https://x/g",
        source="Feed",
    )

    assert card.headline_only is True
    assert card.impact == 0
    assert card.confidence == 0
    assert card.horizon is None
    assert card.tags == ("PRICE-UPDATE",)


def test_card_needs_headline():
    with pytest.raises(ValueError):
        Card(emitted_at=EMITTED, column=Column.BREAKING, headline="", link="", source="s")
