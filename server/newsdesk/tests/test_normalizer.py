"""
Tests for newsdesk.feeds.normalizer
"""
import time
from datetime import datetime, timezone

import pytest

from newsdesk.core.types import ValidationError
from newsdesk.feeds.normalizer import (
    MAX_BODY_LENGTH,
    clean_text,
    normalize_newsapi_article,
    normalize_rss_entry,
    parse_timestamp,
)


# ── parse_timestamp() ─────────────────────────────────────────────────────────

def test_parse_iso_with_z_suffix():
    dt = parse_timestamp("2025-07-24T17:06:15.272Z")
    assert dt == datetime(2025, 7, 24, 17, 6, 15, 272000, tzinfo=timezone.utc)


def test_parse_rfc822():
    dt = parse_timestamp("Thu, 24 Jul 2025 19:06:15 +0200")
    assert dt == datetime(2025, 7, 24, 17, 6, 15, tzinfo=timezone.utc)


def test_parse_naive_iso_assumed_utc():
    assert parse_timestamp("2025-07-24T17:06:15").tzinfo is timezone.utc


@pytest.mark.parametrize("raw", ["", "yesterday afternoon"])
def test_parse_invalid_raises(raw):
    with pytest.raises(ValidationError):
        parse_timestamp(raw)


# ── clean_text() ──────────────────────────────────────────────────────────────

def test_clean_text_strips_markup_and_entities():
    assert clean_text("<p>Oil &amp; gas\n  <b>slump</b></p>") == "Oil & gas slump"


# ── normalize_rss_entry() ─────────────────────────────────────────────────────

def test_rss_entry_with_parsed_date():
    entry = {
        "title": "Fed holds rates",
        "link": "https://x/1",
        "id": "guid-1",
        "summary": "<p>Policy unchanged</p>",
        "published_parsed": time.struct_time((2025, 3, 4, 12, 0, 0, 1, 63, 0)),
    }

    item = normalize_rss_entry(entry, "CNBC")

    assert item.headline == "Fed holds rates"
    assert item.source == "CNBC"
    assert item.guid == "guid-1"
    assert item.body == "Policy unchanged"
    assert item.published_at == datetime(2025, 3, 4, 12, 0, tzinfo=timezone.utc)


def test_rss_entry_falls_back_to_raw_date_string():
    entry = {"title": "T", "link": "https://x/2", "published": "2025-03-04T12:00:00Z"}
    assert normalize_rss_entry(entry, "S").published_at.hour == 12


def test_rss_entry_unparseable_date_means_no_timestamp():
    entry = {"title": "T", "link": "https://x/3", "published": "sometime"}
    assert normalize_rss_entry(entry, "S").published_at is None


def test_rss_entry_without_title_or_link_dropped():
    assert normalize_rss_entry({"summary": "orphan"}, "S") is None


def test_rss_body_is_capped():
    entry = {"title": "T", "link": "https://x/4", "description": "x" * 5000}
    assert len(normalize_rss_entry(entry, "S").body) == MAX_BODY_LENGTH


# ── normalize_newsapi_article() ───────────────────────────────────────────────

def test_newsapi_article():
    article = {
        "title": "Oil jumps",
        "url": "https://news/1",
        "publishedAt": "2025-03-04T10:00:00Z",
        "description": "Crude up 3%",
        "source": {"id": None, "name": "Bloomberg"},
    }

    item = normalize_newsapi_article(article)

    assert item.source == "Bloomberg"
    assert item.body == "Crude up 3%"
    assert item.published_at.hour == 10


def test_newsapi_removed_article_dropped():
    assert normalize_newsapi_article({"title": "[Removed]", "url": "https://removed.com"}) is None


def test_newsapi_missing_source_name():
    item = normalize_newsapi_article({"title": "T", "url": "https://n/2", "source": None})
    assert item.source == "NewsAPI"
    assert item.published_at is None
