"""
Feed Data Normalizer

Transforms feedparser entries and NewsAPI articles into NewsItem.
"""
from __future__ import annotations

import html
import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Mapping, Optional

from newsdesk.core.types import ValidationError
from newsdesk.models.news import NewsItem

logger = logging.getLogger(__name__)

# Maximum body length kept for annotation
MAX_BODY_LENGTH = 1000

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def parse_timestamp(ts: str) -> datetime:
    """
    Parse an ISO 8601 or RFC 822 timestamp to UTC datetime.

    Args:
        ts: e.g. "2025-07-24T17:06:15.272Z" or "Thu, 24 Jul 2025 17:06:15 GMT"

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValidationError: If timestamp format is invalid
    """
    if not ts:
        raise ValidationError("Timestamp is empty", field="ts")

    ts = ts.strip()
    try:
        # Handle 'Z' suffix (Zulu time = UTC)
        iso = ts[:-1] + "+00:00" if ts.endswith("Z") else ts
        dt = datetime.fromisoformat(iso)
    except ValueError:
        try:
            dt = parsedate_to_datetime(ts)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Invalid timestamp format: {ts}",
                field="ts",
                value=ts,
            ) from e

    # Ensure timezone-aware
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def clean_text(text: str) -> str:
    """Strip markup and collapse whitespace."""
    if not text:
        return ""
    text = html.unescape(_TAG_RE.sub(" ", text))
    return _WS_RE.sub(" ", text).strip()


def _entry_timestamp(entry: Mapping[str, Any]) -> Optional[datetime]:
    # feedparser normalises *_parsed fields to UTC struct_time
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            return datetime(*parsed[:6], tzinfo=timezone.utc)
    for key in ("published", "updated"):
        raw = entry.get(key)
        if raw:
            try:
                return parse_timestamp(raw)
            except ValidationError:
                logger.debug(f"Unparseable entry date {raw!r}")
    return None


def normalize_rss_entry(entry: Mapping[str, Any], source: str) -> Optional[NewsItem]:
    """
    Convert one feedparser entry into a NewsItem.

    Returns None for entries with neither title nor link.
    """
    headline = clean_text(entry.get("title", ""))
    link = (entry.get("link") or "").strip()
    if not headline and not link:
        return None

    body = clean_text(entry.get("summary") or entry.get("description") or "")
    return NewsItem(
        headline=headline,
        link=link,
        source=source,
        published_at=_entry_timestamp(entry),
        body=body[:MAX_BODY_LENGTH],
        guid=(entry.get("id") or "").strip(),
    )


def normalize_newsapi_article(article: Mapping[str, Any]) -> Optional[NewsItem]:
    """
    Convert one NewsAPI article into a NewsItem.

    Articles NewsAPI has scrubbed ("[Removed]") are dropped.
    """
    headline = clean_text(article.get("title") or "")
    link = (article.get("url") or "").strip()
    if headline == "[Removed]" or (not headline and not link):
        return None

    published_at = None
    if article.get("publishedAt"):
        try:
            published_at = parse_timestamp(article["publishedAt"])
        except ValidationError:
            logger.debug(f"Unparseable publishedAt {article['publishedAt']!r}")

    source = article.get("source") or {}
    source_name = source.get("name") if isinstance(source, Mapping) else None

    return NewsItem(
        headline=headline,
        link=link,
        source=source_name or "NewsAPI",
        published_at=published_at,
        body=clean_text(article.get("description") or "")[:MAX_BODY_LENGTH],
    )
