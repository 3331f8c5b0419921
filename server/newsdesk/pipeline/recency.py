"""
Recency Filter

Freshness checks applied twice in the pipeline: a coarse gate when a feed's
items are first seen and a strict gate right before annotation. Items
without a publish timestamp always pass.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

COARSE_MAX_AGE_HOURS = 48.0
STRICT_MAX_AGE_HOURS = 8.0


def hours_since(published_at: datetime, now: datetime) -> float:
    """Age of a timestamp in (fractional) hours."""
    return (now - published_at).total_seconds() / 3600.0


def is_fresh(
    published_at: Optional[datetime],
    now: datetime,
    max_age_hours: float,
) -> bool:
    """True when the item is no older than max_age_hours, or has no timestamp."""
    if published_at is None:
        return True
    return hours_since(published_at, now) <= max_age_hours


def format_pub_age(
    published_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    Relative publish-age label shown on a card.

    "Just now" under an hour, "{h}h ago" under a day, otherwise a short
    month/day date such as "Mar 4".
    """
    if published_at is None:
        return None
    now = now or datetime.now(timezone.utc)
    hours = int(hours_since(published_at, now))
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"
    return f"{published_at:%b} {published_at.day}"
