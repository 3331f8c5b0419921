"""
Tests for newsdesk.pipeline.recency
"""
from datetime import datetime, timedelta, timezone

from newsdesk.pipeline.recency import (
    COARSE_MAX_AGE_HOURS,
    STRICT_MAX_AGE_HOURS,
    format_pub_age,
    hours_since,
    is_fresh,
)

NOW = datetime(2025, 3, 4, 12, 0, tzinfo=timezone.utc)


def test_nine_hour_old_item_fails_strict_gate():
    published = NOW - timedelta(hours=9)
    assert is_fresh(published, NOW, STRICT_MAX_AGE_HOURS) is False
    assert is_fresh(published, NOW, COARSE_MAX_AGE_HOURS) is True


def test_item_without_timestamp_always_passes():
    assert is_fresh(None, NOW, STRICT_MAX_AGE_HOURS) is True
    assert is_fresh(None, NOW, COARSE_MAX_AGE_HOURS) is True


def test_boundary_is_inclusive():
    assert is_fresh(NOW - timedelta(hours=8), NOW, 8) is True
    assert is_fresh(NOW - timedelta(hours=8, seconds=1), NOW, 8) is False


def test_future_timestamp_is_fresh():
    assert is_fresh(NOW + timedelta(minutes=5), NOW, 8) is True


def test_hours_since_is_fractional():
    assert hours_since(NOW - timedelta(minutes=90), NOW) == 1.5


def test_format_pub_age_labels():
    assert format_pub_age(None, NOW) is None
    assert format_pub_age(NOW - timedelta(minutes=20), NOW) == "Just now"
    assert format_pub_age(NOW - timedelta(hours=3, minutes=30), NOW) == "3h ago"
    assert format_pub_age(datetime(2025, 2, 27, 8, 0, tzinfo=timezone.utc), NOW) == "Feb 27"
