"""
Tests for market_data.snapshot
"""
import math
from datetime import datetime, timedelta, timezone

import pytest

from market_data.snapshot import MarketSnapshot, Quote, SnapshotCache

NOW = datetime(2025, 3, 4, 15, 30, tzinfo=timezone.utc)


def _quote(symbol: str, raw: float, direction: str = "up") -> Quote:
    return Quote(symbol, symbol, f"{raw}", "+0.10%", direction, raw, fetched_at=NOW)


# ── Quote ─────────────────────────────────────────────────────────────────────

def test_quote_rejects_unknown_direction():
    with pytest.raises(ValueError):
        _quote("^VIX", 18.0, direction="sideways")


def test_quote_dict_shapes():
    q = Quote("GC=F", "Gold", "2650.00", "0.35", "up", 2650.0, 9.2, NOW, unit="$/oz")

    assert q.to_dict() == {
        "symbol": "GC=F",
        "label": "Gold",
        "value": "2650.00",
        "change": "0.35",
        "dir": "up",
        "rawValue": 2650.0,
        "rawChange": 9.2,
    }
    assert q.to_board_dict() == {
        "label": "Gold",
        "price": "2650.00",
        "change": "0.35",
        "dir": "up",
        "symbol": "GC=F",
        "unit": "$/oz",
    }


# ── MarketSnapshot ────────────────────────────────────────────────────────────

def test_snapshot_maps_symbols_to_keys():
    snap = MarketSnapshot.from_quotes(
        [_quote("^GSPC", 6010.0), _quote("^TNX", 4.31), _quote("BTC-USD", 90000.0), _quote("^VIX", math.nan)],
        NOW,
    )

    assert snap.values == {"spx": 6010.0, "us10y": 4.31}
    assert snap.get("vix") is None


def test_context_text_marks_missing_values():
    snap = MarketSnapshot({"spx": 6010.0, "us10y": 4.31}, NOW)

    text = snap.to_context_text(NOW + timedelta(seconds=42))

    assert text.startswith("LIVE MARKET DATA (as of 42 seconds ago")
    assert "S&P 500: 6010 | NASDAQ: N/A" in text
    assert "10Y: 4.31" in text


# ── SnapshotCache ─────────────────────────────────────────────────────────────

def test_cache_starts_empty():
    cache = SnapshotCache("fx")
    assert cache.is_empty
    assert cache.value is None
    assert cache.age_seconds(NOW) == math.inf


def test_cache_replace_and_age():
    cache = SnapshotCache("fx")
    cache.replace({"macro": []}, NOW)

    assert not cache.is_empty
    assert cache.updated_at == NOW
    assert cache.age_seconds(NOW + timedelta(seconds=30)) == 30.0
