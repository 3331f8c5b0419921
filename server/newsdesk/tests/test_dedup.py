"""
Tests for newsdesk.pipeline.dedup
"""
import pytest

from newsdesk.pipeline.dedup import DedupLedger


def test_first_admit_returns_true():
    ledger = DedupLedger(capacity=3)
    assert ledger.admit("https://x/1") is True


def test_repeat_admit_returns_false_until_evicted():
    ledger = DedupLedger(capacity=3)
    ledger.admit("https://x/1")

    assert ledger.admit("https://x/1") is False
    assert ledger.admit("https://x/1") is False


def test_capacity_evicts_single_oldest():
    ledger = DedupLedger(capacity=3)
    for i in range(4):
        ledger.admit(f"id-{i}")

    assert len(ledger) == 3
    assert "id-0" not in ledger
    assert "id-1" in ledger
    # An evicted identifier is new again
    assert ledger.admit("id-0") is True
    assert "id-1" not in ledger


def test_lookup_does_not_refresh_position():
    ledger = DedupLedger(capacity=2)
    ledger.admit("a")
    ledger.admit("b")
    ledger.admit("a")  # rejected, stays oldest

    ledger.admit("c")

    assert "a" not in ledger
    assert "b" in ledger and "c" in ledger


def test_invalid_capacity_raises():
    with pytest.raises(ValueError):
        DedupLedger(capacity=0)


def test_stats_track_outcomes():
    ledger = DedupLedger(capacity=1)
    ledger.admit("a")
    ledger.admit("a")
    ledger.admit("b")

    stats = ledger.get_stats()
    assert stats == {
        "resident": 1,
        "capacity": 1,
        "admitted": 2,
        "rejected": 1,
        "evicted": 1,
    }


def test_clear_empties_ledger():
    ledger = DedupLedger()
    ledger.admit("a")
    ledger.clear()
    assert len(ledger) == 0
    assert ledger.admit("a") is True
