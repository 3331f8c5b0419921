"""
Tests for newsdesk.ws_server.card_store
"""
import pytest

from newsdesk.ws_server.card_store import DEFAULT_CAPACITY, CardStore


def _event(n: int) -> dict:
    return {"type": "new_card", "column": "breaking", "data": {"headline": f"card {n}"}}


def test_default_capacity():
    assert CardStore().capacity == DEFAULT_CAPACITY == 50


def test_snapshot_is_last_k_oldest_first():
    store = CardStore(capacity=3)
    for n in range(1, 6):
        store.append(_event(n))

    snapshot = store.snapshot_for_new_subscriber()

    assert [e["data"]["headline"] for e in snapshot] == ["card 3", "card 4", "card 5"]


def test_latest_is_newest_first():
    store = CardStore(capacity=3)
    for n in range(1, 3):
        store.append(_event(n))

    assert [e["data"]["headline"] for e in store.latest()] == ["card 2", "card 1"]
    assert len(store) == 2


def test_empty_store_snapshot():
    assert CardStore().snapshot_for_new_subscriber() == []


def test_invalid_capacity_raises():
    with pytest.raises(ValueError):
        CardStore(capacity=0)
