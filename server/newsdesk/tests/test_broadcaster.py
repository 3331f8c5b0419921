"""
Tests for newsdesk.ws_server.broadcaster

Subscribers are plain fakes with an async send(); no sockets are opened.
"""
import json
from unittest.mock import AsyncMock

import pytest
import websockets

from newsdesk.ws_server.broadcaster import Broadcaster
from newsdesk.ws_server.card_store import CardStore


class FakeSubscriber:
    def __init__(self, fail_with: Exception | None = None) -> None:
        self.sent: list[dict] = []
        self._fail_with = fail_with

    async def send(self, message: str) -> None:
        if self._fail_with is not None:
            raise self._fail_with
        self.sent.append(json.loads(message))


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def broadcaster():
    return Broadcaster(CardStore(capacity=5))


def _card_event(headline: str = "Fed hikes") -> dict:
    return {"type": "new_card", "column": "macro", "data": {"headline": headline}}


# ── broadcast() ───────────────────────────────────────────────────────────────

async def test_broadcast_delivers_to_every_subscriber(broadcaster):
    a, b = FakeSubscriber(), FakeSubscriber()
    broadcaster.add(a)
    broadcaster.add(b)

    delivered = await broadcaster.broadcast(_card_event())

    assert delivered == 2
    assert a.sent == [_card_event()]
    assert b.sent == [_card_event()]


async def test_failed_send_does_not_block_or_remove(broadcaster):
    healthy = FakeSubscriber()
    broken = FakeSubscriber(fail_with=RuntimeError("socket gone"))
    broadcaster.add(healthy)
    broadcaster.add(broken)

    delivered = await broadcaster.broadcast(_card_event())

    assert delivered == 1
    assert healthy.sent == [_card_event()]
    assert broken in broadcaster
    assert broadcaster.subscriber_count == 2


async def test_connection_closed_counts_as_failed_send(broadcaster):
    closed = FakeSubscriber(fail_with=websockets.ConnectionClosed(None, None))
    broadcaster.add(closed)

    assert await broadcaster.broadcast(_card_event()) == 0
    assert broadcaster.get_stats()["failed_sends"] == 1


async def test_new_card_appended_to_store(broadcaster):
    await broadcaster.broadcast(_card_event("one"))
    await broadcaster.broadcast({"type": "market_update", "data": []})

    stored = broadcaster.card_store.snapshot_for_new_subscriber()
    assert [e["data"]["headline"] for e in stored] == ["one"]


async def test_broadcast_with_no_subscribers_still_stores(broadcaster):
    assert await broadcaster.broadcast(_card_event()) == 0
    assert len(broadcaster.card_store) == 1
    assert broadcaster.messages_broadcast == 1


async def test_discard_removes_subscriber(broadcaster):
    sub = FakeSubscriber()
    broadcaster.add(sub)
    broadcaster.discard(sub)
    broadcaster.discard(sub)

    await broadcaster.broadcast(_card_event())

    assert sub.sent == []


# ── Card sinks ────────────────────────────────────────────────────────────────

async def test_card_sinks_receive_only_new_cards(broadcaster):
    sink = AsyncMock()
    broadcaster.add_card_sink(sink)

    await broadcaster.broadcast(_card_event())
    await broadcaster.broadcast({"type": "fx_update", "data": {}})

    sink.assert_awaited_once_with(_card_event())


async def test_failing_sink_does_not_break_broadcast():
    sub = FakeSubscriber()
    bad_sink = AsyncMock(side_effect=RuntimeError("redis down"))
    good_sink = AsyncMock()
    broadcaster = Broadcaster(CardStore(), card_sinks=[bad_sink, good_sink])
    broadcaster.add(sub)

    delivered = await broadcaster.broadcast(_card_event())

    assert delivered == 1
    good_sink.assert_awaited_once()
