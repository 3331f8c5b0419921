"""
Tests for newsdesk.ws_server.session
"""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from newsdesk.ws_server.broadcaster import Broadcaster
from newsdesk.ws_server.card_store import CardStore
from newsdesk.ws_server.session import SessionState, SubscriberSession


class RecordingSubscriber:
    def __init__(self, fail_after: int | None = None) -> None:
        self.sent: list[dict] = []
        self._fail_after = fail_after

    async def send(self, message: str) -> None:
        if self._fail_after is not None and len(self.sent) >= self._fail_after:
            raise ConnectionResetError("peer went away")
        self.sent.append(json.loads(message))


def _card(n: int) -> dict:
    return {"type": "new_card", "column": "breaking", "data": {"headline": f"card {n}"}}


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def broadcaster():
    store = CardStore(capacity=10)
    for n in range(1, 4):
        store.append(_card(n))
    return Broadcaster(store)


@pytest.fixture
def handshake():
    source = MagicMock()
    source.initial_payload = AsyncMock(
        return_value={"type": "initial", "market": [], "macro": {}, "fx": {}, "commodities": {}}
    )
    source.prediction_payload.return_value = {"markets": [], "sentiment": {}}
    source.game_theory_payload.return_value = {"games": {}, "lastUpdate": "2025-03-04T15:00:00+00:00"}
    return source


# ── Handshake ─────────────────────────────────────────────────────────────────

async def test_subscriber_joins_broadcaster_on_creation(broadcaster):
    sub = RecordingSubscriber()
    session = SubscriberSession(sub, broadcaster)

    assert sub in broadcaster
    assert session.state is SessionState.CONNECTED


async def test_handshake_order(broadcaster, handshake):
    sub = RecordingSubscriber()
    session = SubscriberSession(sub, broadcaster, handshake)

    assert await session.run_handshake() is True

    types = [m["type"] for m in sub.sent]
    assert types == [
        "new_card",
        "new_card",
        "new_card",
        "game_theory_update",
        "initial",
        "prediction_update",
    ]
    assert [m["data"]["headline"] for m in sub.sent[:3]] == ["card 1", "card 2", "card 3"]
    assert session.state is SessionState.LIVE


async def test_handshake_without_snapshot_source_replays_history_only(broadcaster):
    sub = RecordingSubscriber()
    session = SubscriberSession(sub, broadcaster)

    assert await session.run_handshake() is True
    assert len(sub.sent) == 3


async def test_prediction_skipped_when_not_available(broadcaster, handshake):
    handshake.prediction_payload.return_value = None
    sub = RecordingSubscriber()
    session = SubscriberSession(sub, broadcaster, handshake)

    await session.run_handshake()

    assert sub.sent[-1]["type"] == "initial"


async def test_game_state_skipped_when_not_cached(broadcaster, handshake):
    handshake.game_theory_payload.return_value = None
    sub = RecordingSubscriber()
    session = SubscriberSession(sub, broadcaster, handshake)

    await session.run_handshake()

    assert [m["type"] for m in sub.sent[3:]] == ["initial", "prediction_update"]


async def test_send_failure_closes_and_removes(broadcaster, handshake):
    sub = RecordingSubscriber(fail_after=1)
    session = SubscriberSession(sub, broadcaster, handshake)

    assert await session.run_handshake() is False
    assert session.state is SessionState.CLOSED
    assert sub not in broadcaster


async def test_snapshot_failure_closes_session(broadcaster, handshake):
    handshake.initial_payload.side_effect = RuntimeError("yahoo down")
    sub = RecordingSubscriber()
    session = SubscriberSession(sub, broadcaster, handshake)

    assert await session.run_handshake() is False
    assert session.is_closed


async def test_close_is_idempotent(broadcaster):
    sub = RecordingSubscriber()
    session = SubscriberSession(sub, broadcaster)
    session.close()
    session.close()

    assert session.state is SessionState.CLOSED
    assert broadcaster.subscriber_count == 0
