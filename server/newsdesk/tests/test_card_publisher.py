"""
Tests for newsdesk.pubsub

All Redis I/O is replaced with AsyncMock, no live Redis required.
"""
import json
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import RedisError

from newsdesk.core.types import PublishError
from newsdesk.pubsub.publisher import ALL_CARDS_CHANNEL, CardPublisher, channels_for
from newsdesk.pubsub.serializer import serialize

CARD_EVENT = {"type": "new_card", "column": "geo", "data": {"headline": "Strait closed"}}


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def mock_redis():
    with patch("newsdesk.pubsub.publisher.Redis") as mock_cls:
        instance = AsyncMock()
        instance.ping = AsyncMock(return_value=True)
        instance.publish = AsyncMock(return_value=2)
        mock_cls.from_url.return_value = instance
        yield instance


@pytest.fixture
async def connected_publisher(mock_redis):
    publisher = CardPublisher(redis_url="redis://localhost:6379/0")
    await publisher.connect()
    yield publisher
    await publisher.close()


# ── Serializer ────────────────────────────────────────────────────────────────

def test_envelope_shape():
    raw = serialize("cards:geo", CARD_EVENT)
    assert json.loads(raw) == {"channel": "cards:geo", "data": CARD_EVENT}


def test_non_string_keys_are_rejected():
    with pytest.raises(PublishError, match="Failed to serialize"):
        serialize("cards:geo", {("tuple", "key"): 1})


# ── Channels ──────────────────────────────────────────────────────────────────

def test_channels_for_card():
    assert channels_for(CARD_EVENT) == [ALL_CARDS_CHANNEL, "cards:geo"]
    assert channels_for({"type": "new_card"}) == [ALL_CARDS_CHANNEL]


# ── CardPublisher ─────────────────────────────────────────────────────────────

async def test_connect_failure_raises(mock_redis):
    mock_redis.ping.side_effect = RedisError("connection refused")

    with pytest.raises(PublishError, match="Cannot connect"):
        await CardPublisher(redis_url="redis://localhost:6379/0").connect()


async def test_publish_before_connect_raises():
    publisher = CardPublisher(redis_url="redis://localhost:6379/0")
    with pytest.raises(PublishError, match="not connected"):
        await publisher.publish("cards:all", {})


async def test_publish_card_hits_all_and_column_channels(connected_publisher, mock_redis):
    total = await connected_publisher.publish_card(CARD_EVENT)

    assert total == 4
    channels = [c.args[0] for c in mock_redis.publish.call_args_list]
    assert channels == ["cards:all", "cards:geo"]
    envelope = json.loads(mock_redis.publish.call_args_list[1].args[1])
    assert envelope["data"] == CARD_EVENT
    assert connected_publisher.published == 1


async def test_redis_error_becomes_publish_error(connected_publisher, mock_redis):
    mock_redis.publish.side_effect = RedisError("broken pipe")

    with pytest.raises(PublishError, match="publish failed"):
        await connected_publisher.publish_card(CARD_EVENT)


async def test_context_manager_closes(mock_redis):
    async with CardPublisher(redis_url="redis://localhost:6379/0") as publisher:
        await publisher.publish("cards:all", {"k": 1})

    mock_redis.aclose.assert_awaited_once()
