"""
Card Publisher

Mirrors every emitted card into Redis pub/sub so other processes can
follow the stream without holding a websocket.

Channels:
    cards:all       every card
    cards:{column}  cards routed to that column

Usage:
    async with CardPublisher(redis_url="redis://localhost:6379/0") as pub:
        broadcaster.add_card_sink(pub.publish_card)
"""
from __future__ import annotations

import logging
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from newsdesk.core.types import PublishError
from newsdesk.pubsub.serializer import serialize

logger = logging.getLogger(__name__)

ALL_CARDS_CHANNEL = "cards:all"


def channels_for(event: dict[str, Any]) -> list[str]:
    column = event.get("column")
    if not column:
        return [ALL_CARDS_CHANNEL]
    return [ALL_CARDS_CHANNEL, f"cards:{column}"]


class CardPublisher:
    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._redis: Redis | None = None
        self._published = 0

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    async def connect(self) -> None:
        self._redis = Redis.from_url(self._redis_url, decode_responses=False)
        try:
            await self._redis.ping()
            logger.info("CardPublisher connected to Redis at %s", self._redis_url)
        except RedisError as exc:
            raise PublishError(f"Cannot connect to Redis: {exc}", channel="") from exc

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("CardPublisher disconnected from Redis")

    async def __aenter__(self) -> CardPublisher:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    @property
    def published(self) -> int:
        return self._published

    # ── Publish ───────────────────────────────────────────────────────────────

    async def publish(self, channel: str, data: dict[str, Any]) -> int:
        """
        Publish data to a single channel.

        Returns:
            Number of Redis subscribers that received the message.

        Raises:
            PublishError: If not connected, serialization fails or Redis errors.
        """
        if self._redis is None:
            raise PublishError("CardPublisher is not connected, call connect() first", channel=channel)

        payload = serialize(channel, data)
        try:
            deliveries: int = await self._redis.publish(channel, payload)
        except RedisError as exc:
            raise PublishError(f"Redis publish failed: {exc}", channel=channel) from exc

        logger.debug("Published to '%s', reached %d subscriber(s)", channel, deliveries)
        return deliveries

    async def publish_card(self, event: dict[str, Any]) -> int:
        """Broadcaster card sink: fan one new_card event out to its channels."""
        total = 0
        for channel in channels_for(event):
            total += await self.publish(channel, event)
        self._published += 1
        return total
