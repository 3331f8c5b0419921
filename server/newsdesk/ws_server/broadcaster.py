"""
Fan-out Broadcaster

Owns the live subscriber set and pushes every event to all of it.
A failed send is logged and otherwise ignored: subscribers leave the set
only when their connection handler discards them.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Iterable, Protocol

import websockets

from newsdesk.ws_server.card_store import CardStore
from newsdesk.ws_server.events import is_new_card

logger = logging.getLogger(__name__)

CardSink = Callable[[dict[str, Any]], Awaitable[Any]]


class Subscriber(Protocol):
    async def send(self, message: str) -> None: ...


class Broadcaster:
    """
    Delivers serialized events to every registered subscriber.

    new_card events are also appended to the card store and handed to any
    registered card sinks (e.g. the Redis mirror).
    """

    def __init__(
        self,
        card_store: CardStore,
        card_sinks: Iterable[CardSink] = (),
    ) -> None:
        self._card_store = card_store
        self._card_sinks = list(card_sinks)
        self._subscribers: set[Subscriber] = set()
        self._messages_broadcast = 0
        self._failed_sends = 0

    @property
    def card_store(self) -> CardStore:
        return self._card_store

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def messages_broadcast(self) -> int:
        return self._messages_broadcast

    def __contains__(self, subscriber: object) -> bool:
        return subscriber in self._subscribers

    def add_card_sink(self, sink: CardSink) -> None:
        self._card_sinks.append(sink)

    def add(self, subscriber: Subscriber) -> None:
        self._subscribers.add(subscriber)

    def discard(self, subscriber: Subscriber) -> None:
        self._subscribers.discard(subscriber)

    async def broadcast(self, event: dict[str, Any]) -> int:
        """
        Serialize event once and send it to every current subscriber.

        Returns the number of subscribers that received it.
        """
        if is_new_card(event):
            self._card_store.append(event)

        message = json.dumps(event, default=str)
        self._messages_broadcast += 1

        # Snapshot so connects/disconnects during the sends don't affect this event
        subscribers = list(self._subscribers)
        success_count = 0
        if subscribers:
            results = await asyncio.gather(
                *[self._send_to_subscriber(s, message) for s in subscribers],
                return_exceptions=True,
            )
            success_count = sum(1 for r in results if r is True)

            if success_count < len(subscribers):
                failed = len(subscribers) - success_count
                self._failed_sends += failed
                logger.debug(
                    f"Broadcast {event.get('type')}: {success_count}/{len(subscribers)} "
                    f"subscribers ({failed} failed)"
                )

        if is_new_card(event):
            await self._mirror(event)

        return success_count

    async def _send_to_subscriber(self, subscriber: Subscriber, message: str) -> bool:
        """Send message to a single subscriber, return True on success."""
        try:
            await subscriber.send(message)
            return True
        except websockets.ConnectionClosed:
            return False
        except Exception as e:
            logger.warning(f"Failed to send to subscriber: {e}")
            return False

    async def _mirror(self, event: dict[str, Any]) -> None:
        for sink in self._card_sinks:
            try:
                await sink(event)
            except Exception as e:
                logger.warning(f"Card sink failed: {e}")

    def get_stats(self) -> dict[str, int]:
        return {
            "subscribers": len(self._subscribers),
            "messages_broadcast": self._messages_broadcast,
            "failed_sends": self._failed_sends,
            "recent_cards": len(self._card_store),
        }
