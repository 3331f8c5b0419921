"""
Subscriber Session

Connect handshake for one subscriber:

    CONNECTED -> HISTORY_REPLAYED -> SNAPSHOT_SENT -> LIVE

The cached game-theory state goes out right after the history, before
the (possibly slow) market snapshot.

The subscriber joins the broadcaster before the handshake starts so live
events racing the handshake are not lost. Any send failure moves the
session to CLOSED and removes it from the broadcaster.
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Optional, Protocol

import websockets

from newsdesk.ws_server.broadcaster import Broadcaster, Subscriber
from newsdesk.ws_server.events import GAME_THEORY_UPDATE, PREDICTION_UPDATE, snapshot_event

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    CONNECTED = "connected"
    HISTORY_REPLAYED = "history_replayed"
    SNAPSHOT_SENT = "snapshot_sent"
    LIVE = "live"
    CLOSED = "closed"


class HandshakeSource(Protocol):
    """Supplies the snapshot state sent to a newly connected subscriber."""

    async def initial_payload(self) -> dict[str, Any]: ...

    def prediction_payload(self) -> Optional[dict[str, Any]]: ...

    def game_theory_payload(self) -> Optional[dict[str, Any]]: ...


class SubscriberSession:
    """Per-connection handshake driver."""

    def __init__(
        self,
        subscriber: Subscriber,
        broadcaster: Broadcaster,
        handshake: Optional[HandshakeSource] = None,
    ) -> None:
        self._subscriber = subscriber
        self._broadcaster = broadcaster
        self._handshake = handshake
        self.state = SessionState.CONNECTED
        self._broadcaster.add(subscriber)

    @property
    def is_closed(self) -> bool:
        return self.state is SessionState.CLOSED

    async def run_handshake(self) -> bool:
        """
        Replay history, then snapshots, then go live.

        Returns False if the session closed before reaching LIVE.
        """
        try:
            for event in self._broadcaster.card_store.snapshot_for_new_subscriber():
                if self.is_closed:
                    return False
                await self._send(event)
            self._advance(SessionState.HISTORY_REPLAYED)

            if self._handshake is not None:
                games = self._handshake.game_theory_payload()
                if games is not None:
                    await self._send(snapshot_event(GAME_THEORY_UPDATE, games))
                await self._send(await self._handshake.initial_payload())
            self._advance(SessionState.SNAPSHOT_SENT)

            if self._handshake is not None:
                prediction = self._handshake.prediction_payload()
                if prediction is not None:
                    await self._send(snapshot_event(PREDICTION_UPDATE, prediction))
            self._advance(SessionState.LIVE)
        except websockets.ConnectionClosed:
            self.close()
        except Exception as e:
            logger.warning(f"Subscriber handshake failed in state {self.state.value}: {e}")
            self.close()

        return self.state is SessionState.LIVE

    def close(self) -> None:
        """Terminal transition; safe to call more than once."""
        self.state = SessionState.CLOSED
        self._broadcaster.discard(self._subscriber)

    def _advance(self, state: SessionState) -> None:
        if self.state is not SessionState.CLOSED:
            self.state = state

    async def _send(self, event: dict[str, Any]) -> None:
        await self._subscriber.send(json.dumps(event, default=str))
