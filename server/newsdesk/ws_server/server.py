"""
WebSocket Server for Card Distribution

Accepts subscriber connections, runs each one through the connect
handshake and answers inbound control messages. Delivery of live events
is the broadcaster's job.
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

import websockets
from websockets.asyncio.server import Server, ServerConnection, serve

from newsdesk.ws_server.broadcaster import Broadcaster
from newsdesk.ws_server.events import PING, PONG, REFRESH_REQUEST
from newsdesk.ws_server.session import HandshakeSource, SubscriberSession

logger = logging.getLogger(__name__)

RefreshHandler = Callable[[], Awaitable[Any]]


@dataclass
class ServerStats:
    """WebSocket server statistics."""

    connected_clients: int
    total_connections: int
    messages_broadcast: int
    refresh_requests: int
    start_time: datetime


class NewsWebSocketServer:
    """
    WebSocket front door for subscribers.

    Each connection gets a SubscriberSession; the handshake runs as its own
    task while this handler keeps reading control messages.
    """

    def __init__(
        self,
        broadcaster: Broadcaster,
        host: str = "0.0.0.0",
        port: int = 8765,
        handshake: Optional[HandshakeSource] = None,
        on_refresh: Optional[RefreshHandler] = None,
    ) -> None:
        self._broadcaster = broadcaster
        self._host = host
        self._port = port
        self._handshake = handshake
        self._on_refresh = on_refresh
        self._server: Optional[Server] = None
        self._total_connections = 0
        self._refresh_requests = 0
        self._start_time: Optional[datetime] = None
        self._tasks: set[asyncio.Task] = set()

    def set_refresh_handler(self, handler: RefreshHandler) -> None:
        """Register the callback run when a client asks for an immediate poll."""
        self._on_refresh = handler

    async def start(self) -> None:
        """Start the WebSocket server."""
        self._start_time = datetime.now(timezone.utc)
        self._server = await serve(
            self._handle_client,
            self._host,
            self._port,
            ping_interval=30,
            ping_timeout=10,
        )
        logger.info(f"WebSocket server started on ws://{self._host}:{self._port}")

    async def stop(self) -> None:
        """Stop the WebSocket server and disconnect all clients."""
        for task in list(self._tasks):
            task.cancel()
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            logger.info("WebSocket server stopped")

    async def _handle_client(self, websocket: ServerConnection) -> None:
        """Handle a new client connection."""
        client_id = f"{websocket.remote_address}"
        session = SubscriberSession(websocket, self._broadcaster, self._handshake)
        self._total_connections += 1

        logger.info(
            f"Client connected: {client_id} (total: {self._broadcaster.subscriber_count})"
        )

        handshake_task = self._spawn(session.run_handshake())

        try:
            async for message in websocket:
                await self.handle_message(websocket, message)
        except websockets.ConnectionClosed:
            pass
        except Exception as e:
            logger.error(f"Client handler error for {client_id}: {e}", exc_info=True)
        finally:
            if not handshake_task.done():
                handshake_task.cancel()
            session.close()
            logger.info(
                f"Client disconnected: {client_id} "
                f"(total: {self._broadcaster.subscriber_count})"
            )

    async def handle_message(self, websocket: Any, message: str | bytes) -> None:
        """Dispatch one inbound control message. Anything unrecognised is dropped."""
        try:
            data = json.loads(message)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return
        if not isinstance(data, dict):
            return

        msg_type = data.get("type", "")
        if msg_type == PING:
            await websocket.send(json.dumps({"type": PONG}))
        elif msg_type == REFRESH_REQUEST and self._on_refresh is not None:
            self._refresh_requests += 1
            logger.info("Refresh requested by client")
            self._spawn(self._run_refresh())

    async def _run_refresh(self) -> None:
        try:
            await self._on_refresh()
        except Exception as e:
            logger.error(f"Client-requested refresh failed: {e}", exc_info=True)

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def get_stats(self) -> ServerStats:
        """Get current server statistics."""
        return ServerStats(
            connected_clients=self._broadcaster.subscriber_count,
            total_connections=self._total_connections,
            messages_broadcast=self._broadcaster.messages_broadcast,
            refresh_requests=self._refresh_requests,
            start_time=self._start_time or datetime.now(timezone.utc),
        )

    @property
    def client_count(self) -> int:
        """Get current number of connected clients."""
        return self._broadcaster.subscriber_count
