"""
WebSocket push layer

Card store, fan-out broadcaster, subscriber sessions and the server that
ties them to real connections.
"""
from newsdesk.ws_server.broadcaster import Broadcaster
from newsdesk.ws_server.card_store import CardStore
from newsdesk.ws_server.server import NewsWebSocketServer
from newsdesk.ws_server.session import SessionState, SubscriberSession

__all__ = [
    "Broadcaster",
    "CardStore",
    "NewsWebSocketServer",
    "SessionState",
    "SubscriberSession",
]
