"""
Outbound event builders

Every message pushed to subscribers is a JSON object with a "type" key.
"""
from __future__ import annotations

from typing import Any

from newsdesk.models.news import Card, Column

NEW_CARD = "new_card"
INITIAL = "initial"
MARKET_UPDATE = "market_update"
MACRO_UPDATE = "macro_update"
FX_UPDATE = "fx_update"
COMMODITY_UPDATE = "commodity_update"
PREDICTION_UPDATE = "prediction_update"
GAME_THEORY_UPDATE = "game_theory_update"

SNAPSHOT_EVENTS = frozenset({
    MARKET_UPDATE,
    MACRO_UPDATE,
    FX_UPDATE,
    COMMODITY_UPDATE,
    PREDICTION_UPDATE,
    GAME_THEORY_UPDATE,
})

# Inbound control messages
PING = "ping"
PONG = "pong"
REFRESH_REQUEST = "refresh_request"


def new_card_event(column: Column, card: Card) -> dict[str, Any]:
    return {"type": NEW_CARD, "column": column.value, "data": card.to_dict()}


def snapshot_event(event_type: str, data: Any) -> dict[str, Any]:
    if event_type not in SNAPSHOT_EVENTS:
        raise ValueError(f"Not a snapshot event type: {event_type}")
    return {"type": event_type, "data": data}


def initial_event(
    market: Any,
    macro: Any,
    fx: Any,
    commodities: Any,
) -> dict[str, Any]:
    return {
        "type": INITIAL,
        "market": market,
        "macro": macro,
        "fx": fx,
        "commodities": commodities,
    }


def is_new_card(event: dict[str, Any]) -> bool:
    return event.get("type") == NEW_CARD
