"""
Card mirror serializer

Wire format (envelope):
  {
    "channel": "cards:geo",
    "data": { ...new_card event... }
  }
"""
from __future__ import annotations

import json
from typing import Any

from newsdesk.core.types import PublishError


def serialize(channel: str, data: dict[str, Any]) -> str:
    """Encode a channel name and payload into the JSON envelope."""
    try:
        return json.dumps({"channel": channel, "data": data}, default=str)
    except (TypeError, ValueError) as exc:
        raise PublishError(f"Failed to serialize card message: {exc}", channel=channel) from exc

