"""
Card Store

Ring buffer of the most recently emitted card events, kept so that a newly
connected subscriber can be backfilled. Newest entries sit at the front;
the oldest fall off the back once the buffer is full.
"""
from __future__ import annotations

from collections import deque
from typing import Any

DEFAULT_CAPACITY = 50


class CardStore:
    """Most-recent-first buffer of the last K new_card events."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._events: deque[dict[str, Any]] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._events.maxlen or 0

    def __len__(self) -> int:
        return len(self._events)

    def append(self, event: dict[str, Any]) -> None:
        """Insert at the front, dropping the oldest event when full."""
        self._events.appendleft(event)

    def latest(self) -> list[dict[str, Any]]:
        """Stored events, newest first."""
        return list(self._events)

    def snapshot_for_new_subscriber(self) -> list[dict[str, Any]]:
        """Stored events oldest first, so replay reproduces emission order."""
        return list(reversed(self._events))
