"""
Deduplication Ledger

Bounded, insertion-ordered set of story identifiers that have already been
admitted. Eviction is purely capacity driven: once full, admitting a new
identifier drops the single oldest one, which may later resurface as new.
State is memory-resident and starts empty on every process start.
"""
from __future__ import annotations

import logging
from collections import OrderedDict

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5000


class DedupLedger:
    """Seen-set with FIFO eviction at a fixed capacity."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._seen: OrderedDict[str, None] = OrderedDict()
        self._admitted = 0
        self._rejected = 0
        self._evicted = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._seen

    def admit(self, identifier: str) -> bool:
        """
        Record identifier and return True if it is not resident.

        Returns False for an identifier still in the ledger. Looking an
        identifier up does not refresh its position.
        """
        if identifier in self._seen:
            self._rejected += 1
            return False

        self._seen[identifier] = None
        self._admitted += 1

        if len(self._seen) > self._capacity:
            oldest, _ = self._seen.popitem(last=False)
            self._evicted += 1
            logger.debug(f"Dedup ledger evicted {oldest[:80]}")

        return True

    def clear(self) -> None:
        self._seen.clear()

    def get_stats(self) -> dict[str, int]:
        return {
            "resident": len(self._seen),
            "capacity": self._capacity,
            "admitted": self._admitted,
            "rejected": self._rejected,
            "evicted": self._evicted,
        }
