"""
Source Pollers

One SourcePoller per external feed. Each keeps its own consecutive-failure
counter and stops polling once the counter passes the threshold; the next
success (after an explicit reset) puts it back in rotation.

PollerPool runs a set of pollers concurrently so one dead source never
holds up or aborts its siblings.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable

from newsdesk.models.news import NewsItem

logger = logging.getLogger(__name__)

FetchFn = Callable[[int], Awaitable[list[NewsItem]]]
SinkFn = Callable[[list[NewsItem]], Awaitable[int]]

DEFAULT_FAILURE_THRESHOLD = 5


@dataclass
class PollerStats:
    polls: int = 0
    skipped: int = 0
    failures: int = 0
    items_fetched: int = 0
    items_emitted: int = 0


class SourcePoller:
    """
    Fetches a bounded batch from one source and hands it to a sink.

    Args:
        name: Source name for logging
        fetch: Coroutine taking the item limit, returning NewsItems
        sink: Coroutine consuming the batch, returning the number emitted
        failure_threshold: Skip the source once consecutive failures exceed this
        timeout: Seconds before a fetch is abandoned and counted as a failure
    """

    def __init__(
        self,
        name: str,
        fetch: FetchFn,
        sink: SinkFn,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        timeout: float = 10.0,
    ) -> None:
        self.name = name
        self._fetch = fetch
        self._sink = sink
        self._failure_threshold = failure_threshold
        self._timeout = timeout
        self._consecutive_failures = 0
        self._stats = PollerStats()

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def is_tripped(self) -> bool:
        return self._consecutive_failures > self._failure_threshold

    def reset(self) -> None:
        """Clear the failure counter so a tripped source is polled again."""
        self._consecutive_failures = 0

    async def poll(self, limit: int) -> int:
        """
        Run one fetch-and-sink cycle.

        Returns:
            Number of items the sink emitted (0 on skip or failure)
        """
        if self.is_tripped:
            self._stats.skipped += 1
            return 0

        self._stats.polls += 1
        try:
            items = await asyncio.wait_for(self._fetch(limit), timeout=self._timeout)
        except Exception as e:
            self._consecutive_failures += 1
            self._stats.failures += 1
            logger.warning(
                f"Source {self.name} failed ({self._consecutive_failures} in a row): {e}",
                extra={"source": self.name},
            )
            if self.is_tripped:
                logger.error(
                    f"Source {self.name} disabled after {self._consecutive_failures} consecutive failures",
                    extra={"source": self.name},
                )
            return 0

        self._consecutive_failures = 0
        self._stats.items_fetched += len(items)
        if not items:
            return 0

        emitted = await self._sink(items)
        self._stats.items_emitted += emitted
        return emitted

    def get_stats(self) -> dict:
        return {
            "name": self.name,
            "consecutive_failures": self._consecutive_failures,
            "tripped": self.is_tripped,
            "polls": self._stats.polls,
            "skipped": self._stats.skipped,
            "failures": self._stats.failures,
            "items_fetched": self._stats.items_fetched,
            "items_emitted": self._stats.items_emitted,
        }


class PollerPool:
    """A named group of pollers sharing one schedule."""

    def __init__(self, name: str, pollers: Iterable[SourcePoller]) -> None:
        self.name = name
        self._pollers = list(pollers)

    @property
    def pollers(self) -> list[SourcePoller]:
        return list(self._pollers)

    async def poll_all(self, limit: int) -> int:
        """
        Poll every source concurrently, tolerating individual failures.

        Returns:
            Total items emitted across the pool
        """
        results = await asyncio.gather(
            *(p.poll(limit) for p in self._pollers),
            return_exceptions=True,
        )

        total = 0
        for poller, result in zip(self._pollers, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"Poller {poller.name} raised: {result!r}",
                    exc_info=result,
                    extra={"source": poller.name},
                )
                continue
            total += result

        if total:
            logger.info(f"{self.name}: emitted {total} cards from {len(self._pollers)} sources")
        return total

    def get_stats(self) -> dict:
        return {
            "name": self.name,
            "sources": len(self._pollers),
            "tripped": sum(1 for p in self._pollers if p.is_tripped),
            "pollers": [p.get_stats() for p in self._pollers],
        }
