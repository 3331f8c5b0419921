"""
Fixed-interval job scheduler

Each job runs in its own task: run, then sleep for the interval. A run
that raises is logged and the loop carries on, so one broken data domain
never stops the others.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

JobFn = Callable[[], Awaitable[object]]


@dataclass
class PeriodicJob:
    name: str
    interval_seconds: float
    fn: JobFn
    run_immediately: bool = False
    runs: int = field(default=0, init=False)
    failures: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")

    async def run_once(self) -> bool:
        """Run the job a single time; True when it completed without raising."""
        self.runs += 1
        try:
            await self.fn()
            return True
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.failures += 1
            logger.error(f"Job {self.name} failed: {e}", exc_info=True, extra={"job": self.name})
            return False

    async def loop(self) -> None:
        if not self.run_immediately:
            await asyncio.sleep(self.interval_seconds)
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)


class Scheduler:
    """Starts and stops a set of PeriodicJobs."""

    def __init__(self) -> None:
        self._jobs: list[PeriodicJob] = []
        self._tasks: list[asyncio.Task] = []
        self._started = False

    @property
    def jobs(self) -> list[PeriodicJob]:
        return list(self._jobs)

    @property
    def running(self) -> bool:
        return self._started

    def add(
        self,
        name: str,
        interval_seconds: float,
        fn: JobFn,
        run_immediately: bool = False,
    ) -> PeriodicJob:
        job = PeriodicJob(name, interval_seconds, fn, run_immediately)
        self._jobs.append(job)
        if self._started:
            self._tasks.append(asyncio.create_task(job.loop(), name=f"job:{name}"))
        return job

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        for job in self._jobs:
            self._tasks.append(asyncio.create_task(job.loop(), name=f"job:{job.name}"))
            logger.info(f"Scheduled {job.name} every {job.interval_seconds:g}s")

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        self._started = False
        logger.info("Scheduler stopped")

    def get_stats(self) -> dict[str, dict[str, int]]:
        return {job.name: {"runs": job.runs, "failures": job.failures} for job in self._jobs}
