"""
Periodic driver for the reminder scheduler.

One asyncio loop wakes up every `resolution` seconds and starts the jobs whose
interval has elapsed. Job callables are synchronous (file I/O, blocking push
requests) and run in a worker thread. A job whose previous run is still in
progress is skipped for that tick instead of being started a second time.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Job:
    name: str
    interval: float
    func: Callable[[], Any]
    next_run: float = 0.0
    running: Optional[asyncio.Task] = field(default=None, repr=False)
    skipped: int = 0

    @property
    def is_running(self) -> bool:
        return self.running is not None and not self.running.done()


class Ticker:
    def __init__(
        self,
        *,
        resolution: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.resolution = max(0.05, float(resolution))
        self.clock = clock
        self.jobs: dict[str, Job] = {}
        self._loop_task: Optional[asyncio.Task] = None

    def add_job(
        self,
        name: str,
        interval: float,
        func: Callable[[], Any],
        *,
        run_immediately: bool = False,
    ) -> Job:
        if interval <= 0:
            raise ValueError(f"Job {name!r} needs a positive interval, got {interval}")
        first_run = self.clock() if run_immediately else self.clock() + interval
        job = Job(name=name, interval=float(interval), func=func, next_run=first_run)
        self.jobs[name] = job
        return job

    async def run_pending(self) -> list[str]:
        """Start every due job. Returns the names of the jobs started."""
        now = self.clock()
        started = []
        for job in self.jobs.values():
            if now < job.next_run:
                continue
            job.next_run = now + job.interval

            if job.is_running:
                job.skipped += 1
                logger.warning(f"Job {job.name} still running, skipping this tick")
                continue

            job.running = asyncio.create_task(self._run(job), name=f"ticker:{job.name}")
            started.append(job.name)
        return started

    async def _run(self, job: Job) -> None:
        started_at = time.monotonic()
        try:
            await asyncio.to_thread(job.func)
        except Exception:
            logger.exception(f"Job {job.name} failed")
        else:
            logger.debug(f"Job {job.name} finished in {time.monotonic() - started_at:.2f}s")

    async def run_forever(self) -> None:
        """Evaluation loop. Cancel the task to stop it."""
        logger.info(
            "Ticker started with jobs: "
            + ", ".join(f"{j.name} every {j.interval:g}s" for j in self.jobs.values())
        )
        while True:
            await self.run_pending()
            await asyncio.sleep(self.resolution)

    def start(self) -> asyncio.Task:
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self.run_forever(), name="ticker")
        return self._loop_task

    async def stop(self) -> None:
        """Stop the loop and wait for in-flight jobs to finish."""
        if self._loop_task is not None:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None

        in_flight = [job.running for job in self.jobs.values() if job.is_running]
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)
        logger.info("Ticker stopped")
