"""Sweep Scheduler — periodic trigger for the monitoring sweep.

Invariants:
    - One interval job; overlapping runs allowed up to max_instances (sweeps never
      cancel or wait for each other)
    - shutdown() stops the scheduler without waiting for in-flight sweeps; running
      turns False as soon as shutdown() returns
    - The job itself is injected: this module knows nothing about sites or probes
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "site_sweep"


class SweepScheduler:
    """Runs an async job on a fixed interval inside the application's event loop."""

    def __init__(
        self,
        job: Callable[[], Awaitable[object]],
        interval_seconds: int,
        max_instances: int = 3,
        run_on_startup: bool = False,
    ):
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self._job = job
        self.interval_seconds = interval_seconds
        self.max_instances = max_instances
        self.run_on_startup = run_on_startup
        self._started = False

    def start(self) -> None:
        """Register the sweep job and start ticking. Needs a running event loop."""
        options: dict = {}
        if self.run_on_startup:
            options["next_run_time"] = datetime.now(timezone.utc)
        self.scheduler.add_job(
            self._job,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=SWEEP_JOB_ID,
            name="Sweep monitored sites",
            max_instances=self.max_instances,
            coalesce=False,
            replace_existing=True,
            **options,
        )
        self.scheduler.start()
        self._started = True
        logger.info(
            f"Sweep scheduler started (every {self.interval_seconds}s)",
            extra={"job_id": SWEEP_JOB_ID},
        )

    @property
    def running(self) -> bool:
        return self._started

    def shutdown(self) -> None:
        # AsyncIOScheduler finishes stopping on the loop, after this returns
        if self._started:
            self._started = False
            self.scheduler.shutdown(wait=False)
            logger.info("Sweep scheduler shutdown", extra={"job_id": SWEEP_JOB_ID})
