"""Periodic reconciliation of tracked jobs against the remote backend.

Every tick spawns one reconciliation pass over the registry's working set. A
slow pass may still be running when the next one starts; both apply the same
idempotent merge, so overlapping passes converge on the same records.
"""

import asyncio
import logging
from typing import Optional, Set

from app.jobs.models import JobRecord, JobStatus
from app.jobs.registry import JobRegistry
from app.jobs.results import ResultsLoader
from app.remote.base import QCBackend
from app.remote.errors import RemoteError

logger = logging.getLogger(__name__)


class StatusPoller:
    """Recurring timer driving reconciliation passes."""

    def __init__(
        self,
        backend: QCBackend,
        registry: JobRegistry,
        loader: ResultsLoader,
        interval_seconds: float = 10.0,
    ):
        self._backend = backend
        self._registry = registry
        self._loader = loader
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._passes: Set[asyncio.Task] = set()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._timer_loop())

    async def stop(self) -> None:
        """Stop scheduling passes. Passes already in flight still complete."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def drain(self) -> None:
        """Wait for in-flight passes to finish."""
        if self._passes:
            await asyncio.gather(*list(self._passes), return_exceptions=True)

    async def _timer_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._interval)
            except asyncio.CancelledError:
                break
            if not self._running:
                break
            task = asyncio.create_task(self._scheduled_pass())
            self._passes.add(task)
            task.add_done_callback(self._passes.discard)

    async def _scheduled_pass(self) -> None:
        try:
            await self.run_pass()
        except Exception:
            logger.exception("Reconciliation pass failed")

    async def run_pass(self) -> int:
        """Reconcile every job in the working set once. Returns jobs examined."""
        jobs = self._registry.working_set()
        if not jobs:
            return 0
        await asyncio.gather(*(self._reconcile(job) for job in jobs))
        return len(jobs)

    async def _reconcile(self, job: JobRecord) -> None:
        job_id = job.id
        if job.awaiting_results:
            # Status is final; only the results are still outstanding.
            new_status = JobStatus.SUCCEEDED
        else:
            try:
                new_status = await self._backend.fetch_status(job_id)
            except RemoteError as exc:
                logger.warning("Status poll for job %s failed: %s", job_id, exc)
                return

        results = None
        if new_status == JobStatus.SUCCEEDED:
            try:
                results = await self._loader.fetch(job_id)
            except RemoteError as exc:
                logger.warning("Results fetch for job %s failed: %s", job_id, exc)
            except Exception:
                # status is merged whatever the results call did
                logger.exception("Results fetch for job %s raised", job_id)

        record = self._registry.merge_update(job_id, status=new_status, results=results)
        logger.debug(
            "Job %s -> %s (results %s)",
            job_id, record.status.value, "present" if record.results is not None else "absent",
        )
