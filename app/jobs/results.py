"""Single-flight results fetching shared by the poller and the selection view."""

import asyncio
import logging
from typing import Any, Dict, Optional

from app.jobs.registry import JobRegistry
from app.remote.base import QCBackend
from app.remote.errors import ResultsNotReady

logger = logging.getLogger(__name__)


class ResultsLoader:
    """Fetches a job's results at most once at a time per job id.

    Concurrent callers for the same job share one request. Callers merge the
    payload into the registry themselves.
    """

    def __init__(self, backend: QCBackend, registry: JobRegistry):
        self._backend = backend
        self._registry = registry
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def fetch(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Return the results payload, or None if it is not available yet.

        Returns None without a request when the record already has results.
        Transport failures propagate as RemoteError.
        """
        record = self._registry.get(job_id)
        if record is not None and record.results is not None:
            return None

        task = self._in_flight.get(job_id)
        if task is None:
            task = asyncio.ensure_future(self._backend.fetch_results(job_id))
            self._in_flight[job_id] = task
            task.add_done_callback(lambda t: self._forget(job_id, t))

        try:
            return await asyncio.shield(task)
        except ResultsNotReady:
            logger.debug("Results for job %s not ready yet", job_id)
            return None

    def is_fetching(self, job_id: str) -> bool:
        return job_id in self._in_flight

    def _forget(self, job_id: str, task: asyncio.Task) -> None:
        if self._in_flight.get(job_id) is task:
            del self._in_flight[job_id]
