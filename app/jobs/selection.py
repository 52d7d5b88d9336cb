"""Which job the detail panel is showing."""

import logging
from typing import Optional

from app.jobs.error_channel import ErrorChannel
from app.jobs.models import JobRecord
from app.jobs.registry import JobRegistry
from app.jobs.results import ResultsLoader
from app.remote.errors import RemoteError

logger = logging.getLogger(__name__)


class SelectionView:
    """Keeps only the selected job id; the record is looked up on every read,
    so registry merges show up without copying anything.
    """

    def __init__(self, registry: JobRegistry, loader: ResultsLoader, errors: ErrorChannel):
        self._registry = registry
        self._loader = loader
        self._errors = errors
        self._selected_id: Optional[str] = None

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def current(self) -> Optional[JobRecord]:
        if self._selected_id is None:
            return None
        return self._registry.get(self._selected_id)

    def focus(self, job_id: str) -> None:
        """Select a job without fetching anything."""
        if job_id not in self._registry:
            raise KeyError(job_id)
        self._selected_id = job_id

    def clear(self) -> None:
        self._selected_id = None

    async def select(self, job_id: str) -> Optional[JobRecord]:
        """Select a job and load its results on demand if they are missing."""
        self.focus(job_id)
        record = self._registry.get(job_id)
        if not record.awaiting_results:
            return record

        try:
            payload = await self._loader.fetch(job_id)
        except RemoteError as exc:
            self._errors.report(f"Could not load results: {exc}")
            return self._registry.get(job_id)

        if payload is not None:
            self._registry.merge_update(job_id, results=payload)
            self._errors.clear()
        return self._registry.get(job_id)
