"""Client-side registry of submitted QC jobs."""

import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from app.jobs.models import JobRecord, JobStatus, NON_TERMINAL_STATUSES, STATUS_PROGRESS

logger = logging.getLogger(__name__)


class DuplicateJobError(ValueError):
    """A job id was inserted twice."""


class JobRegistry:
    """Ordered, id-keyed collection of JobRecords.

    - ``insert`` adds a new record (ids are unique)
    - ``merge_update`` applies status/results onto the existing record in place
    - statuses only move forward, terminal statuses are final
    - results are written at most once
    """

    def __init__(self):
        self._jobs: "OrderedDict[str, JobRecord]" = OrderedDict()

    def insert(self, record: JobRecord) -> JobRecord:
        if record.id in self._jobs:
            raise DuplicateJobError(f"Job '{record.id}' is already registered")
        self._jobs[record.id] = record
        return record

    def merge_update(
        self,
        job_id: str,
        status: Optional[JobStatus] = None,
        results: Optional[Dict[str, Any]] = None,
    ) -> JobRecord:
        """Merge a status and/or results into the record for ``job_id``.

        A missing value never clears what the record already holds.
        """
        record = self._jobs[job_id]

        if status is not None and status != record.status:
            if record.is_terminal:
                logger.warning(
                    "Ignoring status %s for job %s: already %s",
                    status.value, job_id, record.status.value,
                )
            elif STATUS_PROGRESS[status] < STATUS_PROGRESS[record.status]:
                logger.debug(
                    "Ignoring stale status %s for job %s: already %s",
                    status.value, job_id, record.status.value,
                )
            else:
                record.status = status

        if results is not None and record.results is None:
            if record.status == JobStatus.SUCCEEDED:
                record.results = results
            else:
                logger.warning(
                    "Ignoring results for job %s in status %s", job_id, record.status.value
                )

        return record

    def get(self, job_id: str) -> Optional[JobRecord]:
        return self._jobs.get(job_id)

    def snapshot(self) -> List[JobRecord]:
        """All jobs, most recently submitted first."""
        return list(reversed(self._jobs.values()))

    def working_set(self) -> List[JobRecord]:
        """Jobs that still need remote reconciliation."""
        return [
            job for job in self._jobs.values()
            if job.status in NON_TERMINAL_STATUSES or job.awaiting_results
        ]

    @property
    def count(self) -> int:
        return len(self._jobs)

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs
