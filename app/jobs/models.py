"""Job record data model for tracked QC analyses."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    PENDING = "PENDING"
    SUBMITTED = "SUBMITTED"
    STARTING = "STARTING"
    RUNNABLE = "RUNNABLE"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


NON_TERMINAL_STATUSES = frozenset({
    JobStatus.PENDING,
    JobStatus.SUBMITTED,
    JobStatus.STARTING,
    JobStatus.RUNNABLE,
    JobStatus.RUNNING,
})
TERMINAL_STATUSES = frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED})

# Batch lifecycle order; terminal statuses rank above all of these
STATUS_PROGRESS = {
    JobStatus.SUBMITTED: 0,
    JobStatus.PENDING: 1,
    JobStatus.RUNNABLE: 2,
    JobStatus.STARTING: 3,
    JobStatus.RUNNING: 4,
    JobStatus.SUCCEEDED: 5,
    JobStatus.FAILED: 5,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobRecord(BaseModel):
    """One QC analysis tracked from submission until its results arrive.

    Only the registry mutates a record, and only through a field-wise merge.
    """
    id: str
    source_filename: str
    size_bytes: int = Field(ge=0)
    status: JobStatus = JobStatus.SUBMITTED
    submitted_at: datetime = Field(default_factory=_utcnow)
    results: Optional[Dict[str, Any]] = None

    model_config = {"validate_assignment": True}

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def awaiting_results(self) -> bool:
        return self.status == JobStatus.SUCCEEDED and self.results is None

    @property
    def display_size(self) -> str:
        return f"{self.size_bytes / 1e9:.2f} GB"
