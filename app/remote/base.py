"""Remote QC backend interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict

from app.io.source_file import SourceFile
from app.jobs.models import JobStatus


@dataclass(frozen=True)
class UploadTarget:
    """Presigned destination and job id minted by the backend."""
    upload_url: str
    storage_key: str
    job_id: str


class QCBackend(ABC):
    """Abstract interface for the remote compute backend.

    Every method may raise RemoteError. Nothing is retried here.
    """

    @abstractmethod
    async def request_upload_target(self, filename: str, size_bytes: int) -> UploadTarget:
        """Ask for a write-capable upload destination and a job id."""
        ...

    @abstractmethod
    async def store_file(self, upload_url: str, source: SourceFile) -> None:
        """Transfer the raw file bytes to the presigned destination."""
        ...

    @abstractmethod
    async def submit_job(self, job_id: str, storage_key: str, filename: str) -> None:
        """Register a stored object for processing."""
        ...

    @abstractmethod
    async def fetch_status(self, job_id: str) -> JobStatus:
        ...

    @abstractmethod
    async def fetch_results(self, job_id: str) -> Dict[str, Any]:
        """Get the results payload. Raises ResultsNotReady until it exists."""
        ...

    async def aclose(self) -> None:
        """Release transport resources."""
        return None
