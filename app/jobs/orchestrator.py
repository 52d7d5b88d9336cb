"""Upload-and-submit pipeline for new sequence files.

Per file, strictly in order:
  1. request a presigned upload target and job id
  2. store the bytes at that target
  3. submit the stored object for QC processing
  4. register a SUBMITTED JobRecord and focus the selection on it

Any failure aborts that file only. Nothing is registered for a failed file and
nothing is cleaned up remotely (an orphaned job id or stored object is accepted).
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from app.io.source_file import SourceFile
from app.jobs.error_channel import ErrorChannel
from app.jobs.models import JobRecord, JobStatus
from app.jobs.registry import JobRegistry
from app.jobs.selection import SelectionView
from app.remote.base import QCBackend
from app.remote.errors import RemoteError

logger = logging.getLogger(__name__)


@dataclass
class SubmitOutcome:
    filename: str
    job: Optional[JobRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.job is not None


class UploadOrchestrator:
    """Drives the three-step submission protocol for each file."""

    def __init__(
        self,
        backend: QCBackend,
        registry: JobRegistry,
        selection: SelectionView,
        errors: ErrorChannel,
    ):
        self._backend = backend
        self._registry = registry
        self._selection = selection
        self._errors = errors
        self._active = 0

    @property
    def uploading(self) -> bool:
        return self._active > 0

    async def submit(self, files: Iterable[SourceFile]) -> List[SubmitOutcome]:
        """Submit every file concurrently. Returns one outcome per file, in order."""
        files = list(files)
        if not files:
            return []
        self._errors.clear()
        self._active += 1
        try:
            return list(await asyncio.gather(*(self._submit_one(f) for f in files)))
        finally:
            self._active -= 1

    async def _submit_one(self, source: SourceFile) -> SubmitOutcome:
        try:
            target = await self._backend.request_upload_target(source.filename, source.size_bytes)
            await self._backend.store_file(target.upload_url, source)
            await self._backend.submit_job(target.job_id, target.storage_key, source.filename)
        except (RemoteError, OSError) as exc:
            message = f"Upload failed: {exc}"
            self._errors.report(f"{message} ({source.filename})")
            return SubmitOutcome(filename=source.filename, error=message)

        record = self._registry.insert(JobRecord(
            id=target.job_id,
            source_filename=source.filename,
            size_bytes=source.size_bytes,
            status=JobStatus.SUBMITTED,
        ))
        self._selection.focus(record.id)
        logger.info("Submitted %s as job %s", source.filename, record.id)
        return SubmitOutcome(filename=source.filename, job=record)
