"""Shared fixtures: an in-memory QC backend and a session wired to it."""

import asyncio
import os
import sys
from typing import Any, Dict, List

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app.io.source_file import SourceFile
from app.jobs.models import JobStatus
from app.jobs.session import QCSession
from app.remote.base import QCBackend, UploadTarget
from app.remote.errors import RemoteError, ResultsNotReady


class FakeBackend(QCBackend):
    """Scriptable stand-in for the remote backend.

    - ``statuses[job_id]`` is what fetch_status returns (or raises, if an exception)
    - ``results[job_id]`` is what fetch_results returns (or raises); missing = not ready
    - ``fail_step[filename]`` makes "presign" | "store" | "submit" fail for that file
    - every call is appended to ``calls`` as (operation, argument)
    """

    def __init__(self):
        self.statuses: Dict[str, Any] = {}
        self.results: Dict[str, Any] = {}
        self.fail_step: Dict[str, str] = {}
        self.job_ids: Dict[str, str] = {}
        self.calls: List[tuple] = []
        self.stored: Dict[str, bytes] = {}
        self.delay: float = 0.0
        self.closed = False
        self._counter = 0

    def calls_for(self, operation: str) -> List[Any]:
        return [arg for op, arg in self.calls if op == operation]

    async def _pause(self) -> None:
        await asyncio.sleep(self.delay)

    async def request_upload_target(self, filename: str, size_bytes: int) -> UploadTarget:
        self.calls.append(("presign", filename))
        await self._pause()
        if self.fail_step.get(filename) == "presign":
            raise RemoteError("/upload returned 500", status_code=500)
        self._counter += 1
        job_id = self.job_ids.get(filename, f"job-{self._counter}")
        return UploadTarget(
            upload_url=f"https://bucket.example/{job_id}",
            storage_key=f"uploads/{job_id}/{filename}",
            job_id=job_id,
        )

    async def store_file(self, upload_url: str, source: SourceFile) -> None:
        self.calls.append(("store", source.filename))
        await self._pause()
        if self.fail_step.get(source.filename) == "store":
            raise RemoteError("PUT returned 403", status_code=403)
        body = b""
        async for chunk in source.iter_chunks():
            body += chunk
        self.stored[upload_url] = body

    async def submit_job(self, job_id: str, storage_key: str, filename: str) -> None:
        self.calls.append(("submit", job_id))
        await self._pause()
        if self.fail_step.get(filename) == "submit":
            raise RemoteError("/submit returned 502", status_code=502, job_id=job_id)

    async def fetch_status(self, job_id: str) -> JobStatus:
        self.calls.append(("status", job_id))
        await self._pause()
        value = self.statuses.get(job_id, JobStatus.SUBMITTED)
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_results(self, job_id: str) -> Dict[str, Any]:
        self.calls.append(("results", job_id))
        await self._pause()
        if job_id not in self.results:
            raise ResultsNotReady("Results not ready yet", status_code=404, job_id=job_id)
        value = self.results[job_id]
        if isinstance(value, Exception):
            raise value
        return value

    async def aclose(self) -> None:
        self.closed = True


SAMPLE_REPORT: Dict[str, Any] = {
    "filename": "sample.fastq",
    "summary": [
        {"module": "Basic Statistics", "status": "pass"},
        {"module": "Per base sequence quality", "status": "warn"},
        {"module": "Adapter Content", "status": "fail"},
    ],
    "basic_stats": {
        "total_sequences": 250000,
        "sequence_length": "35-151",
        "gc_content": 48,
        "encoding": "Sanger / Illumina 1.9",
    },
    "report_modules": {
        "per_base_quality": [
            {"base": 1, "mean": 32.1, "median": 33},
            {"base": 2, "mean": 33.4, "median": 34},
            {"base": "3-4", "mean": 30.0, "median": 31},
        ],
        "per_sequence_gc_content": [
            {"gc": 40, "count": 120},
            {"gc": 48, "count": 900},
            {"gc": 56, "count": 80},
        ],
    },
}


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session(backend) -> QCSession:
    return QCSession(backend, poll_interval_seconds=0.01)


def fastq(name: str = "sample.fastq", size: int = 1_000_000) -> SourceFile:
    return SourceFile.from_bytes(name, b"@" * size)


@pytest.fixture
def sample_report() -> Dict[str, Any]:
    return dict(SAMPLE_REPORT)

