"""httpx client for the remote QC backend.

Endpoints, relative to the configured base URL:
  POST /upload          — {filename, filesize} -> {uploadUrl, s3Key, jobId}
  PUT  <uploadUrl>      — raw file bytes straight to object storage
  POST /submit          — {jobId, s3Key, filename} starts the QC batch job
  GET  /job/{jobId}     — {status}
  GET  /results/{jobId} — QC report JSON once the job has succeeded
"""

import logging
from typing import Any, Dict, Optional

import httpx

from app.io.source_file import SourceFile
from app.jobs.models import JobStatus
from app.remote.base import QCBackend, UploadTarget
from app.remote.errors import RemoteError, ResultsNotReady

logger = logging.getLogger(__name__)

# Statuses the results endpoint uses while the report is still being written
_NOT_READY_CODES = {202, 404, 409, 425}


class HttpQCBackend(QCBackend):
    """QCBackend over HTTP.

    Example:
        backend = HttpQCBackend("https://abc.execute-api.us-east-1.amazonaws.com/prod")
        target = await backend.request_upload_target("sample.fastq", 1_000_000)
        await backend.store_file(target.upload_url, SourceFile.from_path("sample.fastq"))
        await backend.submit_job(target.job_id, target.storage_key, "sample.fastq")
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API gateway base address
            timeout: request timeout in seconds, None waits indefinitely
            transport: custom httpx transport (tests use httpx.MockTransport)
        """
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _ensure_open(self, job_id: Optional[str] = None) -> None:
        if self._client.is_closed:
            raise RemoteError("HTTP client is closed", job_id=job_id)

    async def request_upload_target(self, filename: str, size_bytes: int) -> UploadTarget:
        response = await self._send(
            "POST", "/upload", json={"filename": filename, "filesize": size_bytes}
        )
        data = _json_object(response)
        try:
            return UploadTarget(
                upload_url=data["uploadUrl"],
                storage_key=data["s3Key"],
                job_id=data["jobId"],
            )
        except KeyError as exc:
            raise RemoteError(f"Upload endpoint response is missing {exc}") from exc

    async def store_file(self, upload_url: str, source: SourceFile) -> None:
        logger.info("Uploading %s (%d bytes)", source.filename, source.size_bytes)
        await self._send(
            "PUT",
            upload_url,
            content=source.iter_chunks(),
            headers={
                "Content-Type": "application/octet-stream",
                "Content-Length": str(source.size_bytes),
            },
        )

    async def submit_job(self, job_id: str, storage_key: str, filename: str) -> None:
        await self._send(
            "POST",
            "/submit",
            json={"jobId": job_id, "s3Key": storage_key, "filename": filename},
            job_id=job_id,
        )

    async def fetch_status(self, job_id: str) -> JobStatus:
        response = await self._send("GET", f"/job/{job_id}", job_id=job_id)
        data = _json_object(response, job_id=job_id)
        raw = data.get("status")
        try:
            return JobStatus(raw)
        except ValueError as exc:
            raise RemoteError(f"Unrecognised job status {raw!r}", job_id=job_id) from exc

    async def fetch_results(self, job_id: str) -> Dict[str, Any]:
        self._ensure_open(job_id)
        try:
            response = await self._client.get(f"/results/{job_id}")
        except httpx.HTTPError as exc:
            raise RemoteError(f"{type(exc).__name__}: {exc}", job_id=job_id) from exc

        if response.status_code in _NOT_READY_CODES:
            raise ResultsNotReady(
                "Results not ready yet", status_code=response.status_code, job_id=job_id
            )
        _raise_for_status(response, job_id=job_id)
        try:
            data = response.json()
        except ValueError as exc:
            raise ResultsNotReady("Results body is not JSON yet", job_id=job_id) from exc
        if not isinstance(data, dict):
            raise ResultsNotReady("Results body is not a report object", job_id=job_id)
        return data

    async def _send(self, method: str, url: str, job_id: Optional[str] = None, **kwargs) -> httpx.Response:
        self._ensure_open(job_id)
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteError(f"{type(exc).__name__}: {exc}", job_id=job_id) from exc
        _raise_for_status(response, job_id=job_id)
        return response


def _raise_for_status(response: httpx.Response, job_id: Optional[str] = None) -> None:
    if response.is_success:
        return
    path = response.request.url.path
    raise RemoteError(
        f"{path} returned {response.status_code}",
        status_code=response.status_code,
        job_id=job_id,
    )


def _json_object(response: httpx.Response, job_id: Optional[str] = None) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        raise RemoteError(f"Invalid JSON from {response.request.url.path}", job_id=job_id) from exc
    if not isinstance(data, dict):
        raise RemoteError(f"Unexpected response from {response.request.url.path}", job_id=job_id)
    return data
