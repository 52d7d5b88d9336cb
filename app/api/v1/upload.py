"""Browser-facing upload API.

  POST /upload — receive one or more sequence files and run each through the
                 presign -> store -> submit pipeline

Mounted at the root as well as under /api/v1, like the rest of the
compatibility layer.
"""

import asyncio
import os
import shutil
import tempfile
from pathlib import Path
from typing import List

from fastapi import APIRouter, File, HTTPException, UploadFile

from app.config import settings
from app.io.source_file import CHUNK_SIZE, SourceFile

router = APIRouter()

# Wired in during lifespan (same pattern as jobs.py / health.py)
_session = None


def set_session(session):
    global _session
    _session = session


_ACCEPTED_SUFFIXES = (".fastq", ".fastq.gz", ".fq.gz")

# Max upload size per file (default 5 GB)
_MAX_FILE_BYTES = settings.max_upload_bytes


# ---------------------------------------------------------------------------
# POST /upload
# ---------------------------------------------------------------------------

@router.post("/upload")
async def upload_files(files: List[UploadFile] = File(...)):
    """Submit uploaded FASTQ files for QC analysis.

    Each file is spooled to a temporary directory in 1 MB chunks and streamed
    from there to object storage; the directory is removed once every file's
    pipeline has finished.

    Returns:
        {uploading, error, outcomes: [{filename, ok, job_id?, error?}]}
    """
    if _session is None:
        raise HTTPException(status_code=503, detail="Session not ready")

    names = [os.path.basename(f.filename or "") for f in files]
    rejected = [name or "<unnamed>" for name in names if not name.endswith(_ACCEPTED_SUFFIXES)]
    if rejected:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {rejected}. Accepts {list(_ACCEPTED_SUFFIXES)}",
        )

    upload_dir = tempfile.mkdtemp(prefix="fastqc_upload_", dir=settings.upload_tmp_dir)
    try:
        sources = []
        for index, (upload, name) in enumerate(zip(files, names)):
            path = os.path.join(upload_dir, f"{index}_{name}")
            await _spool(upload, path, name)
            sources.append(SourceFile(filename=name, size_bytes=os.path.getsize(path), path=Path(path)))

        outcomes = await _session.orchestrator.submit(sources)
    finally:
        shutil.rmtree(upload_dir, ignore_errors=True)

    return {
        "uploading": _session.orchestrator.uploading,
        "error": _session.errors.last,
        "outcomes": [
            {
                "filename": o.filename,
                "ok": o.ok,
                "job_id": o.job.id if o.job else None,
                "error": o.error,
            }
            for o in outcomes
        ],
    }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _spool(upload: UploadFile, path: str, name: str) -> None:
    """Copy an upload to ``path`` in chunks, enforcing the size cap."""
    total = 0
    try:
        with open(path, "wb") as dst:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > _MAX_FILE_BYTES:
                    raise HTTPException(
                        status_code=413,
                        detail=f"{name} is too large (max {_MAX_FILE_BYTES} bytes)",
                    )
                await asyncio.to_thread(dst.write, chunk)
    except HTTPException:
        raise
    except OSError as exc:
        raise HTTPException(status_code=500, detail=f"Failed to save upload: {exc}")
