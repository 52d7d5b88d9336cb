"""Job list, selection, QC report and chart endpoints."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import ValidationError

from app.jobs.models import JobRecord, JobStatus
from app.presentation.badges import BADGES, badge_for
from app.processing.qc_report import QCReport
from app.processing.visualization import render_gc_content, render_per_base_quality

router = APIRouter()

# Set by main.py during lifespan
_session = None


def set_session(session):
    global _session
    _session = session


def _require_session():
    if _session is None:
        raise HTTPException(status_code=503, detail="Session not initialized")
    return _session


def _require_job(job_id: str) -> JobRecord:
    job = _require_session().registry.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


def _parse_report(job: JobRecord) -> QCReport:
    try:
        return QCReport.from_payload(job.results)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=f"Results for job {job.id} are not a readable QC report: {exc.error_count()} error(s)",
        )


def _serialize(job: JobRecord) -> dict:
    badge = badge_for(job.status)
    return {
        "job_id": job.id,
        "filename": job.source_filename,
        "size_bytes": job.size_bytes,
        "filesize": job.display_size,
        "status": job.status.value,
        "badge": {"color": badge.color, "label": badge.label, "animated": badge.animated},
        "submitted_at": job.submitted_at.isoformat(),
        "results": job.results,
    }


@router.get("/jobs")
async def list_jobs():
    """All jobs, most recently submitted first."""
    session = _require_session()
    return {
        "count": session.registry.count,
        "jobs": [_serialize(job) for job in session.registry.snapshot()],
    }


@router.get("/jobs/{job_id}")
async def get_job(job_id: str):
    return _serialize(_require_job(job_id))


@router.post("/jobs/{job_id}/select")
async def select_job(job_id: str):
    """Focus the detail panel on a job, loading its results if needed."""
    session = _require_session()
    _require_job(job_id)
    job = await session.selection.select(job_id)
    return {"job": _serialize(job), "error": session.errors.last}


@router.get("/selection")
async def get_selection():
    current = _require_session().selection.current
    return {"job": _serialize(current) if current else None}


@router.get("/jobs/{job_id}/report")
async def get_report(job_id: str):
    """Parsed QC summary for a completed job."""
    job = _require_job(job_id)
    if job.status != JobStatus.SUCCEEDED or job.results is None:
        raise HTTPException(status_code=409, detail="Results not available yet")
    report = _parse_report(job)
    return {
        "job_id": job.id,
        "report": report.model_dump(),
        "status_counts": report.status_counts(),
        "failed_modules": report.failed_modules(),
    }


@router.get("/jobs/{job_id}/charts/{chart}")
async def get_chart(job_id: str, chart: str):
    """Render one report chart as PNG: per_base_quality | gc_content."""
    job = _require_job(job_id)
    if job.results is None:
        raise HTTPException(status_code=409, detail="Results not available yet")
    modules = _parse_report(job).report_modules

    if chart == "per_base_quality":
        if not modules.per_base_quality:
            raise HTTPException(status_code=404, detail="Report has no per-base quality data")
        png = render_per_base_quality(modules.per_base_quality)
    elif chart == "gc_content":
        if not modules.per_sequence_gc_content:
            raise HTTPException(status_code=404, detail="Report has no GC content data")
        png = render_gc_content(modules.per_sequence_gc_content)
    else:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown chart '{chart}'. Valid: ['per_base_quality', 'gc_content']",
        )
    return Response(content=png, media_type="image/png")


@router.get("/badges")
async def list_badges():
    return {
        status.value: {"color": b.color, "label": b.label, "animated": b.animated}
        for status, b in BADGES.items()
    }
