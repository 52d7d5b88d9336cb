import asyncio

import pytest

from app.jobs.models import JobStatus
from app.remote.errors import RemoteError
from conftest import fastq


async def _succeeded_job(session, backend, job_id="j1"):
    backend.job_ids[f"{job_id}.fastq"] = job_id
    await session.orchestrator.submit([fastq(f"{job_id}.fastq", 10)])
    session.registry.merge_update(job_id, status=JobStatus.SUCCEEDED)
    backend.calls.clear()


@pytest.mark.asyncio
async def test_current_is_none_until_selected(session):
    assert session.selection.current is None


@pytest.mark.asyncio
async def test_select_unknown_job_raises(session):
    with pytest.raises(KeyError):
        await session.selection.select("nope")


@pytest.mark.asyncio
async def test_select_running_job_makes_no_calls(session, backend):
    backend.job_ids["a.fastq"] = "a"
    await session.orchestrator.submit([fastq("a.fastq", 10)])
    backend.calls.clear()

    job = await session.selection.select("a")

    assert job.id == "a"
    assert backend.calls == []


@pytest.mark.asyncio
async def test_select_loads_missing_results(session, backend):
    await _succeeded_job(session, backend)
    backend.results["j1"] = {"filename": "j1.fastq"}

    job = await session.selection.select("j1")

    assert job.results == {"filename": "j1.fastq"}
    assert session.registry.get("j1").results == {"filename": "j1.fastq"}
    assert session.selection.current.results == {"filename": "j1.fastq"}


@pytest.mark.asyncio
async def test_select_with_results_present_skips_fetch(session, backend):
    await _succeeded_job(session, backend)
    session.registry.merge_update("j1", results={"filename": "P"})
    backend.results["j1"] = {"filename": "P-prime"}

    await session.selection.select("j1")

    assert backend.calls_for("results") == []
    assert session.registry.get("j1").results == {"filename": "P"}


@pytest.mark.asyncio
async def test_results_not_ready_is_silent(session, backend):
    await _succeeded_job(session, backend)

    job = await session.selection.select("j1")

    assert job.results is None
    assert session.errors.last is None


@pytest.mark.asyncio
async def test_transport_failure_is_reported(session, backend):
    await _succeeded_job(session, backend)
    backend.results["j1"] = RemoteError("/results/j1 returned 500", status_code=500)

    await session.selection.select("j1")

    assert session.errors.last == "Could not load results: /results/j1 returned 500"
    assert session.registry.get("j1").results is None


@pytest.mark.asyncio
async def test_selection_follows_registry_without_copying(session, backend):
    await _succeeded_job(session, backend)
    await _succeeded_job(session, backend, "j2")
    session.selection.focus("j1")

    session.registry.merge_update("j1", results={"filename": "late"})

    assert session.selection.selected_id == "j1"
    assert session.selection.current.results == {"filename": "late"}


@pytest.mark.asyncio
async def test_select_and_poll_race_converges(session, backend):
    await _succeeded_job(session, backend)
    backend.results["j1"] = {"filename": "P"}
    backend.delay = 0.01

    await asyncio.gather(session.selection.select("j1"), session.poller.run_pass())

    assert session.registry.get("j1").results == {"filename": "P"}
    assert backend.calls_for("results") == ["j1"]


@pytest.mark.asyncio
async def test_racing_payloads_keep_first_arrival(session, backend):
    await _succeeded_job(session, backend)
    backend.results["j1"] = {"filename": "P"}
    await session.poller.run_pass()

    backend.results["j1"] = {"filename": "P-prime"}
    session.registry.merge_update("j1", results={"filename": "P-prime"})
    await session.selection.select("j1")

    assert session.registry.get("j1").results == {"filename": "P"}
