"""Wires the job lifecycle components together for one dashboard session."""

from typing import Any, Dict, Optional

from app.config import Settings, settings as default_settings
from app.jobs.error_channel import ErrorChannel
from app.jobs.orchestrator import UploadOrchestrator
from app.jobs.poller import StatusPoller
from app.jobs.registry import JobRegistry
from app.jobs.results import ResultsLoader
from app.jobs.selection import SelectionView
from app.remote.base import QCBackend
from app.remote.http_backend import HttpQCBackend


class QCSession:
    """Owns the registry and everything that reads or merges into it.

    The view layer calls ``orchestrator.submit`` and ``selection.select`` and
    reads the rest; it never mutates job state directly.
    """

    def __init__(self, backend: QCBackend, poll_interval_seconds: float = 10.0):
        self.backend = backend
        self.registry = JobRegistry()
        self.errors = ErrorChannel()
        self.loader = ResultsLoader(backend, self.registry)
        self.selection = SelectionView(self.registry, self.loader, self.errors)
        self.orchestrator = UploadOrchestrator(backend, self.registry, self.selection, self.errors)
        self.poller = StatusPoller(
            backend, self.registry, self.loader, interval_seconds=poll_interval_seconds
        )

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "QCSession":
        config = config or default_settings
        backend = HttpQCBackend(config.api_base_url, timeout=config.http_timeout_seconds)
        return cls(backend, poll_interval_seconds=config.poll_interval_seconds)

    async def start(self) -> None:
        await self.poller.start()

    async def stop(self) -> None:
        await self.poller.stop()
        # In-flight passes still apply their results before the transport closes
        await self.poller.drain()
        await self.backend.aclose()

    def view_state(self) -> Dict[str, Any]:
        return {
            "uploading": self.orchestrator.uploading,
            "job_count": self.registry.count,
            "selected_job_id": self.selection.selected_id,
            "error": self.errors.last,
        }
