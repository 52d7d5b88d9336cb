"""FastQC Dashboard backend - FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.v1.router import v1_router, upload_router_compat
from app.api.v1.health import router as health_root_router
from app.api.v1 import health as health_api
from app.api.v1 import jobs as jobs_api
from app.api.v1 import upload as upload_api
from app.jobs.session import QCSession

# Swapped out in tests to run against an in-memory backend
session_factory = QCSession.from_settings

# Global session reference
_session = None


def _wire(session) -> None:
    health_api.set_session(session)
    jobs_api.set_session(session)
    upload_api.set_session(session)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    global _session

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"Starting FastQC Dashboard on port {settings.service_port}")
    print(f"QC backend: {settings.api_base_url}")
    print(f"Poll interval: {settings.poll_interval_seconds}s")

    _session = session_factory()
    await _session.start()
    print("Status poller started")

    _wire(_session)

    yield

    # Shutdown: stop the timer; in-flight polls finish or are dropped
    print("Shutting down FastQC Dashboard")
    _wire(None)
    await _session.stop()
    _session = None


app = FastAPI(
    title="FastQC Dashboard",
    description="Submit sequencing files for remote FastQC analysis and track the results",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.frontend_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(health_root_router, tags=["health"])  # GET /health at root
app.include_router(v1_router)  # All /api/v1/* endpoints
app.include_router(upload_router_compat)  # POST /upload at root
