"""Health check endpoint."""

from fastapi import APIRouter
import platform
import sys

router = APIRouter()

_session = None


def set_session(session):
    global _session
    _session = session


@router.get("/health")
async def health_check():
    """Service health plus the session's upload/poll state."""
    state = _session.view_state() if _session is not None else None
    return {
        "status": "healthy" if _session is not None else "starting",
        "polling": _session.poller.running if _session is not None else False,
        "session": state,
        "python_version": sys.version,
        "platform": platform.platform(),
    }
