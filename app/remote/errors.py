"""Errors raised by the remote QC backend wrapper."""

from typing import Optional


class RemoteError(Exception):
    """A remote call failed (network error or non-success HTTP status)."""

    def __init__(self, message: str, status_code: Optional[int] = None, job_id: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.job_id = job_id


class ResultsNotReady(RemoteError):
    """The job succeeded but its results have not materialised yet."""
