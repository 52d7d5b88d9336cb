"""Status badge descriptors for the job list and detail panel."""

from dataclasses import dataclass
from typing import Dict

from app.jobs.models import JobStatus

PALETTE = {
    "bg": "#0a0e1a", "panel": "#0f1629", "border": "#1e2d4a",
    "accent": "#00d4ff", "green": "#00ffaa", "orange": "#ff8c42",
    "red": "#ff4d6d", "purple": "#b48aff", "yellow": "#ffd166",
    "muted": "#4a6080", "text": "#cce0ff", "text_dim": "#5a7ca0",
}


@dataclass(frozen=True)
class Badge:
    color: str
    label: str
    animated: bool


BADGES: Dict[JobStatus, Badge] = {
    JobStatus.PENDING:   Badge(PALETTE["muted"],  "● PENDING",   False),
    JobStatus.SUBMITTED: Badge(PALETTE["yellow"], "● SUBMITTED", True),
    JobStatus.STARTING:  Badge(PALETTE["orange"], "● STARTING",  True),
    JobStatus.RUNNABLE:  Badge(PALETTE["yellow"], "● RUNNABLE",  True),
    JobStatus.RUNNING:   Badge(PALETTE["accent"], "● RUNNING",   True),
    JobStatus.SUCCEEDED: Badge(PALETTE["green"],  "✓ COMPLETE",  False),
    JobStatus.FAILED:    Badge(PALETTE["red"],    "✗ FAILED",    False),
}

_missing = set(JobStatus) - set(BADGES)
if _missing:
    raise RuntimeError(f"No badge for status(es): {sorted(s.value for s in _missing)}")


def badge_for(status: JobStatus) -> Badge:
    return BADGES[status]
