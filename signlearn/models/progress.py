from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from uuid import UUID

ProgressStatus = Literal["not_started", "in_progress", "completed"]

NOT_STARTED: ProgressStatus = "not_started"
IN_PROGRESS: ProgressStatus = "in_progress"
COMPLETED: ProgressStatus = "completed"


def derive_status(progress_percentage: float) -> ProgressStatus:
    """Map a percentage to a status: 0 → not_started, 100 → completed."""
    if progress_percentage == 100:
        return COMPLETED
    if progress_percentage > 0:
        return IN_PROGRESS
    return NOT_STARTED


def next_status(
    previous: ProgressStatus | None, progress_percentage: float
) -> ProgressStatus:
    """Status after applying *progress_percentage* to a record.

    ``completed`` is a ratchet: once reached it is kept even when a later
    (possibly out-of-order) update lowers the percentage.
    """
    if previous == COMPLETED:
        return COMPLETED
    return derive_status(progress_percentage)


@dataclass(frozen=True, slots=True)
class ProgressRecord:
    """The single progress row for one (user, course) pair."""

    user_id: UUID
    course_id: str
    progress_percentage: float = 0.0
    time_spent: float = 0.0  # cumulative seconds
    status: ProgressStatus = NOT_STARTED
    last_activity_at: int | None = None
    completed_at: int | None = None
