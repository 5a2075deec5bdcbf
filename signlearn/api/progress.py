"""Per-(user, course) progress endpoints.

GET  /users/{user_id}/progress/{course_id}  current record, 404 if none
POST /users/{user_id}/progress/{course_id}  apply {progressPercentage, timeSpent}

``timeSpent`` in the request is a delta in seconds added to the cumulative
total.  A POST whose completion counters could not all be updated still
returns 200 with the record, but flags ``partial: true`` and lists the
failed steps in ``warnings``.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from signlearn.api.dependencies import EngineDep, StoreDep, UserIdDep
from signlearn.core.errors import NotFoundError
from signlearn.models.progress import ProgressRecord

router = APIRouter(prefix="/users/{user_id}/progress", tags=["progress"])


class ProgressIn(BaseModel):
    progressPercentage: float
    timeSpent: float = 0


class ProgressOut(BaseModel):
    userId: str
    courseId: str
    progressPercentage: float
    timeSpent: float
    status: str
    lastActivityAt: int | None
    completedAt: int | None

    @classmethod
    def from_record(cls, r: ProgressRecord) -> ProgressOut:
        return cls(
            userId=str(r.user_id),
            courseId=r.course_id,
            progressPercentage=r.progress_percentage,
            timeSpent=r.time_spent,
            status=r.status,
            lastActivityAt=r.last_activity_at,
            completedAt=r.completed_at,
        )


class ProgressUpdateOut(BaseModel):
    message: str
    progress: ProgressOut
    justCompleted: bool
    partial: bool
    warnings: list[str]


@router.get("/{course_id}", response_model=ProgressOut)
async def get_progress(
    user_id: UserIdDep, course_id: str, store: StoreDep
) -> ProgressOut:
    record = await store.get_progress(user_id, course_id)
    if record is None:
        raise NotFoundError("Progress not found")
    return ProgressOut.from_record(record)


@router.post("/{course_id}", response_model=ProgressUpdateOut)
async def update_progress(
    user_id: UserIdDep,
    course_id: str,
    payload: ProgressIn,
    engine: EngineDep,
) -> ProgressUpdateOut:
    outcome = await engine.record_progress(
        user_id,
        course_id,
        progress_percentage=payload.progressPercentage,
        time_spent_delta=payload.timeSpent,
    )
    if outcome.partial:
        message = "Progress updated; completion counters partially applied"
    else:
        message = "Progress updated successfully"
    return ProgressUpdateOut(
        message=message,
        progress=ProgressOut.from_record(outcome.record),
        justCompleted=outcome.just_completed,
        partial=outcome.partial,
        warnings=list(outcome.failures),
    )
