"""Enrollment and progress consistency engine.

Applies Enroll, RecordProgress and RecordView events to a RecordStore so
that the derived counters stay correct when the same event is delivered
twice or two events for the same key race:

  - Enrollment is counted once per (user, package); repeats are no-ops.
  - A course completion is counted once per ProgressRecord transition into
    ``completed``; re-submitting 100% changes no counter.
  - Views are counted exactly once per call.

The engine holds no locks.  It relies on the per-operation atomicity of
the store (see signlearn/repos/record_store.py).

Follow-up counter increments are best-effort: if one fails after the
primary write succeeded, the outcome carries the failure and is reported
as partial.  Nothing is retried here.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Literal
from uuid import UUID

from signlearn.core.errors import NotFoundError, StoreError, ValidationError
from signlearn.core.metrics import (
    COMPLETIONS,
    ENROLLMENTS,
    PARTIAL_OUTCOMES,
    PROGRESS_UPDATES,
    VIEWS,
)
from signlearn.models.course import Package
from signlearn.models.progress import COMPLETED, ProgressRecord
from signlearn.repos.record_store import RecordStore

logger = logging.getLogger(__name__)

EntityKind = Literal["course", "package"]


@dataclass(frozen=True, slots=True)
class EnrollmentOutcome:
    package: Package
    newly_enrolled: bool
    failures: tuple[str, ...] = ()

    @property
    def partial(self) -> bool:
        return bool(self.failures)


@dataclass(frozen=True, slots=True)
class ProgressOutcome:
    record: ProgressRecord
    just_completed: bool
    failures: tuple[str, ...] = ()

    @property
    def partial(self) -> bool:
        return bool(self.failures)


class ProgressEngine:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def _follow_up(
        self, step: str, op: Awaitable[bool], missing: str
    ) -> str | None:
        """Run one counter increment; describe the failure instead of raising."""
        try:
            found = await op
        except StoreError as e:
            PARTIAL_OUTCOMES.labels(step=step).inc()
            logger.error("Counter increment failed  step=%s error=%s", step, e.detail)
            return f"{step}: store error"
        if not found:
            PARTIAL_OUTCOMES.labels(step=step).inc()
            logger.warning(
                "Counter increment skipped  step=%s reason=%s", step, missing
            )
            return f"{step}: {missing}"
        return None

    # ------------------------------------------------------------------
    # Enroll
    # ------------------------------------------------------------------

    async def enroll(self, user_id: UUID, package_id: str) -> EnrollmentOutcome:
        user = await self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        package = await self.store.get_package(package_id)
        if package is None or not package.is_active:
            raise NotFoundError("Package not found")

        newly_enrolled = await self.store.add_enrollment(user_id, package_id)
        if not newly_enrolled:
            ENROLLMENTS.labels(result="repeat").inc()
            logger.info(
                "Repeat enrollment ignored  user_id=%s package_id=%s",
                user_id,
                package_id,
                extra={"user_id": str(user_id), "package_id": package_id},
            )
            return EnrollmentOutcome(package=package, newly_enrolled=False)

        ENROLLMENTS.labels(result="new").inc()
        logger.info(
            "User enrolled  user_id=%s package_id=%s",
            user_id,
            package_id,
            extra={"user_id": str(user_id), "package_id": package_id},
        )

        failures: list[str] = []
        for course_id in package.course_ids:
            failure = await self._follow_up(
                "course_enrollments",
                self.store.increment_course_counter(course_id, "enrollments"),
                f"course {course_id} not found",
            )
            if failure:
                failures.append(failure)

        refreshed = await self.store.get_package(package_id)
        return EnrollmentOutcome(
            package=refreshed or package,
            newly_enrolled=True,
            failures=tuple(failures),
        )

    # ------------------------------------------------------------------
    # RecordProgress
    # ------------------------------------------------------------------

    async def record_progress(
        self,
        user_id: UUID,
        course_id: str,
        progress_percentage: float,
        time_spent_delta: float = 0,
    ) -> ProgressOutcome:
        if not 0 <= progress_percentage <= 100:
            raise ValidationError("progressPercentage must be between 0 and 100")
        if time_spent_delta < 0:
            raise ValidationError("timeSpent must not be negative")
        if not math.isfinite(time_spent_delta):
            raise ValidationError("timeSpent must be a finite number")

        # Primary write.  Missing user/course never blocks it.
        record, previous = await self.store.upsert_progress(
            user_id,
            course_id,
            progress_percentage=progress_percentage,
            time_spent_delta=time_spent_delta,
        )
        PROGRESS_UPDATES.labels(status=record.status).inc()

        just_completed = record.status == COMPLETED and previous != COMPLETED
        if not just_completed:
            logger.debug(
                "Progress updated  user_id=%s course_id=%s pct=%s status=%s",
                user_id,
                course_id,
                record.progress_percentage,
                record.status,
            )
            return ProgressOutcome(record=record, just_completed=False)

        COMPLETIONS.inc()
        logger.info(
            "Course completed  user_id=%s course_id=%s time_spent=%s",
            user_id,
            course_id,
            record.time_spent,
            extra={"user_id": str(user_id), "course_id": course_id},
        )

        failures = [
            f
            for f in (
                await self._follow_up(
                    "user_completions",
                    self.store.increment_user_completions(user_id),
                    "user not found",
                ),
                await self._follow_up(
                    "course_completions",
                    self.store.increment_course_counter(course_id, "completions"),
                    "course not found",
                ),
            )
            if f
        ]
        return ProgressOutcome(
            record=record, just_completed=True, failures=tuple(failures)
        )

    # ------------------------------------------------------------------
    # RecordView
    # ------------------------------------------------------------------

    async def record_view(self, kind: EntityKind, entity_id: str) -> bool:
        if kind == "course":
            found = await self.store.increment_course_counter(entity_id, "views")
        elif kind == "package":
            found = await self.store.increment_package_counter(entity_id, "views")
        else:
            raise ValueError(f"unknown entity kind {kind!r}")
        if found:
            VIEWS.labels(kind=kind).inc()
        return found
