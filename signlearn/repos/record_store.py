"""Record Store contract and the in-memory implementation.

The consistency engine never locks anything itself.  Every guarantee it
relies on is a per-operation guarantee of the store:

  - upsert_progress() finds-or-creates the (user, course) row and applies the
    update as one step, so concurrent first writes produce one row and no
    time delta is lost.
  - add_enrollment() does the set-add and the conditional package counter
    increment as one unit.
  - increment_*() counters are linearizable (no lost updates).

InMemoryRecordStore meets these with a single lock that is never held
across an ``await``; PgRecordStore (pg_record_store.py) meets them with
row-level SQL inside a per-operation transaction.
"""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from typing import Literal, Protocol
from uuid import UUID

from signlearn.core.errors import ConflictError, NotFoundError
from signlearn.models.catalog import CourseQuery, PackageQuery
from signlearn.models.course import Course, Package
from signlearn.models.progress import (
    COMPLETED,
    ProgressRecord,
    ProgressStatus,
    next_status,
)
from signlearn.models.user import User

CourseCounter = Literal["views", "enrollments", "completions"]
PackageCounter = Literal["views", "enrollments"]

COURSE_COUNTERS: frozenset[str] = frozenset({"views", "enrollments", "completions"})
PACKAGE_COUNTERS: frozenset[str] = frozenset({"views", "enrollments"})

# Profile columns that update_profile() may write.  Identity (id, created_at),
# enrollments and counters are owned by dedicated atomic operations.
PROFILE_FIELDS: tuple[str, ...] = (
    "email",
    "password_hash",
    "name",
    "phone",
    "age_group",
    "user_type",
    "firebase_uid",
)


class RecordStore(Protocol):
    async def ping(self) -> None: ...

    # --- catalog ---
    async def add_course(self, course: Course) -> None: ...
    async def add_package(self, package: Package) -> None: ...
    async def get_course(self, course_id: str) -> Course | None: ...
    async def get_package(self, package_id: str) -> Package | None: ...
    async def list_courses(
        self, query: CourseQuery, *, offset: int, limit: int
    ) -> list[Course]: ...
    async def count_courses(self, query: CourseQuery) -> int: ...
    async def list_packages(
        self, query: PackageQuery, *, offset: int, limit: int | None
    ) -> list[Package]: ...
    async def count_packages(self, query: PackageQuery) -> int: ...
    async def popular_courses(self, limit: int) -> list[Course]: ...
    async def popular_packages(self, limit: int) -> list[Package]: ...

    # --- users ---
    async def add_user(self, user: User) -> None: ...
    async def get_user(self, user_id: UUID) -> User | None: ...
    async def get_user_by_email(self, email: str) -> User | None: ...
    async def get_user_by_firebase_uid(self, firebase_uid: str) -> User | None: ...
    async def update_profile(self, user: User) -> User | None: ...
    async def update_password_hash(self, user_id: UUID, password_hash: str) -> None: ...
    async def count_users(self) -> int: ...

    # --- consistency primitives ---
    async def get_progress(
        self, user_id: UUID, course_id: str
    ) -> ProgressRecord | None: ...
    async def upsert_progress(
        self,
        user_id: UUID,
        course_id: str,
        *,
        progress_percentage: float,
        time_spent_delta: float,
    ) -> tuple[ProgressRecord, ProgressStatus | None]: ...
    async def add_enrollment(self, user_id: UUID, package_id: str) -> bool: ...
    async def increment_course_counter(
        self, course_id: str, counter: CourseCounter
    ) -> bool: ...
    async def increment_package_counter(
        self, package_id: str, counter: PackageCounter
    ) -> bool: ...
    async def increment_user_completions(self, user_id: UUID) -> bool: ...


# ---------------------------------------------------------------------------
# Query helpers shared by the in-memory implementation
# ---------------------------------------------------------------------------


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def course_matches(course: Course, query: CourseQuery) -> bool:
    if not course.is_published:
        return False
    if query.age_group and course.age_group != query.age_group:
        return False
    if query.category and course.category != query.category:
        return False
    if query.difficulty and course.difficulty != query.difficulty:
        return False
    if query.search:
        return (
            _contains(course.title, query.search)
            or _contains(course.description, query.search)
            or any(_contains(tag, query.search) for tag in course.tags)
        )
    return True


def package_matches(package: Package, query: PackageQuery) -> bool:
    if not package.is_active:
        return False
    if query.age_group and query.age_group not in package.age_groups:
        return False
    if query.target_audience and package.target_audience != query.target_audience:
        return False
    if query.popular_only and not package.popular:
        return False
    if query.search:
        return (
            _contains(package.title, query.search)
            or _contains(package.description, query.search)
            or any(_contains(f, query.search) for f in package.features)
        )
    return True


def _course_sort_key(course: Course) -> tuple[int, int]:
    return (-course.analytics.enrollments, -course.created_at)


def _package_sort_key(package: Package) -> tuple[int, int]:
    return (-int(package.popular), -package.analytics.enrollments)


class InMemoryRecordStore:
    """Dict-backed store for dev and tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._courses: dict[str, Course] = {}
        self._packages: dict[str, Package] = {}
        self._users: dict[UUID, User] = {}
        self._by_email: dict[str, UUID] = {}
        self._by_firebase_uid: dict[str, UUID] = {}
        self._progress: dict[tuple[UUID, str], ProgressRecord] = {}

    def clear(self) -> None:
        with self._lock:
            self._courses.clear()
            self._packages.clear()
            self._users.clear()
            self._by_email.clear()
            self._by_firebase_uid.clear()
            self._progress.clear()

    async def ping(self) -> None:
        return None

    # --- catalog -----------------------------------------------------------

    async def add_course(self, course: Course) -> None:
        with self._lock:
            if course.id in self._courses:
                raise ConflictError(f"course {course.id!r} already exists")
            self._courses[course.id] = course

    async def add_package(self, package: Package) -> None:
        with self._lock:
            if package.id in self._packages:
                raise ConflictError(f"package {package.id!r} already exists")
            self._packages[package.id] = package

    async def get_course(self, course_id: str) -> Course | None:
        return self._courses.get(course_id)

    async def get_package(self, package_id: str) -> Package | None:
        return self._packages.get(package_id)

    async def list_courses(
        self, query: CourseQuery, *, offset: int, limit: int
    ) -> list[Course]:
        with self._lock:
            matched = [c for c in self._courses.values() if course_matches(c, query)]
        matched.sort(key=_course_sort_key)
        return matched[offset : offset + limit]

    async def count_courses(self, query: CourseQuery) -> int:
        with self._lock:
            return sum(1 for c in self._courses.values() if course_matches(c, query))

    async def list_packages(
        self, query: PackageQuery, *, offset: int, limit: int | None
    ) -> list[Package]:
        with self._lock:
            matched = [
                p for p in self._packages.values() if package_matches(p, query)
            ]
        matched.sort(key=_package_sort_key)
        if limit is None:
            return matched[offset:]
        return matched[offset : offset + limit]

    async def count_packages(self, query: PackageQuery) -> int:
        with self._lock:
            return sum(
                1 for p in self._packages.values() if package_matches(p, query)
            )

    async def popular_courses(self, limit: int) -> list[Course]:
        with self._lock:
            published = [c for c in self._courses.values() if c.is_published]
        published.sort(key=lambda c: -c.analytics.enrollments)
        return published[:limit]

    async def popular_packages(self, limit: int) -> list[Package]:
        with self._lock:
            active = [p for p in self._packages.values() if p.is_active]
        active.sort(key=lambda p: -p.analytics.enrollments)
        return active[:limit]

    # --- users -------------------------------------------------------------

    async def add_user(self, user: User) -> None:
        with self._lock:
            if user.email in self._by_email:
                raise ConflictError("email already exists")
            if user.firebase_uid and user.firebase_uid in self._by_firebase_uid:
                raise ConflictError("firebase uid already exists")
            self._users[user.id] = user
            self._by_email[user.email] = user.id
            if user.firebase_uid:
                self._by_firebase_uid[user.firebase_uid] = user.id

    async def get_user(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        user_id = self._by_email.get(email)
        return self._users.get(user_id) if user_id is not None else None

    async def get_user_by_firebase_uid(self, firebase_uid: str) -> User | None:
        user_id = self._by_firebase_uid.get(firebase_uid)
        return self._users.get(user_id) if user_id is not None else None

    async def update_profile(self, user: User) -> User | None:
        with self._lock:
            current = self._users.get(user.id)
            if current is None:
                return None

            owner = self._by_email.get(user.email)
            if owner is not None and owner != user.id:
                raise ConflictError("email already exists")
            if user.firebase_uid:
                uid_owner = self._by_firebase_uid.get(user.firebase_uid)
                if uid_owner is not None and uid_owner != user.id:
                    raise ConflictError("firebase uid already exists")

            updated = replace(
                current, **{name: getattr(user, name) for name in PROFILE_FIELDS}
            )
            self._by_email.pop(current.email, None)
            self._by_email[updated.email] = user.id
            if current.firebase_uid:
                self._by_firebase_uid.pop(current.firebase_uid, None)
            if updated.firebase_uid:
                self._by_firebase_uid[updated.firebase_uid] = user.id
            self._users[user.id] = updated
            return updated

    async def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        with self._lock:
            current = self._users.get(user_id)
            if current is not None:
                self._users[user_id] = replace(current, password_hash=password_hash)

    async def count_users(self) -> int:
        with self._lock:
            return sum(1 for u in self._users.values() if u.is_active)

    # --- consistency primitives --------------------------------------------

    async def get_progress(
        self, user_id: UUID, course_id: str
    ) -> ProgressRecord | None:
        return self._progress.get((user_id, course_id))

    async def upsert_progress(
        self,
        user_id: UUID,
        course_id: str,
        *,
        progress_percentage: float,
        time_spent_delta: float,
    ) -> tuple[ProgressRecord, ProgressStatus | None]:
        now = int(time.time())
        key = (user_id, course_id)
        with self._lock:
            current = self._progress.get(key)
            previous = current.status if current is not None else None
            if current is None:
                current = ProgressRecord(user_id=user_id, course_id=course_id)

            status = next_status(previous, progress_percentage)
            completed_at = current.completed_at
            if status == COMPLETED and previous != COMPLETED:
                completed_at = now

            updated = replace(
                current,
                progress_percentage=progress_percentage,
                time_spent=current.time_spent + time_spent_delta,
                status=status,
                last_activity_at=now,
                completed_at=completed_at,
            )
            self._progress[key] = updated
            return updated, previous

    async def add_enrollment(self, user_id: UUID, package_id: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            package = self._packages.get(package_id)
            if user is None:
                raise NotFoundError("User not found")
            if package is None:
                raise NotFoundError("Package not found")
            if package_id in user.enrolled_packages:
                return False
            self._users[user_id] = replace(
                user, enrolled_packages=user.enrolled_packages | {package_id}
            )
            self._packages[package_id] = replace(
                package,
                analytics=replace(
                    package.analytics,
                    enrollments=package.analytics.enrollments + 1,
                ),
            )
            return True

    async def increment_course_counter(
        self, course_id: str, counter: CourseCounter
    ) -> bool:
        if counter not in COURSE_COUNTERS:
            raise ValueError(f"unknown course counter {counter!r}")
        with self._lock:
            course = self._courses.get(course_id)
            if course is None:
                return False
            analytics = replace(
                course.analytics, **{counter: getattr(course.analytics, counter) + 1}
            )
            self._courses[course_id] = replace(course, analytics=analytics)
            return True

    async def increment_package_counter(
        self, package_id: str, counter: PackageCounter
    ) -> bool:
        if counter not in PACKAGE_COUNTERS:
            raise ValueError(f"unknown package counter {counter!r}")
        with self._lock:
            package = self._packages.get(package_id)
            if package is None:
                return False
            analytics = replace(
                package.analytics,
                **{counter: getattr(package.analytics, counter) + 1},
            )
            self._packages[package_id] = replace(package, analytics=analytics)
            return True

    async def increment_user_completions(self, user_id: UUID) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            self._users[user_id] = replace(
                user, total_courses_completed=user.total_courses_completed + 1
            )
            return True
