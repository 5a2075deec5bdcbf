"""PostgreSQL implementation of RecordStore.

Every public method opens its own session and transaction; no transaction
spans more than one store operation.  Atomicity per operation comes from:

  - ``INSERT ... ON CONFLICT DO NOTHING`` for find-or-create and set-add
  - ``SELECT ... FOR UPDATE`` to serialize concurrent progress updates
  - ``UPDATE ... SET counter = counter + 1`` for counters
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy import ColumnElement, and_, func, literal, or_, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from signlearn.core.errors import ConflictError, NotFoundError, StoreError
from signlearn.db.tables import (
    CourseRow,
    EnrollmentRow,
    PackageRow,
    ProgressRow,
    UserRow,
)
from signlearn.models.catalog import CourseQuery, PackageQuery
from signlearn.models.course import Course, CourseAnalytics, Package, PackageAnalytics
from signlearn.models.progress import (
    COMPLETED,
    ProgressRecord,
    ProgressStatus,
    next_status,
)
from signlearn.models.user import User
from signlearn.repos.record_store import (
    COURSE_COUNTERS,
    PACKAGE_COUNTERS,
    PROFILE_FIELDS,
    CourseCounter,
    PackageCounter,
)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _any_element_ilike(column, pattern: str) -> ColumnElement[bool]:
    """True when any single array element matches, like the in-memory store."""
    element = func.unnest(column).column_valued("element")
    return select(literal(1)).where(element.ilike(pattern, escape="\\")).exists()


def _course_filters(query: CourseQuery) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = [CourseRow.is_published.is_(True)]
    if query.age_group:
        clauses.append(CourseRow.age_group == query.age_group)
    if query.category:
        clauses.append(CourseRow.category == query.category)
    if query.difficulty:
        clauses.append(CourseRow.difficulty == query.difficulty)
    if query.search:
        pattern = _like_pattern(query.search)
        clauses.append(
            or_(
                CourseRow.title.ilike(pattern, escape="\\"),
                CourseRow.description.ilike(pattern, escape="\\"),
                _any_element_ilike(CourseRow.tags, pattern),
            )
        )
    return clauses


def _package_filters(query: PackageQuery) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = [PackageRow.is_active.is_(True)]
    if query.age_group:
        clauses.append(PackageRow.age_groups.any(query.age_group))
    if query.target_audience:
        clauses.append(PackageRow.target_audience == query.target_audience)
    if query.popular_only:
        clauses.append(PackageRow.popular.is_(True))
    if query.search:
        pattern = _like_pattern(query.search)
        clauses.append(
            or_(
                PackageRow.title.ilike(pattern, escape="\\"),
                PackageRow.description.ilike(pattern, escape="\\"),
                _any_element_ilike(PackageRow.features, pattern),
            )
        )
    return clauses


class PgRecordStore:
    """Satisfies the RecordStore Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """One session + transaction per store operation.

        Commits on success, rolls back on exception, and translates
        driver/ORM failures into the domain taxonomy.
        """
        try:
            async with self._session_factory() as session, session.begin():
                yield session
        except IntegrityError as e:
            raise ConflictError("duplicate key", detail=str(e.orig)) from e
        except (SQLAlchemyError, OSError) as e:
            raise StoreError("record store unavailable", detail=str(e)) from e

    async def ping(self) -> None:
        async with self._transaction() as session:
            await session.execute(text("SELECT 1"))

    # --- catalog -----------------------------------------------------------

    async def add_course(self, course: Course) -> None:
        async with self._transaction() as session:
            session.add(
                CourseRow(
                    id=course.id,
                    title=course.title,
                    description=course.description,
                    age_group=course.age_group,
                    category=course.category,
                    difficulty=course.difficulty,
                    tags=list(course.tags),
                    video_url=course.video_url,
                    thumbnail_url=course.thumbnail_url,
                    duration_minutes=course.duration_minutes,
                    is_published=course.is_published,
                    created_at=course.created_at,
                    views=course.analytics.views,
                    enrollments=course.analytics.enrollments,
                    completions=course.analytics.completions,
                )
            )

    async def add_package(self, package: Package) -> None:
        async with self._transaction() as session:
            session.add(
                PackageRow(
                    id=package.id,
                    title=package.title,
                    description=package.description,
                    price=package.price,
                    age_groups=sorted(package.age_groups),
                    target_audience=package.target_audience,
                    course_ids=list(package.course_ids),
                    features=list(package.features),
                    popular=package.popular,
                    is_active=package.is_active,
                    created_at=package.created_at,
                    views=package.analytics.views,
                    enrollments=package.analytics.enrollments,
                )
            )

    async def get_course(self, course_id: str) -> Course | None:
        async with self._transaction() as session:
            row = await session.get(CourseRow, course_id)
            return _row_to_course(row) if row is not None else None

    async def get_package(self, package_id: str) -> Package | None:
        async with self._transaction() as session:
            row = await session.get(PackageRow, package_id)
            return _row_to_package(row) if row is not None else None

    async def list_courses(
        self, query: CourseQuery, *, offset: int, limit: int
    ) -> list[Course]:
        stmt = (
            select(CourseRow)
            .where(and_(*_course_filters(query)))
            .order_by(CourseRow.enrollments.desc(), CourseRow.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        async with self._transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [_row_to_course(r) for r in rows]

    async def count_courses(self, query: CourseQuery) -> int:
        stmt = select(func.count()).select_from(CourseRow).where(
            and_(*_course_filters(query))
        )
        async with self._transaction() as session:
            return (await session.execute(stmt)).scalar_one()

    async def list_packages(
        self, query: PackageQuery, *, offset: int, limit: int | None
    ) -> list[Package]:
        stmt = (
            select(PackageRow)
            .where(and_(*_package_filters(query)))
            .order_by(PackageRow.popular.desc(), PackageRow.enrollments.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [_row_to_package(r) for r in rows]

    async def count_packages(self, query: PackageQuery) -> int:
        stmt = select(func.count()).select_from(PackageRow).where(
            and_(*_package_filters(query))
        )
        async with self._transaction() as session:
            return (await session.execute(stmt)).scalar_one()

    async def popular_courses(self, limit: int) -> list[Course]:
        stmt = (
            select(CourseRow)
            .where(CourseRow.is_published.is_(True))
            .order_by(CourseRow.enrollments.desc())
            .limit(limit)
        )
        async with self._transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [_row_to_course(r) for r in rows]

    async def popular_packages(self, limit: int) -> list[Package]:
        stmt = (
            select(PackageRow)
            .where(PackageRow.is_active.is_(True))
            .order_by(PackageRow.enrollments.desc())
            .limit(limit)
        )
        async with self._transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [_row_to_package(r) for r in rows]

    # --- users -------------------------------------------------------------

    async def add_user(self, user: User) -> None:
        async with self._transaction() as session:
            session.add(
                UserRow(
                    id=user.id,
                    email=user.email,
                    password_hash=user.password_hash,
                    name=user.name,
                    phone=user.phone,
                    age_group=user.age_group,
                    user_type=user.user_type,
                    firebase_uid=user.firebase_uid,
                    is_active=user.is_active,
                    total_courses_completed=user.total_courses_completed,
                    created_at=user.created_at,
                )
            )

    async def _load_user(self, session: AsyncSession, row: UserRow) -> User:
        stmt = select(EnrollmentRow.package_id).where(EnrollmentRow.user_id == row.id)
        package_ids = (await session.execute(stmt)).scalars().all()
        return _row_to_user(row, frozenset(package_ids))

    async def get_user(self, user_id: UUID) -> User | None:
        async with self._transaction() as session:
            row = await session.get(UserRow, user_id)
            return await self._load_user(session, row) if row is not None else None

    async def get_user_by_email(self, email: str) -> User | None:
        stmt = select(UserRow).where(UserRow.email == email)
        async with self._transaction() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            return await self._load_user(session, row) if row is not None else None

    async def get_user_by_firebase_uid(self, firebase_uid: str) -> User | None:
        stmt = select(UserRow).where(UserRow.firebase_uid == firebase_uid)
        async with self._transaction() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            return await self._load_user(session, row) if row is not None else None

    async def update_profile(self, user: User) -> User | None:
        stmt = (
            update(UserRow)
            .where(UserRow.id == user.id)
            .values({name: getattr(user, name) for name in PROFILE_FIELDS})
            .returning(UserRow)
        )
        async with self._transaction() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            return await self._load_user(session, row) if row is not None else None

    async def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        stmt = (
            update(UserRow)
            .where(UserRow.id == user_id)
            .values(password_hash=password_hash)
        )
        async with self._transaction() as session:
            await session.execute(stmt)

    async def count_users(self) -> int:
        stmt = select(func.count()).select_from(UserRow).where(
            UserRow.is_active.is_(True)
        )
        async with self._transaction() as session:
            return (await session.execute(stmt)).scalar_one()

    # --- consistency primitives --------------------------------------------

    async def get_progress(
        self, user_id: UUID, course_id: str
    ) -> ProgressRecord | None:
        async with self._transaction() as session:
            row = await session.get(ProgressRow, (user_id, course_id))
            return _row_to_progress(row) if row is not None else None

    async def upsert_progress(
        self,
        user_id: UUID,
        course_id: str,
        *,
        progress_percentage: float,
        time_spent_delta: float,
    ) -> tuple[ProgressRecord, ProgressStatus | None]:
        now = int(time.time())
        create = (
            pg_insert(ProgressRow)
            .values(user_id=user_id, course_id=course_id)
            .on_conflict_do_nothing(index_elements=["user_id", "course_id"])
        )
        lock = (
            select(ProgressRow)
            .where(ProgressRow.user_id == user_id, ProgressRow.course_id == course_id)
            .with_for_update()
        )
        async with self._transaction() as session:
            created = (await session.execute(create)).rowcount == 1
            row = (await session.execute(lock)).scalar_one()

            previous: ProgressStatus | None = None
            if not created:
                previous = row.status  # type: ignore[assignment]
            status = next_status(previous, progress_percentage)

            row.progress_percentage = progress_percentage
            row.time_spent = row.time_spent + time_spent_delta
            row.status = status
            row.last_activity_at = now
            if status == COMPLETED and previous != COMPLETED:
                row.completed_at = now
            await session.flush()
            return _row_to_progress(row), previous

    async def add_enrollment(self, user_id: UUID, package_id: str) -> bool:
        async with self._transaction() as session:
            if await session.get(UserRow, user_id) is None:
                raise NotFoundError("User not found")
            if await session.get(PackageRow, package_id) is None:
                raise NotFoundError("Package not found")

            inserted = await session.execute(
                pg_insert(EnrollmentRow)
                .values(
                    user_id=user_id,
                    package_id=package_id,
                    enrolled_at=int(time.time()),
                )
                .on_conflict_do_nothing(index_elements=["user_id", "package_id"])
            )
            if inserted.rowcount == 0:
                return False

            await session.execute(
                update(PackageRow)
                .where(PackageRow.id == package_id)
                .values(enrollments=PackageRow.enrollments + 1)
            )
            return True

    async def increment_course_counter(
        self, course_id: str, counter: CourseCounter
    ) -> bool:
        if counter not in COURSE_COUNTERS:
            raise ValueError(f"unknown course counter {counter!r}")
        column = getattr(CourseRow, counter)
        stmt = (
            update(CourseRow)
            .where(CourseRow.id == course_id)
            .values({counter: column + 1})
        )
        async with self._transaction() as session:
            return (await session.execute(stmt)).rowcount == 1

    async def increment_package_counter(
        self, package_id: str, counter: PackageCounter
    ) -> bool:
        if counter not in PACKAGE_COUNTERS:
            raise ValueError(f"unknown package counter {counter!r}")
        column = getattr(PackageRow, counter)
        stmt = (
            update(PackageRow)
            .where(PackageRow.id == package_id)
            .values({counter: column + 1})
        )
        async with self._transaction() as session:
            return (await session.execute(stmt)).rowcount == 1

    async def increment_user_completions(self, user_id: UUID) -> bool:
        stmt = (
            update(UserRow)
            .where(UserRow.id == user_id)
            .values(total_courses_completed=UserRow.total_courses_completed + 1)
        )
        async with self._transaction() as session:
            return (await session.execute(stmt)).rowcount == 1


def _row_to_course(row: CourseRow) -> Course:
    return Course(
        id=row.id,
        title=row.title,
        description=row.description or "",
        age_group=row.age_group,
        category=row.category,
        difficulty=row.difficulty,
        tags=tuple(row.tags) if row.tags else (),
        video_url=row.video_url,
        thumbnail_url=row.thumbnail_url,
        duration_minutes=row.duration_minutes,
        is_published=row.is_published,
        created_at=row.created_at,
        analytics=CourseAnalytics(
            views=row.views, enrollments=row.enrollments, completions=row.completions
        ),
    )


def _row_to_package(row: PackageRow) -> Package:
    return Package(
        id=row.id,
        title=row.title,
        description=row.description or "",
        price=row.price,
        age_groups=frozenset(row.age_groups or ()),
        target_audience=row.target_audience,
        course_ids=tuple(row.course_ids) if row.course_ids else (),
        features=tuple(row.features) if row.features else (),
        popular=row.popular,
        is_active=row.is_active,
        created_at=row.created_at,
        analytics=PackageAnalytics(views=row.views, enrollments=row.enrollments),
    )


def _row_to_user(row: UserRow, enrolled_packages: frozenset[str]) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        name=row.name or "",
        phone=row.phone,
        age_group=row.age_group,
        user_type=row.user_type,
        firebase_uid=row.firebase_uid,
        is_active=row.is_active,
        enrolled_packages=enrolled_packages,
        total_courses_completed=row.total_courses_completed,
        created_at=row.created_at,
    )


def _row_to_progress(row: ProgressRow) -> ProgressRecord:
    return ProgressRecord(
        user_id=row.user_id,
        course_id=row.course_id,
        progress_percentage=row.progress_percentage,
        time_spent=row.time_spent,
        status=row.status,  # type: ignore[arg-type]
        last_activity_at=row.last_activity_at,
        completed_at=row.completed_at,
    )
