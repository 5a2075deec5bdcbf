"""SQLAlchemy table definitions.

These map to the frozen dataclass domain models in signlearn/models/.
PgRecordStore converts between rows and dataclasses.

Counters live as plain integer columns so the store can update them with
``SET x = x + 1`` (no read-modify-write in Python).  Enrollment is its own
table with a composite primary key, which makes "add to set" an
``INSERT ... ON CONFLICT DO NOTHING``.
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from signlearn.db.engine import Base


class CourseRow(Base):
    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    age_group: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    difficulty: Mapped[str] = mapped_column(
        String(32), nullable=False, default="beginner"
    )  # beginner|intermediate|advanced
    tags: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=[])
    video_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    enrollments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class PackageRow(Base):
    __tablename__ = "packages"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    age_groups: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=[]
    )
    target_audience: Mapped[str] = mapped_column(
        String(32), nullable=False, default="learners"
    )
    course_ids: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=[]
    )
    features: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=[]
    )
    popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    enrollments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    age_group: Mapped[str | None] = mapped_column(String(16), nullable=True)
    user_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default="learner"
    )  # learner|parent|educator
    firebase_uid: Mapped[str | None] = mapped_column(
        String(128), unique=True, nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    total_courses_completed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    created_at: Mapped[int] = mapped_column(Integer, nullable=False)


class EnrollmentRow(Base):
    __tablename__ = "enrollments"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), primary_key=True
    )
    package_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("packages.id"), primary_key=True
    )
    enrolled_at: Mapped[int] = mapped_column(Integer, nullable=False)


class ProgressRow(Base):
    __tablename__ = "progress_records"
    __table_args__ = (
        CheckConstraint(
            "progress_percentage BETWEEN 0 AND 100", name="ck_progress_percentage"
        ),
        CheckConstraint("time_spent >= 0", name="ck_progress_time_spent"),
    )

    # Composite PK is the uniqueness guarantee for find-or-create.
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    course_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    progress_percentage: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0
    )
    time_spent: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="not_started"
    )  # not_started|in_progress|completed
    last_activity_at: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completed_at: Mapped[int | None] = mapped_column(Integer, nullable=True)
