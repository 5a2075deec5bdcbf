"""create catalog and learner tables

Revision ID: 3b7e1c9d2a40
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b7e1c9d2a40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _counter(name: str) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=False, server_default="0")


def upgrade() -> None:
    op.create_table(
        "courses",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("age_group", sa.String(length=16), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column(
            "difficulty",
            sa.String(length=32),
            nullable=False,
            server_default="beginner",
        ),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.String()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("video_url", sa.Text(), nullable=True),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.Integer(), nullable=False),
        _counter("views"),
        _counter("enrollments"),
        _counter("completions"),
    )
    op.create_index("ix_courses_age_group", "courses", ["age_group"])

    op.create_table(
        "packages",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column(
            "age_groups",
            postgresql.ARRAY(sa.String()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "target_audience",
            sa.String(length=32),
            nullable=False,
            server_default="learners",
        ),
        sa.Column(
            "course_ids",
            postgresql.ARRAY(sa.String()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "features",
            postgresql.ARRAY(sa.String()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("popular", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.Integer(), nullable=False),
        _counter("views"),
        _counter("enrollments"),
    )

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("age_group", sa.String(length=16), nullable=True),
        sa.Column(
            "user_type", sa.String(length=32), nullable=False, server_default="learner"
        ),
        sa.Column("firebase_uid", sa.String(length=128), nullable=True, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        _counter("total_courses_completed"),
        sa.Column("created_at", sa.Integer(), nullable=False),
    )

    op.create_table(
        "enrollments",
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id"),
            primary_key=True,
        ),
        sa.Column(
            "package_id",
            sa.String(length=128),
            sa.ForeignKey("packages.id"),
            primary_key=True,
        ),
        sa.Column("enrolled_at", sa.Integer(), nullable=False),
    )

    op.create_table(
        "progress_records",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("course_id", sa.String(length=128), primary_key=True),
        sa.Column(
            "progress_percentage", sa.Float(), nullable=False, server_default="0"
        ),
        sa.Column("time_spent", sa.Float(), nullable=False, server_default="0"),
        sa.Column(
            "status", sa.String(length=32), nullable=False, server_default="not_started"
        ),
        sa.Column("last_activity_at", sa.Integer(), nullable=True),
        sa.Column("completed_at", sa.Integer(), nullable=True),
        sa.CheckConstraint(
            "progress_percentage BETWEEN 0 AND 100", name="ck_progress_percentage"
        ),
        sa.CheckConstraint("time_spent >= 0", name="ck_progress_time_spent"),
    )


def downgrade() -> None:
    op.drop_table("progress_records")
    op.drop_table("enrollments")
    op.drop_table("users")
    op.drop_table("packages")
    op.drop_index("ix_courses_age_group", table_name="courses")
    op.drop_table("courses")
