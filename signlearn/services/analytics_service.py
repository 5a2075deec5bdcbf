from __future__ import annotations

from dataclasses import dataclass

from signlearn.models.catalog import CourseQuery, PackageQuery
from signlearn.models.course import Course, Package
from signlearn.repos.record_store import RecordStore


@dataclass(frozen=True, slots=True)
class Dashboard:
    total_courses: int
    total_packages: int
    total_users: int
    popular_courses: list[Course]
    popular_packages: list[Package]


async def dashboard(store: RecordStore) -> Dashboard:
    """Counts of published courses, active packages and active users."""
    return Dashboard(
        total_courses=await store.count_courses(CourseQuery()),
        total_packages=await store.count_packages(PackageQuery()),
        total_users=await store.count_users(),
        popular_courses=await store.popular_courses(5),
        popular_packages=await store.popular_packages(3),
    )
