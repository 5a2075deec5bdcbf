"""Catalog queries: filtered/paginated course and package listings.

List endpoints never record views; only a detail fetch does, once per
fetch, through the engine.  This keeps view counters proportional to
"someone opened this item", not to how many pages a client scrolled.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from signlearn.core.errors import NotFoundError, ValidationError
from signlearn.models.catalog import CATEGORIES, Category, CourseQuery, PackageQuery
from signlearn.models.course import Course, Package
from signlearn.services.progress_engine import ProgressEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass(frozen=True, slots=True)
class CategoryCount:
    category: Category
    course_count: int


def _check_paging(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("page must be >= 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")


def _category(age_group: str) -> Category | None:
    return next((c for c in CATEGORIES if c.id == age_group), None)


class CatalogService:
    def __init__(self, engine: ProgressEngine) -> None:
        self._engine = engine
        self._store = engine.store

    async def list_courses(
        self, query: CourseQuery, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> Page[Course]:
        _check_paging(page, limit)
        courses = await self._store.list_courses(
            query, offset=(page - 1) * limit, limit=limit
        )
        total = await self._store.count_courses(query)
        return Page(items=courses, total=total, page=page, limit=limit)

    async def list_packages(
        self, query: PackageQuery, *, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> Page[Package]:
        _check_paging(page, limit)
        packages = await self._store.list_packages(
            query, offset=(page - 1) * limit, limit=limit
        )
        total = await self._store.count_packages(query)
        return Page(items=packages, total=total, page=page, limit=limit)

    async def popular_courses(self, limit: int = 10) -> list[Course]:
        _check_paging(1, limit)
        return await self._store.popular_courses(limit)

    async def popular_packages(self, limit: int = 5) -> list[Package]:
        _check_paging(1, limit)
        return await self._store.popular_packages(limit)

    async def get_course(self, course_id: str) -> Course:
        course = await self._store.get_course(course_id)
        if course is None:
            raise NotFoundError("Course not found")

        await self._engine.record_view("course", course_id)
        logger.info("Course %s requested: %s", course_id, course.title)
        return await self._store.get_course(course_id) or course

    async def get_package(self, package_id: str) -> Package:
        package = await self._store.get_package(package_id)
        if package is None or not package.is_active:
            raise NotFoundError("Package not found")

        await self._engine.record_view("package", package_id)
        return await self._store.get_package(package_id) or package

    async def categories(self) -> list[CategoryCount]:
        return [
            CategoryCount(
                category=c,
                course_count=await self._store.count_courses(
                    CourseQuery(age_group=c.id)
                ),
            )
            for c in CATEGORIES
        ]

    async def courses_for_age_group(
        self, age_group: str
    ) -> tuple[Category, list[Course]]:
        category = _category(age_group)
        if category is None:
            raise NotFoundError("Invalid age group")

        query = CourseQuery(age_group=age_group)
        total = await self._store.count_courses(query)
        courses = await self._store.list_courses(query, offset=0, limit=max(total, 1))
        return category, courses
