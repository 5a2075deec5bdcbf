"""Course catalog and category endpoints.

GET /courses            filtered, paginated published courses
GET /courses/popular    top-N by enrollments
GET /courses/{id}       single course; records one view per call
GET /categories         static age-group metadata + live course counts
GET /categories/{id}    one age group with its courses
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from signlearn.api.dependencies import CatalogDep
from signlearn.models.catalog import Category, CourseQuery
from signlearn.models.course import Course

router = APIRouter(tags=["courses"])


class CourseAnalyticsOut(BaseModel):
    views: int
    enrollments: int
    completions: int


class CourseOut(BaseModel):
    id: str
    title: str
    description: str
    ageGroup: str
    category: str
    difficulty: str
    tags: list[str]
    videoUrl: str | None
    thumbnailUrl: str | None
    durationMinutes: int
    isPublished: bool
    createdAt: int
    analytics: CourseAnalyticsOut

    @classmethod
    def from_course(cls, c: Course) -> CourseOut:
        return cls(
            id=c.id,
            title=c.title,
            description=c.description,
            ageGroup=c.age_group,
            category=c.category,
            difficulty=c.difficulty,
            tags=list(c.tags),
            videoUrl=c.video_url,
            thumbnailUrl=c.thumbnail_url,
            durationMinutes=c.duration_minutes,
            isPublished=c.is_published,
            createdAt=c.created_at,
            analytics=CourseAnalyticsOut(
                views=c.analytics.views,
                enrollments=c.analytics.enrollments,
                completions=c.analytics.completions,
            ),
        )


class PaginationOut(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class CourseListOut(BaseModel):
    courses: list[CourseOut]
    pagination: PaginationOut


class CategoryOut(BaseModel):
    id: str
    title: str
    description: str
    color: str

    @classmethod
    def from_category(cls, c: Category) -> CategoryOut:
        return cls(id=c.id, title=c.title, description=c.description, color=c.color)


class CategoryCountOut(CategoryOut):
    courseCount: int


class CategoryCoursesOut(BaseModel):
    category: CategoryOut
    courses: list[CourseOut]


@router.get("/courses", response_model=CourseListOut)
async def list_courses(
    catalog: CatalogDep,
    ageGroup: str | None = None,
    category: str | None = None,
    difficulty: str | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 50,
) -> CourseListOut:
    result = await catalog.list_courses(
        CourseQuery(
            age_group=ageGroup,
            category=category,
            difficulty=difficulty,
            search=search or None,
        ),
        page=page,
        limit=limit,
    )
    return CourseListOut(
        courses=[CourseOut.from_course(c) for c in result.items],
        pagination=PaginationOut(
            total=result.total,
            page=result.page,
            limit=result.limit,
            pages=result.pages,
        ),
    )


# Registered before /courses/{course_id} so "popular" isn't taken as an id.
@router.get("/courses/popular", response_model=list[CourseOut])
async def popular_courses(catalog: CatalogDep, limit: int = 10) -> list[CourseOut]:
    return [CourseOut.from_course(c) for c in await catalog.popular_courses(limit)]


@router.get("/courses/{course_id}", response_model=CourseOut)
async def get_course(course_id: str, catalog: CatalogDep) -> CourseOut:
    return CourseOut.from_course(await catalog.get_course(course_id))


@router.get("/categories", response_model=list[CategoryCountOut])
async def list_categories(catalog: CatalogDep) -> list[CategoryCountOut]:
    return [
        CategoryCountOut(
            **CategoryOut.from_category(cc.category).model_dump(),
            courseCount=cc.course_count,
        )
        for cc in await catalog.categories()
    ]


@router.get("/categories/{age_group}", response_model=CategoryCoursesOut)
async def category_courses(age_group: str, catalog: CatalogDep) -> CategoryCoursesOut:
    category, courses = await catalog.courses_for_age_group(age_group)
    return CategoryCoursesOut(
        category=CategoryOut.from_category(category),
        courses=[CourseOut.from_course(c) for c in courses],
    )
