from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class CourseAnalytics:
    views: int = 0
    enrollments: int = 0
    completions: int = 0


@dataclass(frozen=True, slots=True)
class PackageAnalytics:
    views: int = 0
    enrollments: int = 0


@dataclass(frozen=True, slots=True)
class Course:
    id: str
    title: str
    age_group: str  # 1-4|5-10|15+
    category: str
    difficulty: str = "beginner"  # beginner|intermediate|advanced
    description: str = ""
    tags: tuple[str, ...] = ()
    video_url: str | None = None
    thumbnail_url: str | None = None
    duration_minutes: int = 0
    is_published: bool = True
    created_at: int = 0
    analytics: CourseAnalytics = field(default_factory=CourseAnalytics)

    @staticmethod
    def new(
        *,
        id: str,
        title: str,
        age_group: str,
        category: str,
        difficulty: str = "beginner",
        description: str = "",
        tags: tuple[str, ...] = (),
        duration_minutes: int = 0,
        is_published: bool = True,
    ) -> Course:
        return Course(
            id=id,
            title=title,
            age_group=age_group,
            category=category,
            difficulty=difficulty,
            description=description,
            tags=tags,
            duration_minutes=duration_minutes,
            is_published=is_published,
            created_at=int(time.time()),
        )


@dataclass(frozen=True, slots=True)
class Package:
    id: str
    title: str
    description: str = ""
    price: float = 0.0
    age_groups: frozenset[str] = frozenset()
    target_audience: str = "learners"  # learners|parents|educators
    course_ids: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    popular: bool = False
    is_active: bool = True
    created_at: int = 0
    analytics: PackageAnalytics = field(default_factory=PackageAnalytics)

    @staticmethod
    def new(
        *,
        id: str,
        title: str,
        description: str = "",
        price: float = 0.0,
        age_groups: frozenset[str] = frozenset(),
        target_audience: str = "learners",
        course_ids: tuple[str, ...] = (),
        features: tuple[str, ...] = (),
        popular: bool = False,
        is_active: bool = True,
    ) -> Package:
        return Package(
            id=id,
            title=title,
            description=description,
            price=price,
            age_groups=age_groups,
            target_audience=target_audience,
            course_ids=course_ids,
            features=features,
            popular=popular,
            is_active=is_active,
            created_at=int(time.time()),
        )
