from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CourseQuery:
    """Filters for published courses.  None means "don't filter"."""

    age_group: str | None = None
    category: str | None = None
    difficulty: str | None = None
    search: str | None = None


@dataclass(frozen=True, slots=True)
class PackageQuery:
    """Filters for active packages."""

    age_group: str | None = None
    target_audience: str | None = None
    popular_only: bool = False
    search: str | None = None


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    title: str
    description: str
    color: str


# Static metadata for the age-group categories shown by the UI.
CATEGORIES: tuple[Category, ...] = (
    Category(
        id="1-4",
        title="Early Learners (Ages 1-4)",
        description="Foundational sign language through play and basic gestures",
        color="#FF9F4A",
    ),
    Category(
        id="5-10",
        title="Young Explorers (Ages 5-10)",
        description="Building vocabulary and simple conversations",
        color="#4A6FFF",
    ),
    Category(
        id="15+",
        title="Advanced Learners (Ages 15+)",
        description="Complex communication and everyday conversations",
        color="#36B37E",
    ),
)

AGE_GROUPS: frozenset[str] = frozenset(c.id for c in CATEGORIES)
