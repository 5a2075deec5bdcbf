"""Development catalog.

Loaded into the store at startup when SEED_CATALOG is on (the default for
the in-memory store).  Package ``course_ids`` must reference courses below;
enrollment bumps each listed course's enrollment counter.
"""

from __future__ import annotations

import logging

from signlearn.models.course import Course, Package
from signlearn.repos.record_store import RecordStore

logger = logging.getLogger(__name__)

SAMPLE_COURSES: tuple[Course, ...] = (
    Course.new(
        id="alphabet-basics",
        title="Alphabet Basics",
        description="Fingerspell A to Z with playful hand shapes",
        age_group="1-4",
        category="alphabet",
        tags=("alphabet", "fingerspelling"),
        duration_minutes=15,
    ),
    Course.new(
        id="family-signs",
        title="Family Signs",
        description="Signs for mom, dad, siblings and grandparents",
        age_group="1-4",
        category="vocabulary",
        tags=("family", "vocabulary"),
        duration_minutes=12,
    ),
    Course.new(
        id="numbers-1-20",
        title="Numbers 1 to 20",
        description="Count and sign numbers in everyday situations",
        age_group="5-10",
        category="numbers",
        tags=("numbers", "counting"),
        duration_minutes=20,
    ),
    Course.new(
        id="school-day",
        title="A Day at School",
        description="Classroom vocabulary and simple questions",
        age_group="5-10",
        category="conversation",
        difficulty="intermediate",
        tags=("school", "questions"),
        duration_minutes=25,
    ),
    Course.new(
        id="everyday-conversations",
        title="Everyday Conversations",
        description="Greetings, small talk and directions",
        age_group="15+",
        category="conversation",
        difficulty="intermediate",
        tags=("greetings", "directions"),
        duration_minutes=40,
    ),
    Course.new(
        id="workplace-signing",
        title="Signing at Work",
        description="Meetings, schedules and workplace etiquette",
        age_group="15+",
        category="conversation",
        difficulty="advanced",
        tags=("work", "etiquette"),
        duration_minutes=45,
    ),
)

SAMPLE_PACKAGES: tuple[Package, ...] = (
    Package.new(
        id="little-hands",
        title="Little Hands Starter",
        description="First signs for toddlers and their parents",
        price=0.0,
        age_groups=frozenset({"1-4"}),
        target_audience="parents",
        course_ids=("alphabet-basics", "family-signs"),
        features=("Video lessons", "Printable flashcards"),
        popular=True,
    ),
    Package.new(
        id="young-explorers",
        title="Young Explorers Bundle",
        description="Numbers and classroom signing for school kids",
        price=9.99,
        age_groups=frozenset({"5-10"}),
        target_audience="learners",
        course_ids=("numbers-1-20", "school-day"),
        features=("Video lessons", "Progress badges"),
    ),
    Package.new(
        id="fluent-communicator",
        title="Fluent Communicator",
        description="Conversation practice for teens and adults",
        price=19.99,
        age_groups=frozenset({"15+"}),
        target_audience="learners",
        course_ids=("everyday-conversations", "workplace-signing"),
        features=("Live practice prompts", "Certificate"),
        popular=True,
    ),
)


async def seed_catalog(store: RecordStore) -> None:
    """Add the sample catalog.  Safe to call on an already-seeded store."""
    added = 0
    for course in SAMPLE_COURSES:
        if await store.get_course(course.id) is None:
            await store.add_course(course)
            added += 1
    for package in SAMPLE_PACKAGES:
        if await store.get_package(package.id) is None:
            await store.add_package(package)
            added += 1
    logger.info("Catalog seeded  added=%d", added)
