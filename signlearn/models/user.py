from __future__ import annotations

import time
from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class User:
    id: UUID
    email: str
    password_hash: str | None = None  # None for externally-authenticated users
    name: str = ""
    phone: str | None = None
    age_group: str | None = None
    user_type: str = "learner"  # learner|parent|educator
    firebase_uid: str | None = None
    is_active: bool = True
    enrolled_packages: frozenset[str] = frozenset()
    total_courses_completed: int = 0
    created_at: int = 0

    @staticmethod
    def new(
        *,
        email: str,
        password_hash: str | None = None,
        name: str = "",
        phone: str | None = None,
        age_group: str | None = None,
        user_type: str = "learner",
        firebase_uid: str | None = None,
    ) -> User:
        # Identity and counters are only ever assigned here; profile merges
        # go through account_service.merge_profile().
        return User(
            id=uuid4(),
            email=email,
            password_hash=password_hash,
            name=name,
            phone=phone,
            age_group=age_group,
            user_type=user_type,
            firebase_uid=firebase_uid,
            created_at=int(time.time()),
        )
