"""User profile and enrollment endpoints.

POST /users                                upsert by firebaseUid or email
GET  /users/{user_id}                      profile
POST /users/{user_id}/enroll/{package_id}  enroll (idempotent)
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from signlearn.api.dependencies import EngineDep, StoreDep, UserIdDep
from signlearn.api.packages import PackageOut
from signlearn.models.user import User
from signlearn.services import account_service

router = APIRouter(prefix="/users", tags=["users"])


class UserProgressOut(BaseModel):
    totalCoursesCompleted: int


class UserOut(BaseModel):
    """Public view of a user.  Never carries the password hash."""

    id: str
    email: str
    name: str
    phone: str | None
    ageGroup: str | None
    userType: str
    firebaseUid: str | None
    isActive: bool
    enrolledPackages: list[str]
    progress: UserProgressOut
    createdAt: int

    @classmethod
    def from_user(cls, u: User) -> UserOut:
        return cls(
            id=str(u.id),
            email=u.email,
            name=u.name,
            phone=u.phone,
            ageGroup=u.age_group,
            userType=u.user_type,
            firebaseUid=u.firebase_uid,
            isActive=u.is_active,
            enrolledPackages=sorted(u.enrolled_packages),
            progress=UserProgressOut(totalCoursesCompleted=u.total_courses_completed),
            createdAt=u.created_at,
        )


class UserUpsertIn(BaseModel):
    email: str | None = None
    firebaseUid: str | None = None
    name: str | None = None
    phone: str | None = None
    ageGroup: str | None = None
    userType: str | None = None
    password: str | None = None


class UserEnvelopeOut(BaseModel):
    message: str
    user: UserOut


class EnrollmentOut(BaseModel):
    message: str
    package: PackageOut
    newlyEnrolled: bool
    partial: bool
    warnings: list[str]


@router.post("", response_model=UserEnvelopeOut)
async def upsert_user(
    payload: UserUpsertIn, store: StoreDep, response: Response
) -> UserEnvelopeOut:
    user, created = await account_service.upsert_profile(
        store,
        account_service.ProfileUpdate(
            email=payload.email,
            firebase_uid=payload.firebaseUid,
            name=payload.name,
            phone=payload.phone,
            age_group=payload.ageGroup,
            user_type=payload.userType,
            password=payload.password,
        ),
    )
    if created:
        response.status_code = status.HTTP_201_CREATED
        message = "User created successfully"
    else:
        message = "User updated successfully"
    return UserEnvelopeOut(message=message, user=UserOut.from_user(user))


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: UserIdDep, store: StoreDep) -> UserOut:
    return UserOut.from_user(await account_service.get_user(store, user_id))


@router.post("/{user_id}/enroll/{package_id}", response_model=EnrollmentOut)
async def enroll(
    user_id: UserIdDep, package_id: str, engine: EngineDep
) -> EnrollmentOut:
    outcome = await engine.enroll(user_id, package_id)
    if outcome.partial:
        message = "Enrolled in package; some course counters were not updated"
    elif outcome.newly_enrolled:
        message = "Successfully enrolled in package"
    else:
        message = "Already enrolled in package"
    return EnrollmentOut(
        message=message,
        package=PackageOut.from_package(outcome.package),
        newlyEnrolled=outcome.newly_enrolled,
        partial=outcome.partial,
        warnings=list(outcome.failures),
    )
