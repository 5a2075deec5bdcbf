"""JSON auth endpoints (/auth/register, /auth/login).

Both return ``{message, user}``; the user never includes the password hash.
Session/token issuance is out of scope: clients keep the returned user id.
"""

from __future__ import annotations

from fastapi import APIRouter, status
from pydantic import BaseModel

from signlearn.api.dependencies import StoreDep
from signlearn.api.users import UserEnvelopeOut, UserOut
from signlearn.services import account_service

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginIn(BaseModel):
    email: str = ""
    password: str = ""


class RegisterIn(BaseModel):
    name: str
    email: str
    password: str
    phone: str | None = None
    ageGroup: str | None = None
    userType: str = "learner"


@router.post("/login", response_model=UserEnvelopeOut)
async def login(payload: LoginIn, store: StoreDep) -> UserEnvelopeOut:
    user = await account_service.authenticate(store, payload.email, payload.password)
    return UserEnvelopeOut(message="Login successful", user=UserOut.from_user(user))


@router.post(
    "/register",
    response_model=UserEnvelopeOut,
    status_code=status.HTTP_201_CREATED,
)
async def register(payload: RegisterIn, store: StoreDep) -> UserEnvelopeOut:
    user = await account_service.register(
        store,
        account_service.Registration(
            email=payload.email,
            password=payload.password,
            name=payload.name,
            phone=payload.phone,
            age_group=payload.ageGroup,
            user_type=payload.userType,
        ),
    )
    return UserEnvelopeOut(
        message="Registration successful", user=UserOut.from_user(user)
    )
