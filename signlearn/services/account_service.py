from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from signlearn.core.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from signlearn.core.metrics import LOGIN_ATTEMPTS
from signlearn.models.catalog import AGE_GROUPS
from signlearn.models.user import User
from signlearn.repos.record_store import RecordStore

logger = logging.getLogger(__name__)

# Argon2 hash strings encode parameters + salt
_ph = PasswordHasher()

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8
USER_TYPES = frozenset({"learner", "parent", "educator"})


@dataclass(frozen=True, slots=True)
class Registration:
    email: str
    password: str
    name: str
    phone: str | None = None
    age_group: str | None = None
    user_type: str = "learner"


@dataclass(frozen=True, slots=True)
class ProfileUpdate:
    """Fields accepted by upsert.  None means "leave unchanged"."""

    email: str | None = None
    firebase_uid: str | None = None
    name: str | None = None
    phone: str | None = None
    age_group: str | None = None
    user_type: str | None = None
    password: str | None = None


def hash_password(plain_password: str) -> str:
    if not plain_password:
        raise ValueError("password must be non-empty")
    return _ph.hash(plain_password)


def verify_password(plain_password: str, password_hash: str | None) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return _ph.verify(password_hash, plain_password)
    except (VerifyMismatchError, VerificationError, InvalidHash):
        return False


def normalize_email(email: str) -> str:
    email = email.strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


def _check_profile(age_group: str | None, user_type: str | None) -> None:
    if age_group is not None and age_group not in AGE_GROUPS:
        raise ValidationError(f"ageGroup must be one of {sorted(AGE_GROUPS)}")
    if user_type is not None and user_type not in USER_TYPES:
        raise ValidationError(f"userType must be one of {sorted(USER_TYPES)}")


async def register(store: RecordStore, reg: Registration) -> User:
    email = normalize_email(reg.email)
    name = reg.name.strip()
    if not name:
        raise ValidationError("Name is required")
    _check_password(reg.password)
    _check_profile(reg.age_group, reg.user_type)

    if await store.get_user_by_email(email) is not None:
        logger.warning("Duplicate registration rejected email=%s", email)
        raise ConflictError("User already exists with this email")

    user = User.new(
        email=email,
        password_hash=hash_password(reg.password),
        name=name,
        phone=reg.phone,
        age_group=reg.age_group,
        user_type=reg.user_type,
    )
    try:
        await store.add_user(user)
    except ConflictError:
        # Lost a race with a concurrent registration for the same email.
        raise ConflictError("User already exists with this email") from None

    logger.info("User registered  user_id=%s email=%s", user.id, email)
    return user


async def authenticate(store: RecordStore, email: str, password: str) -> User:
    if not email or not password:
        raise ValidationError("Email and password are required")

    email = email.strip().lower()
    user = await store.get_user_by_email(email)
    if (
        user is None
        or not user.is_active
        or not verify_password(password, user.password_hash)
    ):
        LOGIN_ATTEMPTS.labels(result="failure").inc()
        logger.warning("Login failed  email=%s", email)
        raise UnauthorizedError("Invalid email or password")

    # Upgrade stored hash if argon2 parameters changed since it was written.
    if user.password_hash and _ph.check_needs_rehash(user.password_hash):
        await store.update_password_hash(user.id, _ph.hash(password))
        logger.info("Rehashed password for user=%s", user.id)

    LOGIN_ATTEMPTS.labels(result="success").inc()
    logger.info("Login succeeded  user_id=%s email=%s", user.id, email)
    return user


def merge_profile(user: User, changes: ProfileUpdate) -> User:
    """Apply *changes* to the whitelisted profile fields of *user*.

    Identity, enrollment and completion counters are never touched, no
    matter what the client sent.
    """
    merged = user
    if changes.email is not None:
        merged = replace(merged, email=normalize_email(changes.email))
    if changes.password is not None:
        _check_password(changes.password)
        merged = replace(merged, password_hash=hash_password(changes.password))
    for name in ("firebase_uid", "name", "phone", "age_group", "user_type"):
        value = getattr(changes, name)
        if value is not None:
            merged = replace(merged, **{name: value})
    return merged


async def upsert_profile(
    store: RecordStore, changes: ProfileUpdate
) -> tuple[User, bool]:
    """Create or merge a user keyed by firebase uid, then by email.

    A uid that is not known yet falls back to the email lookup, which links
    the uid to an account created through /auth/register.

    Returns ``(user, created)``.
    """
    _check_profile(changes.age_group, changes.user_type)

    existing: User | None = None
    if changes.firebase_uid:
        existing = await store.get_user_by_firebase_uid(changes.firebase_uid)
    if existing is None and changes.email:
        existing = await store.get_user_by_email(normalize_email(changes.email))

    if existing is not None:
        updated = await store.update_profile(merge_profile(existing, changes))
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("User updated  user_id=%s", updated.id)
        return updated, False

    if not changes.email:
        raise ValidationError("email is required to create a user")
    if changes.password is not None:
        _check_password(changes.password)

    user = User.new(
        email=normalize_email(changes.email),
        password_hash=hash_password(changes.password) if changes.password else None,
        name=(changes.name or "").strip(),
        phone=changes.phone,
        age_group=changes.age_group,
        user_type=changes.user_type or "learner",
        firebase_uid=changes.firebase_uid,
    )
    try:
        await store.add_user(user)
    except ConflictError:
        logger.warning("Duplicate user rejected email=%s", user.email)
        raise ConflictError("User already exists with this email") from None

    logger.info("User created  user_id=%s email=%s", user.id, user.email)
    return user, True


async def get_user(store: RecordStore, user_id: UUID) -> User:
    user = await store.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
