"""User registration and lookup.

CreateUserUseCase.execute runs, in this order:

  1. Email.create(raw)                 -> 400 INVALID_EMAIL*
  2. repo.find_by_email(normalized)    -> 409 EMAIL_ALREADY_EXISTS
  3. validate_password(raw)            -> 400 PASSWORD_*
  4. hash (worker thread)
  5. User.create(...)
  6. repo.create(user)                 -> 409 if the store reports a duplicate
  7. user.to_public()

Cheap checks run before the hash.  Step 2 is only an early exit: the
repository's atomic uniqueness check in step 6 decides races between
concurrent registrations of the same email.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from uuid import UUID

from app.core.errors import AppError
from app.core.metrics import PASSWORD_HASH_DURATION, USER_REGISTRATIONS
from app.models.email import Email
from app.models.user import PublicUser, User, UserFilters
from app.repos.user_repo import DuplicateEmailError, UserNotFoundError, UserRepo
from app.services.password_service import PasswordService, password_service

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100

_HAS_LETTER = re.compile(r"[a-zA-Z]")
_HAS_DIGIT = re.compile(r"[0-9]")


@dataclass(frozen=True, slots=True)
class CreateUserRequest:
    email: str
    password: str
    first_name: str
    last_name: str
    phone: str | None = None
    avatar: str | None = None

    def __repr__(self) -> str:
        return f"CreateUserRequest(email={self.email!r}, password='***')"


CreateUserResponse = PublicUser


def validate_password(password: str) -> None:
    """Raise a 400 AppError for the first password rule `password` breaks."""
    if not password:
        raise AppError.bad_request("Contraseña es requerida", "PASSWORD_REQUIRED")

    if len(password) < PASSWORD_MIN_LENGTH:
        raise AppError.bad_request(
            f"Contraseña debe tener al menos {PASSWORD_MIN_LENGTH} caracteres",
            "PASSWORD_TOO_SHORT",
        )

    if len(password) > PASSWORD_MAX_LENGTH:
        raise AppError.bad_request("Contraseña demasiado larga", "PASSWORD_TOO_LONG")

    if not _HAS_LETTER.search(password) or not _HAS_DIGIT.search(password):
        raise AppError.bad_request(
            "Contraseña debe contener al menos una letra y un número",
            "PASSWORD_WEAK",
        )


def _email_taken() -> AppError:
    return AppError.conflict("El email ya está registrado", "EMAIL_ALREADY_EXISTS")


class CreateUserUseCase:
    def __init__(
        self,
        user_repo: UserRepo,
        passwords: PasswordService = password_service,
    ) -> None:
        self._repo = user_repo
        self._passwords = passwords

    async def execute(self, request: CreateUserRequest) -> CreateUserResponse:
        try:
            public = await self._register(request)
        except AppError as e:
            USER_REGISTRATIONS.labels(outcome=e.code).inc()
            raise
        USER_REGISTRATIONS.labels(outcome="created").inc()
        return public

    async def _register(self, request: CreateUserRequest) -> CreateUserResponse:
        email = Email.create(request.email)

        if await self._repo.find_by_email(email.value) is not None:
            logger.info("Registration rejected: email in use  email=%s", email)
            raise _email_taken()

        validate_password(request.password)

        password_hash = await self._hash(request.password)

        user = User.create(
            email=email.value,
            password_hash=password_hash,
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            avatar=request.avatar,
            is_active=True,
        )

        try:
            saved = await self._repo.create(user)
        except DuplicateEmailError:
            # Lost a race with a concurrent registration of the same email.
            logger.info("Registration lost duplicate race  email=%s", email)
            raise _email_taken() from None

        logger.info("User registered  user_id=%s email=%s", saved.id, saved.email)
        return saved.to_public()

    async def _hash(self, password: str) -> str:
        start = time.monotonic()
        # Argon2 is CPU-bound; keep it off the event loop.
        password_hash = await asyncio.to_thread(self._passwords.hash, password)
        PASSWORD_HASH_DURATION.observe(time.monotonic() - start)
        return password_hash


# ---------------------------------------------------------------------------
# Read / removal helpers used by the users API
# ---------------------------------------------------------------------------


def _user_not_found() -> AppError:
    return AppError.not_found("Usuario no encontrado", "USER_NOT_FOUND")


async def get_user(repo: UserRepo, user_id: UUID) -> PublicUser:
    user = await repo.find_by_id(user_id)
    if user is None or user.is_deleted:
        raise _user_not_found()
    return user.to_public()


async def list_users(
    repo: UserRepo, filters: UserFilters | None = None
) -> tuple[list[PublicUser], int]:
    filters = filters or UserFilters(is_deleted=False)
    users = await repo.find_all(filters)
    total = await repo.count(filters)
    return [u.to_public() for u in users], total


async def remove_user(repo: UserRepo, user_id: UUID) -> None:
    """Soft-delete: the row stays for history, the user disappears from the API."""
    user = await repo.find_by_id(user_id)
    if user is None or user.is_deleted:
        raise _user_not_found()
    try:
        await repo.soft_delete(user_id)
    except UserNotFoundError:
        raise _user_not_found() from None
    logger.info("User soft-deleted  user_id=%s", user_id)
