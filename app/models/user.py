from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class User:
    # email is the normalized string produced by Email; the value object
    # itself is not stored on the entity.
    email: str
    password_hash: str = field(repr=False)
    first_name: str
    last_name: str
    phone: str | None = None
    avatar: str | None = None
    is_active: bool = True
    is_deleted: bool = False
    id: UUID | None = None  # assigned by the repository on create
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def create(
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        phone: str | None = None,
        avatar: str | None = None,
        is_active: bool = True,
    ) -> User:
        return User(
            email=email,
            password_hash=password_hash,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            phone=phone.strip() if phone is not None else None,
            avatar=avatar,
            is_active=is_active,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_public(self) -> PublicUser:
        return PublicUser(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            full_name=self.full_name,
            phone=self.phone,
            avatar=self.avatar,
            is_active=self.is_active,
            created_at=self.created_at,
        )


@dataclass(frozen=True, slots=True)
class PublicUser:
    """Outward projection of a User. Has no password field at all."""

    id: UUID | None
    email: str
    first_name: str
    last_name: str
    full_name: str
    phone: str | None
    avatar: str | None
    is_active: bool
    created_at: datetime | None


@dataclass(frozen=True, slots=True)
class UserFilters:
    """Criteria for UserRepo.find_all / count. None means "don't filter"."""

    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool | None = None
    is_deleted: bool | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    search: str | None = None  # substring of first name, last name or email

    def matches(self, user: User) -> bool:
        if self.email is not None and user.email != self.email.strip().lower():
            return False
        if self.first_name is not None and user.first_name != self.first_name:
            return False
        if self.last_name is not None and user.last_name != self.last_name:
            return False
        if self.is_active is not None and user.is_active != self.is_active:
            return False
        if self.is_deleted is not None and user.is_deleted != self.is_deleted:
            return False
        if self.created_after is not None and (
            user.created_at is None or user.created_at < self.created_after
        ):
            return False
        if self.created_before is not None and (
            user.created_at is None or user.created_at > self.created_before
        ):
            return False
        if self.search:
            needle = self.search.strip().lower()
            haystack = (user.first_name, user.last_name, user.email)
            if not any(needle in value.lower() for value in haystack):
                return False
        return True
