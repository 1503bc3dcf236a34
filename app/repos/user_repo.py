from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone
from typing import Protocol
from uuid import UUID, uuid4

from app.models.user import User, UserFilters


class DuplicateEmailError(Exception):
    """The store already holds a non-deleted user with this email."""


class UserNotFoundError(LookupError):
    pass


class UserRepo(Protocol):
    async def create(self, user: User) -> User: ...
    async def find_by_id(self, user_id: UUID) -> User | None: ...
    async def find_by_email(self, email: str) -> User | None: ...
    async def find_all(self, filters: UserFilters | None = None) -> list[User]: ...
    async def find_many_by_ids(self, ids: Sequence[UUID]) -> list[User]: ...
    async def update(self, user: User) -> User: ...
    async def delete(self, user_id: UUID) -> None: ...
    async def soft_delete(self, user_id: UUID) -> None: ...
    async def exists(self, email: str) -> bool: ...
    async def count(self, filters: UserFilters | None = None) -> int: ...


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryUserRepo:
    """Process-local UserRepo used when no DATABASE_URL is configured.

    Uniqueness of live (non-deleted) emails is checked and written under
    one lock, so two concurrent creates for the same email cannot both
    succeed.
    """

    def __init__(self) -> None:
        self._by_id: dict[UUID, User] = {}
        self._lock = asyncio.Lock()

    def _live_by_email(self, email: str) -> User | None:
        for u in self._by_id.values():
            if u.email == email and not u.is_deleted:
                return u
        return None

    async def create(self, user: User) -> User:
        async with self._lock:
            if self._live_by_email(user.email) is not None:
                raise DuplicateEmailError(user.email)
            now = _now()
            stored = replace(user, id=uuid4(), created_at=now, updated_at=now)
            self._by_id[stored.id] = stored  # type: ignore[index]
            return stored

    async def find_by_id(self, user_id: UUID) -> User | None:
        return self._by_id.get(user_id)

    async def find_by_email(self, email: str) -> User | None:
        return self._live_by_email(email)

    async def find_all(self, filters: UserFilters | None = None) -> list[User]:
        filters = filters or UserFilters()
        users = [u for u in self._by_id.values() if filters.matches(u)]
        users.sort(key=lambda u: u.created_at or _EPOCH)
        return users

    async def find_many_by_ids(self, ids: Sequence[UUID]) -> list[User]:
        return [self._by_id[i] for i in ids if i in self._by_id]

    async def update(self, user: User) -> User:
        async with self._lock:
            if user.id is None or user.id not in self._by_id:
                raise UserNotFoundError(user.id)
            holder = self._live_by_email(user.email)
            if holder is not None and holder.id != user.id and not user.is_deleted:
                raise DuplicateEmailError(user.email)
            updated = replace(user, updated_at=_now())
            self._by_id[user.id] = updated
            return updated

    async def delete(self, user_id: UUID) -> None:
        async with self._lock:
            if self._by_id.pop(user_id, None) is None:
                raise UserNotFoundError(user_id)

    async def soft_delete(self, user_id: UUID) -> None:
        async with self._lock:
            u = self._by_id.get(user_id)
            if u is None:
                raise UserNotFoundError(user_id)
            self._by_id[user_id] = replace(u, is_deleted=True, updated_at=_now())

    async def exists(self, email: str) -> bool:
        return self._live_by_email(email) is not None

    async def count(self, filters: UserFilters | None = None) -> int:
        return len(await self.find_all(filters))

    def clear(self) -> None:
        self._by_id.clear()
