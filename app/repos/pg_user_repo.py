"""PostgreSQL implementation of UserRepo."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy import exists as sql_exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import UserRow
from app.models.user import User, UserFilters
from app.repos.user_repo import DuplicateEmailError, UserNotFoundError

_UNIQUE_EMAIL_INDEX = "uq_users_email_live"


class PgUserRepo:
    """Satisfies the UserRepo Protocol using PostgreSQL via SQLAlchemy.

    Email uniqueness is enforced by the partial unique index on
    users(email) WHERE NOT is_deleted; its violation surfaces as
    DuplicateEmailError.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: User) -> User:
        row = UserRow(
            email=user.email,
            password_hash=user.password_hash,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            avatar=user.avatar,
            is_active=user.is_active,
            is_deleted=user.is_deleted,
        )
        self._session.add(row)
        await self._flush_unique()
        await self._session.refresh(row)
        return _row_to_user(row)

    async def find_by_id(self, user_id: UUID) -> User | None:
        row = await self._session.get(UserRow, user_id)
        if row is None:
            return None
        return _row_to_user(row)

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(UserRow).where(
            UserRow.email == email, UserRow.is_deleted.is_(False)
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_user(row)

    async def find_all(self, filters: UserFilters | None = None) -> list[User]:
        stmt = (
            select(UserRow)
            .where(*_filter_clauses(filters))
            .order_by(UserRow.created_at)
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_user(r) for r in rows]

    async def find_many_by_ids(self, ids: Sequence[UUID]) -> list[User]:
        if not ids:
            return []
        stmt = select(UserRow).where(UserRow.id.in_(list(ids)))
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_user(r) for r in rows]

    async def update(self, user: User) -> User:
        if user.id is None:
            raise UserNotFoundError(None)
        stmt = (
            update(UserRow)
            .where(UserRow.id == user.id)
            .values(
                email=user.email,
                password_hash=user.password_hash,
                first_name=user.first_name,
                last_name=user.last_name,
                phone=user.phone,
                avatar=user.avatar,
                is_active=user.is_active,
                is_deleted=user.is_deleted,
                updated_at=func.now(),
            )
            .returning(UserRow)
        )
        try:
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        except IntegrityError as e:
            _raise_if_duplicate(e)
            raise
        if row is None:
            raise UserNotFoundError(user.id)
        return _row_to_user(row)

    async def delete(self, user_id: UUID) -> None:
        result = await self._session.execute(
            delete(UserRow).where(UserRow.id == user_id)
        )
        if result.rowcount == 0:
            raise UserNotFoundError(user_id)

    async def soft_delete(self, user_id: UUID) -> None:
        stmt = (
            update(UserRow)
            .where(UserRow.id == user_id)
            .values(is_deleted=True, updated_at=func.now())
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise UserNotFoundError(user_id)

    async def exists(self, email: str) -> bool:
        stmt = select(
            sql_exists().where(UserRow.email == email, UserRow.is_deleted.is_(False))
        )
        return bool((await self._session.execute(stmt)).scalar())

    async def count(self, filters: UserFilters | None = None) -> int:
        stmt = select(func.count()).select_from(UserRow).where(
            *_filter_clauses(filters)
        )
        return int((await self._session.execute(stmt)).scalar_one())

    async def _flush_unique(self) -> None:
        # A SAVEPOINT keeps the request transaction usable after a
        # rejected insert.
        try:
            async with self._session.begin_nested():
                await self._session.flush()
        except IntegrityError as e:
            _raise_if_duplicate(e)
            raise


def _raise_if_duplicate(exc: IntegrityError) -> None:
    if _UNIQUE_EMAIL_INDEX in str(exc.orig):
        raise DuplicateEmailError("email already exists") from exc


def _filter_clauses(filters: UserFilters | None) -> list[Any]:
    if filters is None:
        return []
    clauses: list[Any] = []
    if filters.email is not None:
        clauses.append(UserRow.email == filters.email.strip().lower())
    if filters.first_name is not None:
        clauses.append(UserRow.first_name == filters.first_name)
    if filters.last_name is not None:
        clauses.append(UserRow.last_name == filters.last_name)
    if filters.is_active is not None:
        clauses.append(UserRow.is_active.is_(filters.is_active))
    if filters.is_deleted is not None:
        clauses.append(UserRow.is_deleted.is_(filters.is_deleted))
    if filters.created_after is not None:
        clauses.append(UserRow.created_at >= filters.created_after)
    if filters.created_before is not None:
        clauses.append(UserRow.created_at <= filters.created_before)
    if filters.search:
        pattern = f"%{filters.search.strip()}%"
        clauses.append(
            or_(
                UserRow.first_name.ilike(pattern),
                UserRow.last_name.ilike(pattern),
                UserRow.email.ilike(pattern),
            )
        )
    return clauses


def _row_to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        phone=row.phone,
        avatar=row.avatar,
        is_active=row.is_active,
        is_deleted=row.is_deleted,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
