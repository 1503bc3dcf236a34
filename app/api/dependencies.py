"""Composition root for request handlers.

The user repository is chosen once per process: PostgreSQL when
DATABASE_URL is set (one session per request), otherwise the module
singleton `memory_user_repo`.  Tests swap collaborators with
app.dependency_overrides.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends

from app.db import engine as db
from app.repos.pg_user_repo import PgUserRepo
from app.repos.user_repo import InMemoryUserRepo, UserRepo
from app.services.password_service import PasswordService, password_service
from app.services.users_service import CreateUserUseCase

memory_user_repo = InMemoryUserRepo()


async def get_user_repo() -> AsyncGenerator[UserRepo, None]:
    if db.async_session_factory is None:
        yield memory_user_repo
        return
    async with db.session_scope() as session:
        yield PgUserRepo(session)


def get_password_service() -> PasswordService:
    return password_service


def get_create_user_use_case(
    repo: Annotated[UserRepo, Depends(get_user_repo)],
    passwords: Annotated[PasswordService, Depends(get_password_service)],
) -> CreateUserUseCase:
    return CreateUserUseCase(repo, passwords)
