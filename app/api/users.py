"""User endpoints under /api/v1/users.

Request and response bodies use camelCase keys (firstName, isActive,
...) for the SPA; every response is wrapped in the standard envelope.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.api.dependencies import get_create_user_use_case, get_user_repo
from app.core.responses import ApiResponse, ok
from app.models.user import PublicUser, UserFilters
from app.repos.user_repo import UserRepo
from app.services import users_service
from app.services.users_service import CreateUserRequest, CreateUserUseCase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["users"])


# --- Request / Response schemas -------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterIn(_CamelModel):
    email: str
    password: str = Field(repr=False)
    first_name: str
    last_name: str
    phone: str | None = None
    avatar: str | None = None


class UserOut(_CamelModel):
    id: UUID | None
    email: str
    first_name: str
    last_name: str
    full_name: str
    phone: str | None = None
    avatar: str | None = None
    is_active: bool
    created_at: datetime | None = None

    @classmethod
    def from_public(cls, user: PublicUser) -> UserOut:
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            full_name=user.full_name,
            phone=user.phone,
            avatar=user.avatar,
            is_active=user.is_active,
            created_at=user.created_at,
        )


class UserPage(BaseModel):
    items: list[UserOut]
    total: int


# --- Routes ---------------------------------------------------------------


@router.get("", response_model=ApiResponse[None], response_model_exclude_none=True)
async def api_root() -> ApiResponse[None]:
    return ok(message="LTI ATS API v1.0")


@router.post(
    "/users",
    response_model=ApiResponse[UserOut],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    payload: RegisterIn,
    use_case: Annotated[CreateUserUseCase, Depends(get_create_user_use_case)],
) -> ApiResponse[UserOut]:
    created = await use_case.execute(
        CreateUserRequest(
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            phone=payload.phone,
            avatar=payload.avatar,
        )
    )
    return ok(UserOut.from_public(created), "Usuario creado correctamente")


@router.get(
    "/users",
    response_model=ApiResponse[UserPage],
    response_model_exclude_none=True,
)
async def list_users(
    repo: Annotated[UserRepo, Depends(get_user_repo)],
    search: str | None = None,
    email: str | None = None,
    is_active: Annotated[bool | None, Query(alias="isActive")] = None,
) -> ApiResponse[UserPage]:
    filters = UserFilters(
        email=email, is_active=is_active, is_deleted=False, search=search
    )
    users, total = await users_service.list_users(repo, filters)
    page = UserPage(items=[UserOut.from_public(u) for u in users], total=total)
    return ok(page)


@router.get(
    "/users/{user_id}",
    response_model=ApiResponse[UserOut],
    response_model_exclude_none=True,
)
async def get_user(
    user_id: UUID,
    repo: Annotated[UserRepo, Depends(get_user_repo)],
) -> ApiResponse[UserOut]:
    user = await users_service.get_user(repo, user_id)
    return ok(UserOut.from_public(user))


@router.delete(
    "/users/{user_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
)
async def delete_user(
    user_id: UUID,
    repo: Annotated[UserRepo, Depends(get_user_repo)],
) -> ApiResponse[None]:
    await users_service.remove_user(repo, user_id)
    return ok(message="Usuario eliminado correctamente")
