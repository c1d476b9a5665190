"""User API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Response
from pydantic import EmailStr, Field

from blink.app.api.dependencies import Authenticated, DbSession, OwnUser, ServicesDep
from blink.app.api.schemas import CamelModel, NonEmptyName, ResponseModel

router = APIRouter(prefix="/users", tags=["users"])


class CreateUserRequest(CamelModel):
    name: NonEmptyName
    email: EmailStr
    password: str = Field(min_length=8, max_length=1024)


class UpdateUserRequest(CamelModel):
    name: NonEmptyName | None = None
    email: EmailStr | None = None


class UserResponse(ResponseModel):
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    body: CreateUserRequest, db: DbSession, services: ServicesDep
) -> UserResponse:
    """Register a user. A default workspace is created alongside."""
    user = await services.users.register(db, body.name, body.email, body.password)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def get_me(auth: Authenticated, db: DbSession, services: ServicesDep) -> UserResponse:
    user = await services.users.get(db, auth.user_id)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str, _auth: OwnUser, db: DbSession, services: ServicesDep
) -> UserResponse:
    user = await services.users.get(db, user_id)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UpdateUserRequest,
    _auth: OwnUser,
    db: DbSession,
    services: ServicesDep,
) -> UserResponse:
    user = await services.users.update(db, user_id, name=body.name, email=body.email)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str, _auth: OwnUser, db: DbSession, services: ServicesDep
) -> Response:
    """Delete the account with its sessions and created workspaces."""
    await services.users.delete(db, user_id)
    return Response(status_code=204)
