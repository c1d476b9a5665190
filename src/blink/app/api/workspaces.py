"""Workspace API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Response

from blink.app.api.dependencies import (
    Administrator,
    Authenticated,
    DbSession,
    Member,
    ServicesDep,
)
from blink.app.api.schemas import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    CamelModel,
    LimitQuery,
    NonEmptyName,
    PageQuery,
    ResponseModel,
)

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


# =============================================================================
# Request/Response Models
# =============================================================================


class CreateWorkspaceRequest(CamelModel):
    name: NonEmptyName


class UpdateWorkspaceRequest(CamelModel):
    name: NonEmptyName | None = None


class WorkspaceResponse(ResponseModel):
    id: str
    name: str
    creator_id: str
    created_at: datetime
    updated_at: datetime


class WorkspaceListResponse(CamelModel):
    workspaces: list[WorkspaceResponse]
    total: int


# =============================================================================
# Endpoints
# =============================================================================


@router.post("", response_model=WorkspaceResponse, status_code=201)
async def create_workspace(
    body: CreateWorkspaceRequest,
    auth: Authenticated,
    db: DbSession,
    services: ServicesDep,
) -> WorkspaceResponse:
    """Create a workspace; the caller becomes its ADMINISTRATOR."""
    workspace = await services.workspaces.create(db, auth.user_id, body.name)
    return WorkspaceResponse.model_validate(workspace)


@router.get("", response_model=WorkspaceListResponse)
async def list_workspaces(
    auth: Authenticated,
    db: DbSession,
    services: ServicesDep,
    name: str | None = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_LIMIT,
) -> WorkspaceListResponse:
    """List workspaces the caller is a member of."""
    result = await services.workspaces.list_for_member(
        db, auth.user_id, name=name, page=page, limit=limit
    )
    return WorkspaceListResponse(
        workspaces=[WorkspaceResponse.model_validate(w) for w in result.items],
        total=result.total,
    )


@router.get("/{workspace_id}", response_model=WorkspaceResponse)
async def get_workspace(
    member: Member, db: DbSession, services: ServicesDep
) -> WorkspaceResponse:
    workspace = await services.workspaces.get(db, member.workspace_id)
    return WorkspaceResponse.model_validate(workspace)


@router.patch("/{workspace_id}", response_model=WorkspaceResponse)
async def update_workspace(
    body: UpdateWorkspaceRequest,
    admin: Administrator,
    db: DbSession,
    services: ServicesDep,
) -> WorkspaceResponse:
    workspace = await services.workspaces.update(db, admin.workspace_id, name=body.name)
    return WorkspaceResponse.model_validate(workspace)


@router.delete("/{workspace_id}", status_code=204)
async def delete_workspace(
    admin: Administrator, db: DbSession, services: ServicesDep
) -> Response:
    """Delete the workspace with all its members and blinks."""
    await services.workspaces.delete(db, admin.workspace_id)
    return Response(status_code=204)
