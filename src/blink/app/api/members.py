"""Workspace member API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Response

from blink.app.api.dependencies import Administrator, DbSession, Member, ServicesDep
from blink.app.api.schemas import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    CamelModel,
    LimitQuery,
    PageQuery,
    ResponseModel,
)
from blink.core.domain import WorkspaceMemberRole

router = APIRouter(prefix="/workspaces/{workspace_id}/members", tags=["members"])


class CreateMemberRequest(CamelModel):
    user_id: str
    role: WorkspaceMemberRole = WorkspaceMemberRole.DEFAULT


class UpdateMemberRequest(CamelModel):
    role: WorkspaceMemberRole | None = None


class MemberResponse(ResponseModel):
    id: str
    workspace_id: str
    user_id: str
    creator_id: str | None
    role: WorkspaceMemberRole
    created_at: datetime
    updated_at: datetime


class MemberListResponse(CamelModel):
    members: list[MemberResponse]
    total: int


@router.post("", response_model=MemberResponse, status_code=201)
async def create_member(
    body: CreateMemberRequest,
    admin: Administrator,
    db: DbSession,
    services: ServicesDep,
) -> MemberResponse:
    member = await services.members.create(
        db,
        admin.workspace_id,
        body.user_id,
        body.role,
        creator_id=admin.user_id,
    )
    return MemberResponse.model_validate(member)


@router.get("", response_model=MemberListResponse)
async def list_members(
    member: Member,
    db: DbSession,
    services: ServicesDep,
    name: str | None = None,
    role: WorkspaceMemberRole | None = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_LIMIT,
) -> MemberListResponse:
    result = await services.members.list(
        db, member.workspace_id, name=name, role=role, page=page, limit=limit
    )
    return MemberListResponse(
        members=[MemberResponse.model_validate(m) for m in result.items],
        total=result.total,
    )


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: str, member: Member, db: DbSession, services: ServicesDep
) -> MemberResponse:
    found = await services.members.get(db, member.workspace_id, member_id)
    return MemberResponse.model_validate(found)


@router.patch("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: str,
    body: UpdateMemberRequest,
    admin: Administrator,
    db: DbSession,
    services: ServicesDep,
) -> MemberResponse:
    """Change a member's role. The last administrator cannot be demoted."""
    updated = await services.members.update(
        db, admin.workspace_id, member_id, role=body.role
    )
    return MemberResponse.model_validate(updated)


@router.delete("/{member_id}", status_code=204)
async def delete_member(
    member_id: str, admin: Administrator, db: DbSession, services: ServicesDep
) -> Response:
    """Remove a member. The last member of a workspace cannot be removed."""
    await services.members.delete(db, admin.workspace_id, member_id)
    return Response(status_code=204)
