"""Blink API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Response

from blink.app.api.dependencies import BlinkWriter, DbSession, Member, ServicesDep
from blink.app.api.schemas import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    CamelModel,
    HttpUrlStr,
    LimitQuery,
    NonEmptyName,
    PageQuery,
    RedirectIdStr,
    ResponseModel,
)

router = APIRouter(prefix="/workspaces/{workspace_id}/blinks", tags=["blinks"])


class CreateBlinkRequest(CamelModel):
    name: NonEmptyName
    url: HttpUrlStr
    redirect_id: RedirectIdStr | None = None


class UpdateBlinkRequest(CamelModel):
    name: NonEmptyName | None = None
    url: HttpUrlStr | None = None
    redirect_id: RedirectIdStr | None = None


class BlinkResponse(ResponseModel):
    id: str
    workspace_id: str
    creator_id: str | None
    name: str
    url: str
    redirect_id: str
    created_at: datetime
    updated_at: datetime


class BlinkListResponse(CamelModel):
    blinks: list[BlinkResponse]
    total: int


@router.post("", response_model=BlinkResponse, status_code=201)
async def create_blink(
    body: CreateBlinkRequest,
    member: Member,
    db: DbSession,
    services: ServicesDep,
) -> BlinkResponse:
    """Create a blink. Without redirectId a random one is generated."""
    blink = await services.blinks.create(
        db,
        member.workspace_id,
        member.user_id,
        name=body.name,
        url=body.url,
        redirect_id=body.redirect_id,
    )
    return BlinkResponse.model_validate(blink)


@router.get("", response_model=BlinkListResponse)
async def list_blinks(
    member: Member,
    db: DbSession,
    services: ServicesDep,
    name: str | None = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_LIMIT,
) -> BlinkListResponse:
    result = await services.blinks.list(
        db, member.workspace_id, name=name, page=page, limit=limit
    )
    return BlinkListResponse(
        blinks=[BlinkResponse.model_validate(b) for b in result.items],
        total=result.total,
    )


@router.get("/{blink_id}", response_model=BlinkResponse)
async def get_blink(
    blink_id: str, member: Member, db: DbSession, services: ServicesDep
) -> BlinkResponse:
    blink = await services.blinks.get(db, member.workspace_id, blink_id)
    return BlinkResponse.model_validate(blink)


@router.patch("/{blink_id}", response_model=BlinkResponse)
async def update_blink(
    body: UpdateBlinkRequest,
    writer: BlinkWriter,
    db: DbSession,
    services: ServicesDep,
) -> BlinkResponse:
    blink = await services.blinks.update(
        db,
        writer.member.workspace_id,
        writer.blink.id,
        name=body.name,
        url=body.url,
        redirect_id=body.redirect_id,
    )
    return BlinkResponse.model_validate(blink)


@router.delete("/{blink_id}", status_code=204)
async def delete_blink(
    writer: BlinkWriter, db: DbSession, services: ServicesDep
) -> Response:
    await services.blinks.delete(db, writer.member.workspace_id, writer.blink.id)
    return Response(status_code=204)
