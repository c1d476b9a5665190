"""Workspace service for CRUD."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from blink.core.domain import WorkspaceMemberRole
from blink.core.errors import WorkspaceNotFoundError
from blink.core.logging_schema import LogEvent
from blink.core.models import Workspace, WorkspaceMember, utc_now
from blink.infra.cache import clear_redirect_cache
from blink.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, Page, paginate

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_NAME = "Default"


class WorkspaceService:
    """Workspaces and their founding membership."""

    @staticmethod
    def build(user_id: str, name: str) -> tuple[Workspace, WorkspaceMember]:
        """Create unsaved workspace + ADMINISTRATOR membership for its creator."""
        workspace = Workspace(name=name, creator_id=user_id)
        member = WorkspaceMember(
            workspace_id=workspace.id,
            user_id=user_id,
            creator_id=user_id,
            role=WorkspaceMemberRole.ADMINISTRATOR,
        )
        return workspace, member

    async def create(self, db: AsyncSession, user_id: str, name: str) -> Workspace:
        """Create a workspace. The creator becomes its ADMINISTRATOR.

        Args:
            db: Database session
            user_id: Creator user ID
            name: Workspace name

        Returns:
            Created workspace
        """
        workspace, member = self.build(user_id, name)
        db.add(workspace)
        await db.flush()
        db.add(member)
        await db.commit()
        await db.refresh(workspace)
        return workspace

    async def list_for_member(
        self,
        db: AsyncSession,
        user_id: str,
        name: str | None = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> Page[Workspace]:
        """List workspaces the user belongs to, newest first.

        Args:
            name: Case-insensitive substring filter
        """
        stmt = (
            select(Workspace)
            .join(WorkspaceMember, col(WorkspaceMember.workspace_id) == col(Workspace.id))
            .where(col(WorkspaceMember.user_id) == user_id)
        )
        if name:
            stmt = stmt.where(col(Workspace.name).icontains(name, autoescape=True))
        stmt = stmt.order_by(col(Workspace.created_at).desc(), col(Workspace.id).desc())
        return await paginate(db, stmt, page, limit)

    async def get(self, db: AsyncSession, workspace_id: str) -> Workspace:
        workspace = await db.get(Workspace, workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(workspace_id)
        return workspace

    async def get_default(self, db: AsyncSession, user_id: str) -> Workspace:
        """The oldest workspace the user created (made at registration)."""
        result = await db.execute(
            select(Workspace)
            .where(col(Workspace.creator_id) == user_id)
            .order_by(col(Workspace.created_at).asc(), col(Workspace.id).asc())
            .limit(1)
        )
        workspace = result.scalar_one_or_none()
        if workspace is None:
            raise WorkspaceNotFoundError(f"default:{user_id}")
        return workspace

    async def update(
        self, db: AsyncSession, workspace_id: str, name: str | None = None
    ) -> Workspace:
        workspace = await self.get(db, workspace_id)
        if name is not None:
            workspace.name = name
        workspace.updated_at = utc_now()
        await db.commit()
        await db.refresh(workspace)
        return workspace

    async def delete(self, db: AsyncSession, workspace_id: str) -> None:
        """Delete a workspace with its members and blinks (FK cascade)."""
        result = await db.execute(
            delete(Workspace).where(col(Workspace.id) == workspace_id)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise WorkspaceNotFoundError(workspace_id)
        await db.commit()

        # Cascaded blinks may still sit in the lookup cache
        clear_redirect_cache()
        logger.info(
            "Workspace deleted",
            extra={"event": LogEvent.WORKSPACE_DELETED, "workspace_id": workspace_id},
        )
