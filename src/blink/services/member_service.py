"""Workspace membership service.

A workspace must always keep at least one member, and a role change may
not demote its only administrator. Both checks lock the workspace's
membership rows (SELECT ... FOR UPDATE) and run in the same transaction
as the write, so two concurrent removals cannot both see "two members
left".
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from blink.core.domain import WorkspaceMemberRole
from blink.core.errors import (
    UserNotFoundError,
    WorkspaceLastAdministratorError,
    WorkspaceLastMemberError,
    WorkspaceMemberAlreadyExistsError,
    WorkspaceMemberNotFoundError,
)
from blink.core.logging_schema import LogEvent
from blink.core.models import User, WorkspaceMember, utc_now
from blink.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, Page, paginate

logger = logging.getLogger(__name__)


class MemberService:
    """CRUD for workspace members."""

    async def create(
        self,
        db: AsyncSession,
        workspace_id: str,
        user_id: str,
        role: WorkspaceMemberRole,
        creator_id: str | None = None,
    ) -> WorkspaceMember:
        """Add a user to a workspace.

        Raises:
            UserNotFoundError: user_id does not exist
            WorkspaceMemberAlreadyExistsError: user is already a member
        """
        if await db.get(User, user_id) is None:
            raise UserNotFoundError(user_id)
        if await self.find_membership(db, workspace_id, user_id) is not None:
            raise WorkspaceMemberAlreadyExistsError(user_id)

        member = WorkspaceMember(
            workspace_id=workspace_id,
            user_id=user_id,
            creator_id=creator_id,
            role=role,
        )
        db.add(member)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise WorkspaceMemberAlreadyExistsError(user_id) from e
        await db.refresh(member)
        return member

    async def find_membership(
        self, db: AsyncSession, workspace_id: str, user_id: str
    ) -> WorkspaceMember | None:
        result = await db.execute(
            select(WorkspaceMember).where(
                col(WorkspaceMember.workspace_id) == workspace_id,
                col(WorkspaceMember.user_id) == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def _lock_members(
        self, db: AsyncSession, workspace_id: str
    ) -> list[WorkspaceMember]:
        result = await db.execute(
            select(WorkspaceMember)
            .where(col(WorkspaceMember.workspace_id) == workspace_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list(
        self,
        db: AsyncSession,
        workspace_id: str,
        name: str | None = None,
        role: WorkspaceMemberRole | None = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> Page[WorkspaceMember]:
        """List members, newest first.

        Args:
            name: Case-insensitive substring of the member's user name
            role: Exact role filter
        """
        stmt = select(WorkspaceMember).where(
            col(WorkspaceMember.workspace_id) == workspace_id
        )
        if name:
            stmt = stmt.join(User, col(User.id) == col(WorkspaceMember.user_id)).where(
                col(User.name).icontains(name, autoescape=True)
            )
        if role is not None:
            stmt = stmt.where(col(WorkspaceMember.role) == role)
        stmt = stmt.order_by(
            col(WorkspaceMember.created_at).desc(), col(WorkspaceMember.id).desc()
        )
        return await paginate(db, stmt, page, limit)

    async def get(
        self, db: AsyncSession, workspace_id: str, member_id: str
    ) -> WorkspaceMember:
        result = await db.execute(
            select(WorkspaceMember).where(
                col(WorkspaceMember.id) == member_id,
                col(WorkspaceMember.workspace_id) == workspace_id,
            )
        )
        member = result.scalar_one_or_none()
        if member is None:
            raise WorkspaceMemberNotFoundError(member_id)
        return member

    async def update(
        self,
        db: AsyncSession,
        workspace_id: str,
        member_id: str,
        role: WorkspaceMemberRole | None = None,
    ) -> WorkspaceMember:
        """Change a member's role.

        Raises:
            WorkspaceMemberNotFoundError: No such member in this workspace
            WorkspaceLastAdministratorError: Would demote the only administrator
        """
        members = await self._lock_members(db, workspace_id)
        member = next((m for m in members if m.id == member_id), None)
        if member is None:
            await db.rollback()
            raise WorkspaceMemberNotFoundError(member_id)

        if role is not None and role != member.role:
            admins = [
                m for m in members if m.role == WorkspaceMemberRole.ADMINISTRATOR
            ]
            if (
                member.role == WorkspaceMemberRole.ADMINISTRATOR
                and len(admins) == 1
            ):
                await db.rollback()
                raise WorkspaceLastAdministratorError(member_id)
            member.role = role

        member.updated_at = utc_now()
        await db.commit()
        await db.refresh(member)
        return member

    async def delete(self, db: AsyncSession, workspace_id: str, member_id: str) -> None:
        """Remove a member.

        Raises:
            WorkspaceMemberNotFoundError: No such member in this workspace
            WorkspaceLastMemberError: It is the only member left
        """
        members = await self._lock_members(db, workspace_id)
        member = next((m for m in members if m.id == member_id), None)
        if member is None:
            await db.rollback()
            raise WorkspaceMemberNotFoundError(member_id)

        if len(members) <= 1:
            await db.rollback()
            raise WorkspaceLastMemberError(member_id)

        await db.execute(
            delete(WorkspaceMember).where(
                col(WorkspaceMember.id) == member_id,
                col(WorkspaceMember.workspace_id) == workspace_id,
            )
        )
        await db.commit()
        logger.info(
            "Workspace member removed",
            extra={
                "event": LogEvent.MEMBER_REMOVED,
                "workspace_id": workspace_id,
                "member_id": member_id,
            },
        )
