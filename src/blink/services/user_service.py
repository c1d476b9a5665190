"""User accounts.

Registration creates the user, a "Default" workspace and the user's
ADMINISTRATOR membership in one transaction.
"""

import logging

from argon2 import PasswordHasher
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from blink.core.errors import EmailAlreadyInUseError, UserNotFoundError
from blink.core.logging_schema import LogEvent
from blink.core.models import User, utc_now
from blink.core.security import hash_password_async
from blink.infra.cache import clear_redirect_cache
from blink.services.workspace_service import DEFAULT_WORKSPACE_NAME, WorkspaceService

logger = logging.getLogger(__name__)


class UserService:
    """Registration and profile management."""

    def __init__(self, hasher: PasswordHasher) -> None:
        self.hasher = hasher

    async def _email_in_use(
        self, db: AsyncSession, email: str, exclude_user_id: str | None = None
    ) -> bool:
        stmt = select(col(User.id)).where(col(User.email) == email)
        if exclude_user_id is not None:
            stmt = stmt.where(col(User.id) != exclude_user_id)
        result = await db.execute(stmt)
        return result.first() is not None

    async def register(
        self, db: AsyncSession, name: str, email: str, password: str
    ) -> User:
        """Create a user with their default workspace.

        Raises:
            EmailAlreadyInUseError: Email belongs to another user
        """
        if await self._email_in_use(db, email):
            raise EmailAlreadyInUseError(email)

        password_hash = await hash_password_async(password, self.hasher)
        user = User(name=name, email=email, password_hash=password_hash)
        workspace, member = WorkspaceService.build(user.id, DEFAULT_WORKSPACE_NAME)

        db.add(user)
        try:
            await db.flush()
            db.add(workspace)
            await db.flush()
            db.add(member)
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise EmailAlreadyInUseError(email) from e

        await db.refresh(user)
        logger.info(
            "User registered",
            extra={"event": LogEvent.USER_REGISTERED, "user_id": user.id},
        )
        return user

    async def get(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def update(
        self,
        db: AsyncSession,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
    ) -> User:
        """Update profile fields. None leaves a field unchanged.

        Raises:
            UserNotFoundError: No such user
            EmailAlreadyInUseError: Email belongs to another user
        """
        user = await self.get(db, user_id)
        if email is not None and email != user.email:
            if await self._email_in_use(db, email, exclude_user_id=user_id):
                raise EmailAlreadyInUseError(email)
            user.email = email
        if name is not None:
            user.name = name
        user.updated_at = utc_now()
        new_email = user.email

        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise EmailAlreadyInUseError(new_email) from e
        await db.refresh(user)
        return user

    async def delete(self, db: AsyncSession, user_id: str) -> None:
        """Delete a user.

        Sessions, memberships and workspaces the user created go with it
        (FK cascade); blinks they created elsewhere lose their creator.
        """
        result = await db.execute(delete(User).where(col(User.id) == user_id))
        if result.rowcount == 0:
            await db.rollback()
            raise UserNotFoundError(user_id)
        await db.commit()

        clear_redirect_cache()
        logger.info(
            "User deleted",
            extra={"event": LogEvent.USER_DELETED, "user_id": user_id},
        )
