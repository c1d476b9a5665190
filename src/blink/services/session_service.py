"""Session management service for blink.

A session is the server-side anchor of one login:
- Create: Insert a new row (one per login, never reused)
- Get / Exists: Look a session up by id
- Delete: Remove it (logout); idempotent

Sessions carry no expiry of their own. Token TTLs bound their useful
life, and refresh only works while the row exists.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from blink.core.models import Session


class SessionService:
    """Service for managing login sessions."""

    @staticmethod
    async def create(db: AsyncSession, user_id: str) -> Session:
        """Create a new session for a user.

        Args:
            db: Database session
            user_id: User ID to create the session for

        Returns:
            Created session
        """
        session = Session(user_id=user_id)
        db.add(session)
        await db.commit()
        await db.refresh(session)
        return session

    @staticmethod
    async def get(db: AsyncSession, session_id: str) -> Session | None:
        result = await db.execute(
            select(Session).where(col(Session.id) == session_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def exists(db: AsyncSession, session_id: str) -> bool:
        result = await db.execute(
            select(col(Session.id)).where(col(Session.id) == session_id)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def delete(db: AsyncSession, session_id: str) -> bool:
        """Delete a session.

        Returns:
            True if a row was removed, False if it was already gone
        """
        result = await db.execute(
            delete(Session).where(col(Session.id) == session_id)
        )
        await db.commit()
        return result.rowcount > 0
