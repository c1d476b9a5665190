"""Blink (short link) service.

The public redirect path goes through resolve_redirect_url(), which is
cached per redirect_id for a few seconds (see infra.cache). Writes that
change or remove a redirect_id evict it.
"""

from cachetools_async import cached
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from blink.core.errors import BlinkNotFoundError, RedirectIdConflictError, RedirectNotFoundError
from blink.core.models import Blink, utc_now
from blink.infra.cache import clear_redirect_cache, redirect_cache
from blink.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, Page, paginate
from blink.services.redirect_ids import RedirectIdAllocator


def _redirect_key(_service: "BlinkService", _db: AsyncSession, redirect_id: str) -> str:
    return redirect_id


class BlinkService:
    """CRUD for blinks plus the redirect lookup."""

    def __init__(self, allocator: RedirectIdAllocator) -> None:
        self.allocator = allocator

    async def create(
        self,
        db: AsyncSession,
        workspace_id: str,
        creator_id: str,
        name: str,
        url: str,
        redirect_id: str | None = None,
    ) -> Blink:
        """Create a blink with a custom or generated redirect id.

        Raises:
            RedirectIdConflictError: Custom redirect id already used anywhere
            RedirectIdGenerationExhaustedError: No free id found
        """
        if redirect_id is None:
            redirect_id = await self.allocator.allocate_unused(db)
        else:
            await self.allocator.ensure_available(db, redirect_id)

        blink = Blink(
            workspace_id=workspace_id,
            creator_id=creator_id,
            name=name,
            url=url,
            redirect_id=redirect_id,
        )
        db.add(blink)
        await self._commit(db, redirect_id)
        await db.refresh(blink)
        return blink

    async def list(
        self,
        db: AsyncSession,
        workspace_id: str,
        name: str | None = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> Page[Blink]:
        """List a workspace's blinks, newest first."""
        stmt = select(Blink).where(col(Blink.workspace_id) == workspace_id)
        if name:
            stmt = stmt.where(col(Blink.name).icontains(name, autoescape=True))
        stmt = stmt.order_by(col(Blink.created_at).desc(), col(Blink.id).desc())
        return await paginate(db, stmt, page, limit)

    async def get(self, db: AsyncSession, workspace_id: str, blink_id: str) -> Blink:
        result = await db.execute(
            select(Blink).where(
                col(Blink.id) == blink_id,
                col(Blink.workspace_id) == workspace_id,
            )
        )
        blink = result.scalar_one_or_none()
        if blink is None:
            raise BlinkNotFoundError(blink_id)
        return blink

    async def get_by_redirect_id(self, db: AsyncSession, redirect_id: str) -> Blink:
        result = await db.execute(
            select(Blink).where(col(Blink.redirect_id) == redirect_id)
        )
        blink = result.scalar_one_or_none()
        if blink is None:
            raise RedirectNotFoundError(redirect_id)
        return blink

    async def resolve_redirect_url(self, db: AsyncSession, redirect_id: str) -> str:
        """Target URL for a redirect id. Misses are not cached.

        Raises:
            RedirectNotFoundError: No blink has this redirect id
        """
        try:
            return await self._lookup_redirect_url(db, redirect_id)
        except RedirectNotFoundError:
            # The failed future would otherwise hold a slot until its TTL
            clear_redirect_cache(redirect_id)
            raise

    @cached(cache=redirect_cache, key=_redirect_key)
    async def _lookup_redirect_url(self, db: AsyncSession, redirect_id: str) -> str:
        blink = await self.get_by_redirect_id(db, redirect_id)
        return blink.url

    async def update(
        self,
        db: AsyncSession,
        workspace_id: str,
        blink_id: str,
        name: str | None = None,
        url: str | None = None,
        redirect_id: str | None = None,
    ) -> Blink:
        """Update a blink. None leaves a field unchanged.

        Raises:
            BlinkNotFoundError: No such blink in this workspace
            RedirectIdConflictError: redirect_id taken by another blink
        """
        blink = await self.get(db, workspace_id, blink_id)
        previous_redirect_id = blink.redirect_id

        if redirect_id is not None and redirect_id != blink.redirect_id:
            await self.allocator.ensure_available(
                db, redirect_id, exclude_blink_id=blink.id
            )
            blink.redirect_id = redirect_id
        if name is not None:
            blink.name = name
        if url is not None:
            blink.url = url
        blink.updated_at = utc_now()

        await self._commit(db, blink.redirect_id)
        await db.refresh(blink)
        clear_redirect_cache(previous_redirect_id)
        return blink

    async def delete(self, db: AsyncSession, workspace_id: str, blink_id: str) -> None:
        blink = await self.get(db, workspace_id, blink_id)
        redirect_id = blink.redirect_id
        await db.execute(delete(Blink).where(col(Blink.id) == blink_id))
        await db.commit()
        clear_redirect_cache(redirect_id)

    @staticmethod
    async def _commit(db: AsyncSession, redirect_id: str) -> None:
        # The unique index decides races between check and write
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise RedirectIdConflictError(redirect_id) from e
