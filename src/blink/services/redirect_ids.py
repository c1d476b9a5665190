"""Redirect id (short code) allocation.

Ids are random draws from RedirectConfig.id_alphabet. With the default
36^8 space a collision is rare, so a handful of retries is enough. When
retries run out it means the id length needs raising, which is an
operator problem (500), not a client one.
"""

import logging
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from blink.app.config import RedirectConfig
from blink.app.metrics.collector import REDIRECT_ID_COLLISIONS_TOTAL
from blink.core.domain import is_reserved_redirect_id
from blink.core.errors import (
    RedirectIdConflictError,
    RedirectIdGenerationExhaustedError,
    RedirectIdReservedError,
)
from blink.core.logging_schema import LogEvent
from blink.core.models import Blink

logger = logging.getLogger(__name__)


class RedirectIdAllocator:
    """Generates redirect ids and checks them against existing blinks."""

    def __init__(self, config: RedirectConfig) -> None:
        self.length = config.id_length
        self.alphabet = config.id_alphabet
        self.max_retries = config.max_generation_retries

    def generate(self) -> str:
        return "".join(secrets.choice(self.alphabet) for _ in range(self.length))

    async def _owner_of(self, db: AsyncSession, redirect_id: str) -> str | None:
        result = await db.execute(
            select(col(Blink.id)).where(col(Blink.redirect_id) == redirect_id)
        )
        return result.scalar_one_or_none()

    async def allocate_unused(self, db: AsyncSession) -> str:
        """Return a generated id that no blink uses yet.

        The unique index still arbitrates a race between check and insert.

        Raises:
            RedirectIdGenerationExhaustedError: Every attempt collided
        """
        for attempt in range(1, self.max_retries + 1):
            candidate = self.generate()
            if is_reserved_redirect_id(candidate):
                continue
            if await self._owner_of(db, candidate) is None:
                return candidate

            REDIRECT_ID_COLLISIONS_TOTAL.inc()
            logger.warning(
                "Generated redirect id already taken",
                extra={
                    "event": LogEvent.REDIRECT_ID_COLLISION,
                    "redirect_id": candidate,
                    "attempt": attempt,
                },
            )

        logger.error(
            "Redirect id generation exhausted",
            extra={
                "event": LogEvent.REDIRECT_ID_EXHAUSTED,
                "attempts": self.max_retries,
                "id_length": self.length,
            },
        )
        raise RedirectIdGenerationExhaustedError()

    async def ensure_available(
        self,
        db: AsyncSession,
        redirect_id: str,
        exclude_blink_id: str | None = None,
    ) -> None:
        """Check that a chosen redirect_id can be used.

        Args:
            exclude_blink_id: Blink being updated (may keep its own id)

        Raises:
            RedirectIdReservedError: redirect_id shadows an app route
            RedirectIdConflictError: Another blink owns redirect_id
        """
        if is_reserved_redirect_id(redirect_id):
            raise RedirectIdReservedError(redirect_id)
        owner = await self._owner_of(db, redirect_id)
        if owner is not None and owner != exclude_blink_id:
            raise RedirectIdConflictError(redirect_id)
