"""Page/limit helpers shared by list endpoints."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    total: int


async def paginate(db: AsyncSession, stmt: Select, page: int, limit: int) -> Page:
    """Run stmt for one page and count the unpaged result.

    stmt must already carry its ORDER BY.
    """
    total = await db.scalar(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    )
    result = await db.execute(stmt.limit(limit).offset((page - 1) * limit))
    return Page(items=list(result.scalars().all()), total=total or 0)
