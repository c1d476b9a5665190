"""Database session management.

PostgreSQL (asyncpg) in deployment, SQLite (aiosqlite) for tests and
local runs. SQLite needs foreign keys switched on per connection for the
ON DELETE rules to fire.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool
from sqlmodel import SQLModel

from blink.app.config import get_settings
from blink.core.logging_schema import LogEvent

# Registers every table on SQLModel.metadata
from blink.core import models  # noqa: F401

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Build an async engine for the given URL."""
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=echo)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    database = get_settings().database
    return create_async_engine(
        url,
        echo=echo,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_recycle=3600,
        pool_pre_ping=True,
        poolclass=AsyncAdaptedQueuePool,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def init_db(url: str | None = None, create_all: bool = True) -> None:
    global _engine, _session_factory

    settings = get_settings()
    url = url or settings.database.url

    _engine = create_engine(url, echo=settings.database.echo)
    _session_factory = create_session_factory(_engine)

    try:
        async with _engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        if create_all:
            await create_tables(_engine)
        logger.info(
            "Database connected",
            extra={
                "event": LogEvent.DB_CONNECTED,
                "dialect": _engine.dialect.name,
            },
        )
    except Exception as e:
        logger.error(
            "Database connection failed",
            extra={
                "event": LogEvent.DB_ERROR,
                "error_type": type(e).__name__,
                "error": str(e),
            },
        )
        raise


async def close_db() -> None:
    global _engine, _session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized")
    return _engine


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized")

    async with _session_factory() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get session factory for creating sessions outside a request."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized")
    return _session_factory
