"""Infrastructure connections (DB, Cache)."""

from blink.infra.cache import clear_redirect_cache, redirect_cache
from blink.infra.database import (
    close_db,
    create_engine,
    create_session_factory,
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
)

__all__ = [
    # Cache
    "redirect_cache",
    "clear_redirect_cache",
    # DB
    "init_db",
    "close_db",
    "create_engine",
    "create_session_factory",
    "create_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
]
