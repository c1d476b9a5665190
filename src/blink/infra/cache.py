"""TTL cache for the public redirect path.

Popular short links are hit far more often than they change. A short
TTL keeps edits visible within seconds without a DB read per redirect.
Configuration via RedirectConfig (REDIRECT_ env prefix).

Entries are the asyncio Futures cachetools_async stores, so concurrent
lookups of one redirect id share a single query.
"""

from asyncio import Future

from cachetools import TTLCache

from blink.app.config import get_settings

_redirect_config = get_settings().redirect

redirect_cache: TTLCache[str, Future[str]] = TTLCache(
    maxsize=_redirect_config.lookup_cache_maxsize,
    ttl=_redirect_config.lookup_cache_ttl,
)


def clear_redirect_cache(redirect_id: str | None = None) -> None:
    if redirect_id is None:
        redirect_cache.clear()
    else:
        redirect_cache.pop(redirect_id, None)
