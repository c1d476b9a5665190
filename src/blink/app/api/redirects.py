"""Public short link redirects.

Any method on /{redirect_id} answers 308 to the blink's URL. 308
keeps the method and body, so a POST to a short link stays a POST.
The caller's query string is merged after the target's own query; the
target's fragment is kept.
"""

from urllib.parse import urlsplit, urlunsplit

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from blink.app.api.dependencies import DbSession, ServicesDep
from blink.app.metrics.collector import REDIRECTS_TOTAL
from blink.core.errors import RedirectNotFoundError

router = APIRouter(tags=["redirects"])

REDIRECT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def build_location(target: str, incoming_query: str) -> str:
    """Append incoming_query to target's query, keeping its fragment."""
    if not incoming_query:
        return target
    parts = urlsplit(target)
    query = f"{parts.query}&{incoming_query}" if parts.query else incoming_query
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


@router.api_route("/{redirect_id}", methods=REDIRECT_METHODS, include_in_schema=False)
async def redirect(
    redirect_id: str,
    request: Request,
    db: DbSession,
    services: ServicesDep,
) -> RedirectResponse:
    try:
        url = await services.blinks.resolve_redirect_url(db, redirect_id)
    except RedirectNotFoundError:
        REDIRECTS_TOTAL.labels(result="not_found").inc()
        raise
    REDIRECTS_TOTAL.labels(result="found").inc()

    settings = services.settings
    max_age = settings.redirect.cache_seconds if settings.app.is_production else 0
    return RedirectResponse(
        url=build_location(url, request.url.query),
        status_code=308,
        headers={"Cache-Control": f"public, max-age={max_age}, must-revalidate"},
    )
