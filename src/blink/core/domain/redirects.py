"""Redirect id vocabulary.

Short links are served at /{redirect_id}, next to the app's own
top-level routes. A redirect id equal to one of those segments would be
shadowed by the route and never redirect, so those ids are reserved.
"""

RESERVED_REDIRECT_IDS = frozenset({
    # API routers
    "auth",
    "users",
    "workspaces",
    # Operational endpoints
    "health",
    "metrics",
    # FastAPI docs
    "docs",
    "redoc",
    "openapi.json",
})


def is_reserved_redirect_id(redirect_id: str) -> bool:
    return redirect_id in RESERVED_REDIRECT_IDS
