"""HTTP API routers."""

from blink.app.api.auth import router as auth_router
from blink.app.api.blinks import router as blinks_router
from blink.app.api.members import router as members_router
from blink.app.api.redirects import router as redirects_router
from blink.app.api.users import router as users_router
from blink.app.api.workspaces import router as workspaces_router

__all__ = [
    "auth_router",
    "blinks_router",
    "members_router",
    "redirects_router",
    "users_router",
    "workspaces_router",
]
