"""Services module."""

from blink.services.auth_service import AuthService, LoginResult, RefreshResult
from blink.services.blink_service import BlinkService
from blink.services.member_service import MemberService
from blink.services.pagination import Page
from blink.services.redirect_ids import RedirectIdAllocator
from blink.services.session_service import SessionService
from blink.services.user_service import UserService
from blink.services.workspace_service import WorkspaceService

__all__ = [
    "AuthService",
    "BlinkService",
    "LoginResult",
    "MemberService",
    "Page",
    "RedirectIdAllocator",
    "RefreshResult",
    "SessionService",
    "UserService",
    "WorkspaceService",
]
