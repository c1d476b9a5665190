"""Domain models and enums."""

from blink.core.domain.redirects import RESERVED_REDIRECT_IDS, is_reserved_redirect_id
from blink.core.domain.roles import (
    ROLE_PRIORITY,
    WorkspaceMemberRole,
    has_at_least,
    roles_at_least,
)

__all__ = [
    "WorkspaceMemberRole",
    "ROLE_PRIORITY",
    "has_at_least",
    "roles_at_least",
    "RESERVED_REDIRECT_IDS",
    "is_reserved_redirect_id",
]
