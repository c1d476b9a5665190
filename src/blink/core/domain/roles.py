"""Workspace member roles.

Roles are totally ordered: ADMINISTRATOR outranks DEFAULT. Every
permission check is "role at least X", never an exact match.
"""

from enum import StrEnum


class WorkspaceMemberRole(StrEnum):
    """Role of a user within one workspace."""

    DEFAULT = "DEFAULT"
    ADMINISTRATOR = "ADMINISTRATOR"


ROLE_PRIORITY: dict[WorkspaceMemberRole, int] = {
    WorkspaceMemberRole.DEFAULT: 0,
    WorkspaceMemberRole.ADMINISTRATOR: 1,
}


def has_at_least(role: WorkspaceMemberRole, minimum: WorkspaceMemberRole) -> bool:
    return ROLE_PRIORITY[WorkspaceMemberRole(role)] >= ROLE_PRIORITY[minimum]


def roles_at_least(minimum: WorkspaceMemberRole) -> list[WorkspaceMemberRole]:
    """All roles ranking at or above minimum, lowest first."""
    return sorted(
        (role for role in WorkspaceMemberRole if has_at_least(role, minimum)),
        key=ROLE_PRIORITY.__getitem__,
    )
