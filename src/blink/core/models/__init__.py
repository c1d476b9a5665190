"""Database models for blink.

Models are defined using SQLModel (SQLAlchemy + Pydantic).
"""

from blink.core.models.auth import Session, User, generate_ulid, utc_now
from blink.core.models.blink import Blink
from blink.core.models.workspace import Workspace, WorkspaceMember

__all__ = [
    "User",
    "Session",
    "Workspace",
    "WorkspaceMember",
    "Blink",
    "generate_ulid",
    "utc_now",
]
