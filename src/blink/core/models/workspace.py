"""Workspace and membership models."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from blink.core.domain import WorkspaceMemberRole
from blink.core.models.auth import generate_ulid, utc_now


class Workspace(SQLModel, table=True):
    """Workspace model.

    Deleting the creator deletes the workspace.
    """

    __tablename__ = "workspaces"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    name: str = Field(max_length=255)
    creator_id: str = Field(
        sa_column=Column(
            String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
        )
    )
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class WorkspaceMember(SQLModel, table=True):
    """Membership of one user in one workspace."""

    __tablename__ = "workspace_members"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    workspace_id: str = Field(
        sa_column=Column(
            String,
            ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    user_id: str = Field(
        sa_column=Column(
            String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
        )
    )
    creator_id: str | None = Field(
        default=None,
        sa_column=Column(
            String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
        ),
    )
    role: WorkspaceMemberRole = Field(
        default=WorkspaceMemberRole.DEFAULT, sa_type=String
    )
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_workspace_members_user"),
    )
