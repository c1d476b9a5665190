"""Blink (short link) model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlmodel import Field, SQLModel

from blink.core.models.auth import generate_ulid, utc_now


class Blink(SQLModel, table=True):
    """Short link owned by a workspace.

    redirect_id is unique across all workspaces. creator_id becomes NULL
    when the creating user is deleted; the blink stays in its workspace.
    """

    __tablename__ = "blinks"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    workspace_id: str = Field(
        sa_column=Column(
            String,
            ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    creator_id: str | None = Field(
        default=None,
        sa_column=Column(
            String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
        ),
    )
    name: str = Field(max_length=255)
    url: str = Field(sa_column=Column(Text, nullable=False))
    redirect_id: str = Field(unique=True, index=True, max_length=64)
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )
