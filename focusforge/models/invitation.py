"""
Team and project invitation ORM models.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from focusforge.models.base import Base, TimestampMixin, UUIDMixin, as_utc
from focusforge.models.team import TeamRole

if TYPE_CHECKING:
    from focusforge.models.project import Project
    from focusforge.models.team import Team
    from focusforge.models.user import User


class InvitationStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    expired = "expired"


class InvitationMixin:
    """Columns shared by team and project invitations."""

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[TeamRole] = mapped_column(
        Enum(TeamRole, name="invitation_role"), nullable=False, default=TeamRole.member
    )
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    status: Mapped[InvitationStatus] = mapped_column(
        Enum(InvitationStatus, name="invitation_status"),
        nullable=False,
        default=InvitationStatus.pending,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    invited_user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    invited_by_user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_expired(self, now: datetime) -> bool:
        return as_utc(self.expires_at) < now


class TeamInvitation(Base, UUIDMixin, TimestampMixin, InvitationMixin):
    """Pending invitation for a person to join a team."""

    __tablename__ = "team_invitations"
    __table_args__ = (
        Index("ix_team_invitations_team_status", "team_id", "status"),
        Index("ix_team_invitations_email_status", "email", "status"),
    )

    team_id: Mapped[UUID] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Relationships
    team: Mapped[Team] = relationship("Team", back_populates="invitations", lazy="selectin")
    invited_by: Mapped[User] = relationship(
        "User", foreign_keys="TeamInvitation.invited_by_user_id", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<TeamInvitation id={self.id} email={self.email!r} status={self.status}>"


class ProjectInvitation(Base, UUIDMixin, TimestampMixin, InvitationMixin):
    """Pending invitation for a person to join a project."""

    __tablename__ = "project_invitations"
    __table_args__ = (
        Index("ix_project_invitations_project_status", "project_id", "status"),
        Index("ix_project_invitations_email_status", "email", "status"),
    )

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    project: Mapped[Project] = relationship(
        "Project", back_populates="invitations", lazy="selectin"
    )
    invited_by: Mapped[User] = relationship(
        "User", foreign_keys="ProjectInvitation.invited_by_user_id", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<ProjectInvitation id={self.id} email={self.email!r} status={self.status}>"
