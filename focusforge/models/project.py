"""
Project and ProjectMember ORM models.
"""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Date, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from focusforge.models.base import Base, TimestampMixin, UUIDMixin, created_at_column

if TYPE_CHECKING:
    from focusforge.models.invitation import ProjectInvitation
    from focusforge.models.ticket import Ticket
    from focusforge.models.user import User


class ProjectStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    archived = "archived"


class ProjectType(str, enum.Enum):
    backend = "backend"
    frontend = "frontend"
    design = "design"


class ProjectRole(str, enum.Enum):
    """Project member role enumeration."""

    owner = "owner"
    admin = "admin"
    member = "member"


class Project(Base, UUIDMixin, TimestampMixin):
    """A board of tickets owned by one user and shared with members."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus, name="project_status"),
        nullable=False,
        default=ProjectStatus.active,
    )
    type: Mapped[ProjectType] = mapped_column(
        Enum(ProjectType, name="project_type"),
        nullable=False,
        default=ProjectType.backend,
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    owner_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    owner: Mapped[User] = relationship("User", lazy="selectin")
    members: Mapped[list[ProjectMember]] = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProjectMember.joined_at",
    )
    tickets: Mapped[list[Ticket]] = relationship(
        "Ticket", back_populates="project", cascade="all, delete-orphan"
    )
    invitations: Mapped[list[ProjectInvitation]] = relationship(
        "ProjectInvitation", back_populates="project", cascade="all, delete-orphan"
    )

    def member_role(self, user_id: UUID) -> ProjectRole | None:
        """Role of user_id in this project, or None when not a member."""
        if self.owner_id == user_id:
            return ProjectRole.owner
        for member in self.members:
            if member.user_id == user_id:
                return member.role
        return None

    def __repr__(self) -> str:
        return f"<Project id={self.id} name={self.name!r} owner_id={self.owner_id}>"


class ProjectMember(Base, UUIDMixin):
    """Join table linking users to projects with a role."""

    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[ProjectRole] = mapped_column(
        Enum(ProjectRole, name="project_role"), nullable=False, default=ProjectRole.member
    )
    joined_at: Mapped[datetime] = created_at_column()

    # Relationships
    project: Mapped[Project] = relationship("Project", back_populates="members")
    user: Mapped[User] = relationship(
        "User", back_populates="project_memberships", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<ProjectMember project_id={self.project_id} user_id={self.user_id} role={self.role}>"
