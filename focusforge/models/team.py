"""
Team and TeamMember ORM models.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from focusforge.models.base import Base, TimestampMixin, UUIDMixin, created_at_column

if TYPE_CHECKING:
    from focusforge.models.invitation import TeamInvitation
    from focusforge.models.user import User


class TeamRole(str, enum.Enum):
    """Team member role enumeration. Also used for invitation roles."""

    admin = "admin"
    member = "member"


class Team(Base, UUIDMixin, TimestampMixin):
    """A named group of people with contact details."""

    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    creator: Mapped[User | None] = relationship("User", lazy="selectin")
    members: Mapped[list[TeamMember]] = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="TeamMember.added_at",
    )
    invitations: Mapped[list[TeamInvitation]] = relationship(
        "TeamInvitation", back_populates="team", cascade="all, delete-orphan"
    )

    def has_member(self, user_id: UUID) -> bool:
        return any(m.user_id == user_id for m in self.members)

    def __repr__(self) -> str:
        return f"<Team id={self.id} name={self.name!r}>"


class TeamMember(Base, UUIDMixin):
    """
    A person on a team.

    Carries its own contact info; user_id is set once the person has an account.
    """

    __tablename__ = "team_members"

    team_id: Mapped[UUID] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    role: Mapped[TeamRole] = mapped_column(
        Enum(TeamRole, name="team_role"), nullable=False, default=TeamRole.member
    )
    added_at: Mapped[datetime] = created_at_column()

    # Relationships
    team: Mapped[Team] = relationship("Team", back_populates="members")

    def __repr__(self) -> str:
        return f"<TeamMember team_id={self.team_id} email={self.email!r} role={self.role}>"
