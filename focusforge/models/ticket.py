"""
Ticket ORM model.
"""

from __future__ import annotations

import enum
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Column, Date, Enum, ForeignKey, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from focusforge.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from focusforge.models.comment import Comment
    from focusforge.models.project import Project
    from focusforge.models.team import Team
    from focusforge.models.user import User


class TicketStatus(str, enum.Enum):
    todo = "todo"
    in_progress = "in_progress"
    review = "review"
    done = "done"


class TicketPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


ticket_assignees = Table(
    "ticket_assignees",
    Base.metadata,
    Column("ticket_id", ForeignKey("tickets.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Ticket(Base, UUIDMixin, TimestampMixin):
    """A unit of work on a project board."""

    __tablename__ = "tickets"

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TicketStatus] = mapped_column(
        Enum(TicketStatus, name="ticket_status"),
        nullable=False,
        default=TicketStatus.todo,
    )
    priority: Mapped[TicketPriority] = mapped_column(
        Enum(TicketPriority, name="ticket_priority"),
        nullable=False,
        default=TicketPriority.medium,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    team_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("teams.id", ondelete="SET NULL"),
        nullable=True,
    )
    creator_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    project: Mapped[Project] = relationship("Project", back_populates="tickets")
    team: Mapped[Team | None] = relationship("Team", lazy="selectin")
    creator: Mapped[User] = relationship("User", lazy="selectin")
    assignees: Mapped[list[User]] = relationship(
        "User", secondary=ticket_assignees, lazy="selectin"
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment", back_populates="ticket", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Ticket id={self.id} title={self.title!r} project_id={self.project_id}>"
