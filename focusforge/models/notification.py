"""
ORM model for notifications table.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from focusforge.models.base import Base, UUIDMixin, created_at_column

if TYPE_CHECKING:
    from focusforge.models.user import User


class NotificationType(str, enum.Enum):
    comment = "comment"
    ticket_assignment = "ticket_assignment"
    ticket_update = "ticket_update"
    project_invitation = "project_invitation"
    project_invitation_accepted = "project_invitation_accepted"
    project_invitation_rejected = "project_invitation_rejected"
    team_invitation = "team_invitation"
    team_invitation_accepted = "team_invitation_accepted"
    team_invitation_rejected = "team_invitation_rejected"


class Notification(Base, UUIDMixin):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_is_read", "user_id", "is_read"),
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, name="notification_type"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # ticket / project / team the notification points at
    entity_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    entity_id: Mapped[UUID | None] = mapped_column(nullable=True)
    related_comment_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("comments.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = created_at_column(index=True)

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="notifications")

    def __repr__(self) -> str:
        return f"<Notification id={self.id} type={self.type} user_id={self.user_id}>"
