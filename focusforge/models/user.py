"""
Accounts. Sign-in is email and password only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from focusforge.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from focusforge.models.comment import Comment
    from focusforge.models.notification import Notification, NotificationType
    from focusforge.models.project import ProjectMember


class User(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "users"

    # Stored lowercased by the auth and invitation services
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    display_name: Mapped[str] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    email_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    notify_new_comments: Mapped[bool] = mapped_column(Boolean, default=True)
    notify_ticket_assignment: Mapped[bool] = mapped_column(Boolean, default=True)

    project_memberships: Mapped[list[ProjectMember]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    comments: Mapped[list[Comment]] = relationship(
        back_populates="author", cascade="all, delete-orphan"
    )
    notifications: Mapped[list[Notification]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def wants_notification(self, kind: NotificationType) -> bool:
        """Comment and assignment notices can be switched off; the rest always arrive."""
        opt_outs = {
            "comment": self.notify_new_comments,
            "ticket_assignment": self.notify_ticket_assignment,
        }
        return opt_outs.get(kind.value, True)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
