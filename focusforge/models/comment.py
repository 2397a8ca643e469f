"""
Ticket comments. They go away with their ticket or their author.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from focusforge.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from focusforge.models.ticket import Ticket
    from focusforge.models.user import User


class Comment(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "comments"

    ticket_id: Mapped[UUID] = mapped_column(ForeignKey("tickets.id", ondelete="CASCADE"), index=True)
    author_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    content: Mapped[str] = mapped_column(Text)

    ticket: Mapped[Ticket] = relationship(back_populates="comments")
    # Loaded eagerly so responses can embed the author summary
    author: Mapped[User] = relationship(back_populates="comments", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Comment {self.id} on ticket {self.ticket_id}>"
