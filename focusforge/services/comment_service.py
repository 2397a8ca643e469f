"""
Comment business logic.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.models.comment import Comment
from focusforge.models.notification import NotificationType
from focusforge.models.ticket import Ticket
from focusforge.models.user import User
from focusforge.schemas.comment import CommentCreateRequest, CommentListResponse, CommentResponse
from focusforge.services.notification_service import NotificationService
from focusforge.services.project_service import get_accessible_project

logger = logging.getLogger(__name__)


class CommentService:

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.notifications = NotificationService(db)

    async def list_comments(self, ticket_id: UUID, user: User) -> CommentListResponse:
        """Comments on a ticket, newest first."""
        await self._get_ticket(ticket_id, user)

        result = await self.db.execute(
            select(Comment)
            .where(Comment.ticket_id == ticket_id)
            .order_by(Comment.created_at.desc())
        )
        comments = [CommentResponse.model_validate(c) for c in result.scalars().all()]
        return CommentListResponse(comments=comments, total=len(comments))

    async def create_comment(
        self, ticket_id: UUID, data: CommentCreateRequest, author: User
    ) -> CommentResponse:
        """
        Create a comment on a ticket.

        The ticket creator and every assignee are notified once each,
        never the author.
        """
        ticket = await self._get_ticket(ticket_id, author)

        comment = Comment(ticket_id=ticket.id, author_id=author.id, content=data.content)
        self.db.add(comment)
        await self.db.flush()

        recipients: list[UUID] = []
        for user_id in [ticket.creator_id] + [u.id for u in ticket.assignees]:
            if user_id != author.id and user_id not in recipients:
                recipients.append(user_id)

        await self.notifications.notify(
            recipients,
            type=NotificationType.comment,
            title="New comment",
            message=f'{author.display_name} commented on "{ticket.title}"',
            entity_type="ticket",
            entity_id=ticket.id,
            related_comment_id=comment.id,
        )

        result = await self.db.execute(
            select(Comment)
            .where(Comment.id == comment.id)
            .execution_options(populate_existing=True)
        )
        return CommentResponse.model_validate(result.scalar_one())

    async def delete_comment(self, comment_id: UUID, actor: User) -> None:
        """Only the author can delete a comment."""
        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "COMMENT_NOT_FOUND", "message": "Comment not found"},
            )
        if comment.author_id != actor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"code": "FORBIDDEN", "message": "You can only delete your own comments"},
            )

        await self.db.delete(comment)
        await self.db.flush()

    async def _get_ticket(self, ticket_id: UUID, user: User) -> Ticket:
        ticket = await self.db.get(Ticket, ticket_id)
        if ticket is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "TICKET_NOT_FOUND", "message": "Ticket not found"},
            )
        await get_accessible_project(self.db, ticket.project_id, user)
        return ticket
