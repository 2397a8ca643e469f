"""
Business logic for notifications.
Handles creation (with preference checks) and read-state management.
All queries scoped by user_id.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.models.notification import Notification, NotificationType
from focusforge.models.user import User
from focusforge.schemas.notification import (
    MarkAllReadResponse,
    NotificationCreate,
    NotificationListResponse,
    NotificationResponse,
)

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": "NOTIFICATION_NOT_FOUND", "message": "Notification not found."},
    )


class NotificationService:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Create notification records in the DB
    # Called from ticket, comment and invitation services
    # ------------------------------------------------------------------

    async def create(self, data: NotificationCreate) -> Notification | None:
        """
        Insert a notification row unless the recipient is unknown or has
        opted out of this notification type.
        """
        recipient = await self._db.get(User, data.user_id)
        if recipient is None:
            logger.debug("Notification skipped, unknown recipient %s", data.user_id)
            return None
        if not recipient.wants_notification(data.type):
            logger.debug("%s notification skipped, user %s opted out", data.type.value, recipient.id)
            return None

        notification = Notification(
            user_id=data.user_id,
            type=data.type,
            title=data.title,
            message=data.message,
            entity_type=data.entity_type,
            entity_id=data.entity_id,
            related_comment_id=data.related_comment_id,
            is_read=False,
        )
        self._db.add(notification)
        await self._db.flush()
        return notification

    async def notify(
        self,
        user_ids: Iterable[uuid.UUID],
        type: NotificationType,
        title: str,
        message: str,
        entity_type: str | None = None,
        entity_id: uuid.UUID | None = None,
        related_comment_id: uuid.UUID | None = None,
    ) -> int:
        """Create the same notification for each recipient. Returns how many were stored."""
        created = 0
        for user_id in user_ids:
            notification = await self.create(
                NotificationCreate(
                    user_id=user_id,
                    type=type,
                    title=title,
                    message=message,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    related_comment_id=related_comment_id,
                )
            )
            if notification is not None:
                created += 1
        return created

    # ------------------------------------------------------------------
    # GET /notifications
    # ------------------------------------------------------------------

    async def list_notifications(
        self,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 20,
        unread_only: bool = False,
    ) -> NotificationListResponse:
        base_where = (Notification.user_id == user_id,)

        total = await self._db.scalar(
            select(func.count()).select_from(Notification).where(*base_where)
        ) or 0
        unread_count = await self._db.scalar(
            select(func.count())
            .select_from(Notification)
            .where(*base_where, Notification.is_read.is_(False))
        ) or 0

        page_where = base_where + ((Notification.is_read.is_(False),) if unread_only else ())
        result = await self._db.execute(
            select(Notification)
            .where(*page_where)
            .order_by(Notification.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        notifications = result.scalars().all()

        return NotificationListResponse(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            total=total,
            unread_count=unread_count,
        )

    # ------------------------------------------------------------------
    # PUT/PATCH /notifications/{id}/read
    # ------------------------------------------------------------------

    async def mark_read(
        self,
        notification_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> NotificationResponse:
        """Scoped to user_id to prevent cross-user updates."""
        notification = await self._db.scalar(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        if notification is None:
            raise _not_found()

        notification.is_read = True
        await self._db.flush()
        return NotificationResponse.model_validate(notification)

    # ------------------------------------------------------------------
    # PUT /notifications/mark-all-read
    # ------------------------------------------------------------------

    async def mark_all_read(self, user_id: uuid.UUID) -> MarkAllReadResponse:
        result = await self._db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        count = result.rowcount or 0
        return MarkAllReadResponse(
            message=f"{count} notifications marked as read", count=count
        )

    # ------------------------------------------------------------------
    # DELETE /notifications/{id}
    # ------------------------------------------------------------------

    async def delete(self, notification_id: uuid.UUID, user_id: uuid.UUID) -> None:
        result = await self._db.execute(
            delete(Notification)
            .where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            raise _not_found()
