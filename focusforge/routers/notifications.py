"""
Inbox endpoints. Every route only ever sees the caller's own notifications.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.core.database import get_db
from focusforge.core.dependencies import get_current_user
from focusforge.models.user import User
from focusforge.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from focusforge.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications")


def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    return NotificationService(db=db)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    unread_only: bool = False,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """Newest first. ``total`` and ``unread_count`` ignore paging."""
    return await service.list_notifications(
        current_user.id, skip=skip, limit=limit, unread_only=unread_only
    )


# Declared before /{notification_id}/read so "mark-all-read" is not parsed as an id
@router.put("/mark-all-read", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> MarkAllReadResponse:
    return await service.mark_all_read(current_user.id)


@router.api_route(
    "/{notification_id}/read",
    methods=["PUT", "PATCH"],
    response_model=NotificationResponse,
)
async def mark_notification_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    return await service.mark_read(notification_id, current_user.id)


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> dict:
    await service.delete(notification_id, current_user.id)
    return {"message": "Notification deleted"}
