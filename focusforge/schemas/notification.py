"""
Notification payloads.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from focusforge.models.notification import NotificationType


class NotificationCreate(BaseModel):
    """What the other services hand to NotificationService.create."""

    user_id: uuid.UUID
    type: NotificationType
    title: str
    message: str
    entity_type: str | None = None
    entity_id: uuid.UUID | None = None
    related_comment_id: uuid.UUID | None = None


class NotificationResponse(NotificationCreate):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    unread_count: int


class MarkAllReadResponse(BaseModel):
    message: str
    count: int
