"""
Comment schemas.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from focusforge.schemas.auth import UserSummaryResponse


class CommentCreateRequest(BaseModel):
    """Request body for POST /comments/{ticket_id}."""

    content: str = Field(min_length=1, max_length=10000)

    @field_validator("content")
    @classmethod
    def content_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment content is required")
        return v


class CommentResponse(BaseModel):
    id: UUID
    ticket_id: UUID
    author_id: UUID
    content: str
    author: UserSummaryResponse | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
    total: int
