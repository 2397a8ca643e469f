"""
Comment endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.core.database import get_db
from focusforge.core.dependencies import get_current_user
from focusforge.models.user import User
from focusforge.schemas.comment import CommentCreateRequest, CommentListResponse, CommentResponse
from focusforge.services.comment_service import CommentService

router = APIRouter()


def get_comment_service(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db=db)


@router.post(
    "/comments/{ticket_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a ticket",
)
async def create_comment(
    ticket_id: UUID,
    data: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.create_comment(ticket_id, data, current_user)


@router.get(
    "/comments/{ticket_id}",
    response_model=CommentListResponse,
    summary="List comments on a ticket",
)
async def list_comments(
    ticket_id: UUID,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    return await service.list_comments(ticket_id, current_user)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete a comment",
)
async def delete_comment(
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> dict:
    await service.delete_comment(comment_id, current_user)
    return {"message": "Comment deleted successfully"}
