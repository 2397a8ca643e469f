"""
Ticket endpoints.

POST   /tickets/project/{project_id}   create ticket
GET    /tickets/project/{project_id}   list project tickets
GET    /tickets/{ticket_id}            ticket detail
PUT    /tickets/{ticket_id}            partial update
DELETE /tickets/{ticket_id}            delete
"""

from __future__ import annotations

from uuid import UUID

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.core.database import get_db
from focusforge.core.dependencies import get_current_user, get_redis
from focusforge.models.user import User
from focusforge.schemas.ticket import (
    TicketCreateRequest,
    TicketListResponse,
    TicketResponse,
    TicketUpdateRequest,
)
from focusforge.services.ticket_service import TicketService

router = APIRouter()


def get_ticket_service(
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
) -> TicketService:
    return TicketService(db=db, redis=redis)


@router.post(
    "/tickets/project/{project_id}",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a ticket",
)
async def create_ticket(
    project_id: UUID,
    data: TicketCreateRequest,
    current_user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service),
) -> TicketResponse:
    return await service.create_ticket(project_id, data, current_user)


@router.get(
    "/tickets/project/{project_id}",
    response_model=TicketListResponse,
    summary="List tickets in a project",
)
async def list_tickets(
    project_id: UUID,
    status_filter: str | None = Query(
        default=None, alias="status", pattern="^(todo|in_progress|review|done)$"
    ),
    priority: str | None = Query(default=None, pattern="^(low|medium|high|urgent)$"),
    current_user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service),
) -> TicketListResponse:
    return await service.list_tickets(
        project_id,
        current_user,
        status_filter=status_filter,
        priority_filter=priority,
    )


@router.get(
    "/tickets/{ticket_id}",
    response_model=TicketResponse,
    summary="Get ticket detail",
)
async def get_ticket(
    ticket_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service),
) -> TicketResponse:
    return await service.get_ticket(ticket_id, current_user)


@router.put(
    "/tickets/{ticket_id}",
    response_model=TicketResponse,
    summary="Update ticket",
)
async def update_ticket(
    ticket_id: UUID,
    data: TicketUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service),
) -> TicketResponse:
    return await service.update_ticket(ticket_id, data, current_user)


@router.delete(
    "/tickets/{ticket_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete ticket",
)
async def delete_ticket(
    ticket_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service),
) -> dict:
    """Ticket creator or project owner only."""
    await service.delete_ticket(ticket_id, current_user)
    return {"message": "Ticket deleted successfully"}
