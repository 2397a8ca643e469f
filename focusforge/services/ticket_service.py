"""
Ticket business logic.

Handles ticket CRUD, assignee validation, project-count enrichment of
assignees and assignment/status notifications.
"""

from __future__ import annotations

import logging
from uuid import UUID

import redis.asyncio as aioredis
from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.models.notification import NotificationType
from focusforge.models.team import Team
from focusforge.models.ticket import Ticket, TicketPriority, TicketStatus
from focusforge.models.user import User
from focusforge.schemas.auth import UserSummaryResponse
from focusforge.schemas.ticket import (
    AssigneeResponse,
    TicketCreateRequest,
    TicketListResponse,
    TicketResponse,
    TicketTeamSummary,
    TicketUpdateRequest,
)
from focusforge.services.notification_service import NotificationService
from focusforge.services.project_service import count_user_projects, get_accessible_project

logger = logging.getLogger(__name__)


def _dedupe(ids: list[UUID]) -> list[UUID]:
    seen: list[UUID] = []
    for user_id in ids:
        if user_id not in seen:
            seen.append(user_id)
    return seen


class TicketService:
    """Handles ticket operations within a project the caller can access."""

    def __init__(self, db: AsyncSession, redis: aioredis.Redis) -> None:
        self.db = db
        self.redis = redis
        self.notifications = NotificationService(db)

    # -----------------------------------------------------------------------
    # List
    # -----------------------------------------------------------------------

    async def list_tickets(
        self,
        project_id: UUID,
        user: User,
        status_filter: str | None = None,
        priority_filter: str | None = None,
    ) -> TicketListResponse:
        """List a project's tickets, newest first, optionally filtered."""
        await get_accessible_project(self.db, project_id, user)

        stmt = select(Ticket).where(Ticket.project_id == project_id)
        if status_filter:
            stmt = stmt.where(Ticket.status == TicketStatus(status_filter))
        if priority_filter:
            stmt = stmt.where(Ticket.priority == TicketPriority(priority_filter))

        result = await self.db.execute(stmt.order_by(Ticket.created_at.desc()))
        tickets = list(result.scalars().all())

        counts: dict[UUID, int] = {}
        items = [await self._to_response(t, counts) for t in tickets]
        return TicketListResponse(tickets=items, total=len(items))

    # -----------------------------------------------------------------------
    # Create
    # -----------------------------------------------------------------------

    async def create_ticket(
        self, project_id: UUID, data: TicketCreateRequest, creator: User
    ) -> TicketResponse:
        """
        Create a ticket in a project.

        Every assignee receives a ticket_assignment notification.
        """
        await get_accessible_project(self.db, project_id, creator)

        if data.team_id is not None:
            await self._verify_team(data.team_id)
        assignees = await self._resolve_assignees(data.assignee_ids)

        ticket = Ticket(
            project_id=project_id,
            title=data.title,
            description=data.description,
            status=TicketStatus(data.status),
            priority=TicketPriority(data.priority),
            type=data.type,
            team_id=data.team_id,
            creator_id=creator.id,
            due_date=data.due_date,
            assignees=assignees,
        )
        self.db.add(ticket)
        await self.db.flush()
        logger.info("Ticket created id=%s project=%s", ticket.id, project_id)

        await self._notify_assigned(ticket, [u.id for u in assignees])

        return await self._to_response(await self._load(ticket.id))

    # -----------------------------------------------------------------------
    # Get
    # -----------------------------------------------------------------------

    async def get_ticket(self, ticket_id: UUID, user: User) -> TicketResponse:
        ticket = await self._get_accessible_ticket(ticket_id, user)
        return await self._to_response(ticket)

    # -----------------------------------------------------------------------
    # Update
    # -----------------------------------------------------------------------

    async def update_ticket(
        self, ticket_id: UUID, data: TicketUpdateRequest, actor: User
    ) -> TicketResponse:
        """
        Partially update a ticket.

        Only newly added assignees get ticket_assignment. A status change
        sends ticket_update to the creator and assignees, except the actor.
        """
        ticket = await self._get_accessible_ticket(ticket_id, actor)
        changes = data.model_dump(exclude_unset=True)

        old_status = ticket.status
        old_assignee_ids = [u.id for u in ticket.assignees]

        if changes.get("title") is not None:
            ticket.title = changes["title"]
        if "description" in changes:
            ticket.description = changes["description"]
        if changes.get("status") is not None:
            ticket.status = TicketStatus(changes["status"])
        if changes.get("priority") is not None:
            ticket.priority = TicketPriority(changes["priority"])
        if changes.get("type") is not None:
            ticket.type = changes["type"]
        if "team_id" in changes:
            if changes["team_id"] is not None:
                await self._verify_team(changes["team_id"])
            ticket.team_id = changes["team_id"]
        if "due_date" in changes:
            ticket.due_date = changes["due_date"]

        newly_assigned: list[UUID] = []
        if data.assignee_ids is not None:
            assignees = await self._resolve_assignees(data.assignee_ids)
            ticket.assignees = assignees
            newly_assigned = [u.id for u in assignees if u.id not in old_assignee_ids]

        await self.db.flush()

        await self._notify_assigned(ticket, newly_assigned)

        if ticket.status != old_status:
            recipients = _dedupe([ticket.creator_id] + [u.id for u in ticket.assignees])
            await self.notifications.notify(
                (uid for uid in recipients if uid != actor.id),
                type=NotificationType.ticket_update,
                title="Ticket updated",
                message=(
                    f'{actor.display_name} moved "{ticket.title}" '
                    f"from {old_status.value} to {ticket.status.value}"
                ),
                entity_type="ticket",
                entity_id=ticket.id,
            )

        return await self._to_response(await self._load(ticket.id))

    # -----------------------------------------------------------------------
    # Delete
    # -----------------------------------------------------------------------

    async def delete_ticket(self, ticket_id: UUID, actor: User) -> None:
        """Ticket creator or project owner only."""
        ticket = await self._get_accessible_ticket(ticket_id, actor)
        project = await get_accessible_project(self.db, ticket.project_id, actor)

        if ticket.creator_id != actor.id and project.owner_id != actor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "code": "FORBIDDEN",
                    "message": "Only the ticket creator or project owner can delete it",
                },
            )

        await self.db.delete(ticket)
        await self.db.flush()
        logger.info("Ticket deleted id=%s by=%s", ticket_id, actor.id)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _load(self, ticket_id: UUID) -> Ticket | None:
        result = await self.db.execute(
            select(Ticket)
            .where(Ticket.id == ticket_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_accessible_ticket(self, ticket_id: UUID, user: User) -> Ticket:
        ticket = await self._load(ticket_id)
        if ticket is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "TICKET_NOT_FOUND", "message": "Ticket not found"},
            )
        await get_accessible_project(self.db, ticket.project_id, user)
        return ticket

    async def _verify_team(self, team_id: UUID) -> None:
        if await self.db.get(Team, team_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"code": "INVALID_TEAM", "message": "Team does not exist"},
            )

    async def _resolve_assignees(self, assignee_ids: list[UUID]) -> list[User]:
        """Load assignees in request order, ignoring duplicates. 400 on unknown ids."""
        ids = _dedupe(assignee_ids)
        if not ids:
            return []
        result = await self.db.execute(select(User).where(User.id.in_(ids)))
        users = {u.id: u for u in result.scalars().all()}
        missing = [str(i) for i in ids if i not in users]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "code": "INVALID_ASSIGNEE",
                    "message": f"Unknown assignee(s): {', '.join(missing)}",
                },
            )
        return [users[i] for i in ids]

    async def _notify_assigned(self, ticket: Ticket, user_ids: list[UUID]) -> None:
        await self.notifications.notify(
            user_ids,
            type=NotificationType.ticket_assignment,
            title="Ticket assigned",
            message=f'You have been assigned to the ticket "{ticket.title}"',
            entity_type="ticket",
            entity_id=ticket.id,
        )

    async def _to_response(
        self, ticket: Ticket, counts: dict[UUID, int] | None = None
    ) -> TicketResponse:
        """Build the response, caching per-user project counts in counts."""
        if counts is None:
            counts = {}
        assignees: list[AssigneeResponse] = []
        for user in ticket.assignees:
            if user.id not in counts:
                counts[user.id] = await count_user_projects(self.db, user.id)
            assignees.append(
                AssigneeResponse(
                    id=user.id,
                    email=user.email,
                    display_name=user.display_name,
                    project_count=counts[user.id],
                )
            )

        return TicketResponse(
            id=ticket.id,
            project_id=ticket.project_id,
            title=ticket.title,
            description=ticket.description,
            status=ticket.status.value,
            priority=ticket.priority.value,
            type=ticket.type,
            team_id=ticket.team_id,
            team=TicketTeamSummary.model_validate(ticket.team) if ticket.team else None,
            creator_id=ticket.creator_id,
            creator=UserSummaryResponse.model_validate(ticket.creator) if ticket.creator else None,
            assignees=assignees,
            due_date=ticket.due_date,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )
