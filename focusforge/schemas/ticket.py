"""
Ticket schemas.

Request/response models for ticket CRUD.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from focusforge.schemas.auth import UserSummaryResponse

_STATUS_PATTERN = "^(todo|in_progress|review|done)$"
_PRIORITY_PATTERN = "^(low|medium|high|urgent)$"


# ---------------------------------------------------------------------------
# Ticket Create
# ---------------------------------------------------------------------------

class TicketCreateRequest(BaseModel):
    """Request body for POST /tickets/project/{project_id}."""

    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    status: str = Field(default="todo", pattern=_STATUS_PATTERN)
    priority: str = Field(default="medium", pattern=_PRIORITY_PATTERN)
    type: str = Field(default="", max_length=50)
    team_id: UUID | None = None
    assignee_ids: list[UUID] = Field(default_factory=list)
    due_date: date | None = None

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v


# ---------------------------------------------------------------------------
# Ticket Update
# ---------------------------------------------------------------------------

class TicketUpdateRequest(BaseModel):
    """Request body for PUT /tickets/{ticket_id}. Only provided fields change."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    status: str | None = Field(default=None, pattern=_STATUS_PATTERN)
    priority: str | None = Field(default=None, pattern=_PRIORITY_PATTERN)
    type: str | None = Field(default=None, max_length=50)
    team_id: UUID | None = None
    assignee_ids: list[UUID] | None = None
    due_date: date | None = None

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class AssigneeResponse(UserSummaryResponse):
    """Assignee with the number of projects they participate in."""

    project_count: int = 0


class TicketTeamSummary(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class TicketResponse(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    description: str | None
    status: str
    priority: str
    type: str
    team_id: UUID | None
    team: TicketTeamSummary | None = None
    creator_id: UUID
    creator: UserSummaryResponse | None = None
    assignees: list[AssigneeResponse] = Field(default_factory=list)
    due_date: date | None
    created_at: datetime
    updated_at: datetime


class TicketListResponse(BaseModel):
    tickets: list[TicketResponse]
    total: int
