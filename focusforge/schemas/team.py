"""
Team schemas.

Request/response models for teams, team members and project participants.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from focusforge.schemas.auth import UserSummaryResponse


# ---------------------------------------------------------------------------
# Team Create / Update
# ---------------------------------------------------------------------------

class TeamCreateRequest(BaseModel):
    """Request body for POST /teams."""

    name: str = Field(min_length=1, max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Team name is required")
        return v


class TeamUpdateRequest(BaseModel):
    """Request body for PUT /teams/{team_id}."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Team name cannot be blank")
        return v


class TeamMemberUpdateRequest(BaseModel):
    """Request body for PUT /teams/{team_id}/members/{member_id}."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    role: str | None = Field(default=None, pattern="^(admin|member)$")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class TeamMemberResponse(BaseModel):
    id: UUID
    user_id: UUID | None
    email: str
    first_name: str
    last_name: str
    phone: str | None
    role: str
    added_at: datetime
    project_count: int = 0


class TeamResponse(BaseModel):
    id: UUID
    name: str
    description: str | None
    created_by: UUID | None
    creator: UserSummaryResponse | None = None
    members: list[TeamMemberResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class TeamListResponse(BaseModel):
    teams: list[TeamResponse]
    total: int


class TeamInvitationStatusesResponse(BaseModel):
    """Invitation status keyed by invited user id (or email when unlinked)."""

    statuses: dict[str, str]


class ParticipantResponse(BaseModel):
    """A user who shares at least one project with the caller."""

    id: UUID
    email: str
    display_name: str
    first_name: str
    last_name: str
    role: str
    project_count: int
    project_ids: list[UUID]


class ParticipantListResponse(BaseModel):
    participants: list[ParticipantResponse]
    total: int
