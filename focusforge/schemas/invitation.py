"""
Invitation schemas.

Request/response models for team and project invitations.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from focusforge.schemas.auth import SignupName, TokenResponse, UserResponse, UserSummaryResponse
from focusforge.schemas.project import ProjectResponse
from focusforge.schemas.team import TeamResponse


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Field is required")
    return v


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

class ProjectInviteRequest(BaseModel):
    """Request body for POST /projects/{project_id}/invite."""

    email: EmailStr
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: str = Field(default="member", pattern="^(admin|member)$")

    @field_validator("first_name", "last_name")
    @classmethod
    def names_must_not_be_blank(cls, v: str) -> str:
        return _strip_required(v)


class TeamInviteRequest(ProjectInviteRequest):
    """Request body for POST /teams/{team_id}/members."""

    phone: str | None = Field(default=None, max_length=30)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class InvitationTargetSummary(BaseModel):
    """The team or project an invitation points at."""

    id: UUID
    name: str
    description: str | None


class InvitationResponse(BaseModel):
    """Fields common to both invitation kinds."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: str
    status: str
    token: str
    expires_at: datetime
    created_at: datetime
    invited_user_id: UUID | None
    invited_by_user_id: UUID
    invited_by: UserSummaryResponse | None = None
    is_expired: bool = False


class ProjectInvitationResponse(InvitationResponse):
    project_id: UUID
    project: InvitationTargetSummary | None = None


class TeamInvitationResponse(InvitationResponse):
    team_id: UUID
    phone: str | None = None
    team: InvitationTargetSummary | None = None


class ProjectInvitationCreatedResponse(BaseModel):
    invitation: ProjectInvitationResponse
    invitation_url: str
    email_queued: bool
    message: str


class TeamInvitationCreatedResponse(BaseModel):
    invitation: TeamInvitationResponse
    invitation_url: str
    email_queued: bool
    message: str


class ProjectInvitationListResponse(BaseModel):
    invitations: list[ProjectInvitationResponse]
    total: int


class TeamInvitationListResponse(BaseModel):
    invitations: list[TeamInvitationResponse]
    total: int


class InvitationActionResponse(BaseModel):
    """Response for reject."""

    message: str
    invitation: TeamInvitationResponse | ProjectInvitationResponse


# ---------------------------------------------------------------------------
# Accept by token (team invitations, unauthenticated)
# ---------------------------------------------------------------------------

class TeamInvitationTokenAcceptRequest(BaseModel):
    """
    Request body for POST /teams/accept-invitation/{token}.

    New users get an account with these credentials; existing users
    prove ownership of the address with their password.
    """

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)
    display_name: SignupName | None = None


class TeamInvitationTokenAcceptResponse(BaseModel):
    message: str
    user: UserResponse
    tokens: TokenResponse
    team: TeamResponse
    invitation: TeamInvitationResponse


# ---------------------------------------------------------------------------
# Accept (authenticated)
# ---------------------------------------------------------------------------

class TeamInvitationAcceptResponse(BaseModel):
    message: str
    team: TeamResponse
    invitation: TeamInvitationResponse


class ProjectInvitationAcceptResponse(BaseModel):
    message: str
    project: ProjectResponse
    invitation: ProjectInvitationResponse
