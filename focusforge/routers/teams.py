"""
Team endpoints.

Teams, team members, team invitations and the project participants directory.
Static paths are declared before /teams/{team_id}.
"""

from __future__ import annotations

from uuid import UUID

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.core.database import get_db
from focusforge.core.dependencies import get_current_user, get_redis
from focusforge.models.user import User
from focusforge.schemas.invitation import (
    InvitationActionResponse,
    TeamInvitationAcceptResponse,
    TeamInvitationCreatedResponse,
    TeamInvitationListResponse,
    TeamInvitationTokenAcceptRequest,
    TeamInvitationTokenAcceptResponse,
    TeamInviteRequest,
)
from focusforge.schemas.team import (
    ParticipantListResponse,
    TeamCreateRequest,
    TeamInvitationStatusesResponse,
    TeamListResponse,
    TeamMemberUpdateRequest,
    TeamResponse,
    TeamUpdateRequest,
)
from focusforge.services.invitation_service import InvitationService
from focusforge.services.team_service import TeamService

router = APIRouter()


def get_team_service(
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
) -> TeamService:
    return TeamService(db=db, redis=redis)


def get_invitation_service(
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
) -> InvitationService:
    return InvitationService(db=db, redis=redis)


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------

@router.get(
    "/teams",
    response_model=TeamListResponse,
    summary="List all teams",
)
async def list_teams(
    current_user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
) -> TeamListResponse:
    return await service.list_teams()


@router.post(
    "/teams",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a team",
)
async def create_team(
    data: TeamCreateRequest,
    current_user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    return await service.create_team(data, current_user)


@router.get(
    "/teams/participants",
    response_model=ParticipantListResponse,
    summary="People who share a project with me",
)
async def list_participants(
    current_user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
) -> ParticipantListResponse:
    return await service.list_participants(current_user)


# ---------------------------------------------------------------------------
# Team invitations addressed to the current user
# ---------------------------------------------------------------------------

@router.get(
    "/teams/invitations/pending",
    response_model=TeamInvitationListResponse,
    summary="List my pending team invitations",
)
async def list_pending_invitations(
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> TeamInvitationListResponse:
    return await service.list_pending_team_invitations(current_user)


@router.post(
    "/teams/invitations/{invitation_id}/accept",
    response_model=TeamInvitationAcceptResponse,
    summary="Accept a team invitation",
)
async def accept_invitation(
    invitation_id: UUID,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> TeamInvitationAcceptResponse:
    return await service.accept_team_invitation(invitation_id, current_user)


@router.post(
    "/teams/invitations/{invitation_id}/reject",
    response_model=InvitationActionResponse,
    summary="Reject a team invitation",
)
async def reject_invitation(
    invitation_id: UUID,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationActionResponse:
    return await service.reject_team_invitation(invitation_id, current_user)


@router.post(
    "/teams/accept-invitation/{token}",
    response_model=TeamInvitationTokenAcceptResponse,
    summary="Accept a team invitation from the emailed link",
)
async def accept_invitation_by_token(
    token: str,
    data: TeamInvitationTokenAcceptRequest,
    service: InvitationService = Depends(get_invitation_service),
) -> TeamInvitationTokenAcceptResponse:
    """
    Public endpoint.

    Creates the account if the invited email has none, otherwise requires
    the account password. Returns tokens for the signed-in user.
    """
    return await service.accept_team_invitation_by_token(token, data)


# ---------------------------------------------------------------------------
# Single team
# ---------------------------------------------------------------------------

@router.get(
    "/teams/{team_id}",
    response_model=TeamResponse,
    summary="Get team detail",
)
async def get_team(
    team_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    return await service.get_team(team_id)


@router.put(
    "/teams/{team_id}",
    response_model=TeamResponse,
    summary="Update team",
)
async def update_team(
    team_id: UUID,
    data: TeamUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    return await service.update_team(team_id, data, current_user)


@router.delete(
    "/teams/{team_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete team",
)
async def delete_team(
    team_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
) -> dict:
    await service.delete_team(team_id, current_user)
    return {"id": str(team_id), "message": "Team deleted successfully"}


@router.get(
    "/teams/{team_id}/invitations/statuses",
    response_model=TeamInvitationStatusesResponse,
    summary="Invitation status per invited user",
)
async def team_invitation_statuses(
    team_id: UUID,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> TeamInvitationStatusesResponse:
    return await service.team_invitation_statuses(team_id)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

@router.post(
    "/teams/{team_id}/members",
    response_model=TeamInvitationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite a member to the team",
)
async def add_member(
    team_id: UUID,
    data: TeamInviteRequest,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> TeamInvitationCreatedResponse:
    """Members join by accepting the invitation created here."""
    return await service.invite_to_team(team_id, data, current_user)


@router.put(
    "/teams/{team_id}/members/{member_id}",
    response_model=TeamResponse,
    summary="Update a team member",
)
async def update_member(
    team_id: UUID,
    member_id: UUID,
    data: TeamMemberUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    return await service.update_member(team_id, member_id, data, current_user)


@router.delete(
    "/teams/{team_id}/members/{member_id}",
    response_model=TeamResponse,
    summary="Remove a team member",
)
async def remove_member(
    team_id: UUID,
    member_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    return await service.remove_member(team_id, member_id, current_user)
