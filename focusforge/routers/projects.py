"""
Project management endpoints.

CRUD operations for projects, membership listing and project invitations.
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
    ProjectInvitationAcceptResponse,
    ProjectInvitationCreatedResponse,
    ProjectInvitationListResponse,
    ProjectInviteRequest,
)
from focusforge.schemas.project import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectMembersResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from focusforge.services.invitation_service import InvitationService
from focusforge.services.project_service import ProjectService

router = APIRouter()


def get_project_service(
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
) -> ProjectService:
    return ProjectService(db=db, redis=redis)


def get_invitation_service(
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
) -> InvitationService:
    return InvitationService(db=db, redis=redis)


# ---------------------------------------------------------------------------
# Invitations addressed to the current user
# ---------------------------------------------------------------------------

@router.get(
    "/projects/invitations/pending",
    response_model=ProjectInvitationListResponse,
    summary="List my pending project invitations",
)
async def list_pending_invitations(
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> ProjectInvitationListResponse:
    return await service.list_pending_project_invitations(current_user)


@router.post(
    "/projects/invitations/{token}/accept",
    response_model=ProjectInvitationAcceptResponse,
    summary="Accept a project invitation",
)
async def accept_invitation(
    token: str,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> ProjectInvitationAcceptResponse:
    return await service.accept_project_invitation(token, current_user)


@router.post(
    "/projects/invitations/{invitation_id}/reject",
    response_model=InvitationActionResponse,
    summary="Reject a project invitation",
)
async def reject_invitation(
    invitation_id: UUID,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> InvitationActionResponse:
    return await service.reject_project_invitation(invitation_id, current_user)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

@router.get(
    "/projects",
    response_model=ProjectListResponse,
    summary="List projects I own or belong to",
)
async def list_projects(
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    return await service.list_projects(current_user)


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new project",
)
async def create_project(
    data: ProjectCreateRequest,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.create_project(data, current_user)


@router.get(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    summary="Get project detail",
)
async def get_project(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.get_project(project_id, current_user)


@router.put(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    summary="Update project",
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.update_project(project_id, data, current_user)


@router.delete(
    "/projects/{project_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete a project",
)
async def delete_project(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
) -> dict:
    """Owner only. Tickets, members and invitations are deleted with it."""
    await service.delete_project(project_id, current_user)
    return {"message": "Project deleted successfully"}


@router.get(
    "/projects/{project_id}/members",
    response_model=ProjectMembersResponse,
    summary="List project members",
)
async def list_members(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
) -> ProjectMembersResponse:
    return await service.list_members(project_id, current_user)


# ---------------------------------------------------------------------------
# Project invitations (owner / admin)
# ---------------------------------------------------------------------------

@router.post(
    "/projects/{project_id}/invite",
    response_model=ProjectInvitationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite someone to the project",
)
async def invite_to_project(
    project_id: UUID,
    data: ProjectInviteRequest,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> ProjectInvitationCreatedResponse:
    return await service.invite_to_project(project_id, data, current_user)


@router.get(
    "/projects/{project_id}/invitations",
    response_model=ProjectInvitationListResponse,
    summary="List the project's invitations",
)
async def list_project_invitations(
    project_id: UUID,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> ProjectInvitationListResponse:
    return await service.list_project_invitations(project_id, current_user)


@router.delete(
    "/projects/{project_id}/invitations/{invitation_id}",
    status_code=status.HTTP_200_OK,
    summary="Revoke a pending invitation",
)
async def revoke_project_invitation(
    project_id: UUID,
    invitation_id: UUID,
    current_user: User = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service),
) -> dict:
    await service.revoke_project_invitation(project_id, invitation_id, current_user)
    return {"message": "Invitation revoked"}
