"""
Project business logic.

Handles project CRUD, membership lookups and project access checks shared
with the ticket, comment and invitation services.
"""

from __future__ import annotations

import logging
from uuid import UUID

import redis.asyncio as aioredis
from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.models.project import (
    Project,
    ProjectMember,
    ProjectRole,
    ProjectStatus,
    ProjectType,
)
from focusforge.models.user import User
from focusforge.schemas.auth import UserSummaryResponse
from focusforge.schemas.project import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectMemberResponse,
    ProjectMembersResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)

logger = logging.getLogger(__name__)

MANAGER_ROLES = (ProjectRole.owner, ProjectRole.admin)


def member_to_response(member: ProjectMember) -> ProjectMemberResponse:
    return ProjectMemberResponse(
        id=member.id,
        user_id=member.user_id,
        email=member.user.email,
        display_name=member.user.display_name,
        role=member.role.value,
        joined_at=member.joined_at,
    )


def project_to_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        status=project.status.value,
        type=project.type.value,
        due_date=project.due_date,
        owner_id=project.owner_id,
        owner=UserSummaryResponse.model_validate(project.owner) if project.owner else None,
        members=[member_to_response(m) for m in project.members],
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


async def load_project(db: AsyncSession, project_id: UUID) -> Project | None:
    """Fetch a project with fresh member rows."""
    result = await db.execute(
        select(Project)
        .where(Project.id == project_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_accessible_project(db: AsyncSession, project_id: UUID, user: User) -> Project:
    """
    Return the project if user is its owner or a member.

    Raises 404 if missing, 403 if the user has no access.
    """
    project = await load_project(db, project_id)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "PROJECT_NOT_FOUND", "message": "Project not found"},
        )
    if project.member_role(user.id) is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "ACCESS_DENIED", "message": "You do not have access to this project"},
        )
    return project


async def get_managed_project(db: AsyncSession, project_id: UUID, user: User) -> Project:
    """Like get_accessible_project but requires owner or admin role."""
    project = await get_accessible_project(db, project_id, user)
    if project.member_role(user.id) not in MANAGER_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "INSUFFICIENT_ROLE",
                "message": "Only the project owner or an admin can do this",
            },
        )
    return project


async def count_user_projects(db: AsyncSession, user_id: UUID) -> int:
    """Number of projects the user owns or is a member of."""
    return len(await user_project_ids(db, user_id))


async def user_project_ids(db: AsyncSession, user_id: UUID) -> list[UUID]:
    owned = await db.execute(select(Project.id).where(Project.owner_id == user_id))
    joined = await db.execute(
        select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
    )
    ids = list(owned.scalars().all())
    ids.extend(pid for pid in joined.scalars().all() if pid not in ids)
    return ids


class ProjectService:

    def __init__(self, db: AsyncSession, redis: aioredis.Redis) -> None:
        self.db = db
        self.redis = redis

    async def list_projects(self, user: User) -> ProjectListResponse:
        member_of = select(ProjectMember.project_id).where(ProjectMember.user_id == user.id)
        result = await self.db.execute(
            select(Project)
            .where(or_(Project.owner_id == user.id, Project.id.in_(member_of)))
            .order_by(Project.created_at.desc())
        )
        projects = list(result.scalars().all())
        return ProjectListResponse(
            projects=[project_to_response(p) for p in projects],
            total=len(projects),
        )

    async def create_project(self, data: ProjectCreateRequest, creator: User) -> ProjectResponse:
        project = Project(
            name=data.name,
            description=data.description,
            status=ProjectStatus(data.status),
            type=ProjectType(data.type),
            due_date=data.due_date,
            owner_id=creator.id,
        )
        self.db.add(project)
        await self.db.flush()

        self.db.add(
            ProjectMember(project_id=project.id, user_id=creator.id, role=ProjectRole.owner)
        )
        await self.db.flush()
        logger.info("Project created id=%s owner=%s", project.id, creator.id)

        project = await load_project(self.db, project.id)
        return project_to_response(project)

    async def get_project(self, project_id: UUID, user: User) -> ProjectResponse:
        project = await get_accessible_project(self.db, project_id, user)
        return project_to_response(project)

    async def update_project(
        self, project_id: UUID, data: ProjectUpdateRequest, user: User
    ) -> ProjectResponse:
        project = await get_managed_project(self.db, project_id, user)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is not None:
            project.name = changes["name"]
        if "description" in changes:
            project.description = changes["description"]
        if changes.get("status") is not None:
            project.status = ProjectStatus(changes["status"])
        if changes.get("type") is not None:
            project.type = ProjectType(changes["type"])
        if "due_date" in changes:
            project.due_date = changes["due_date"]
        await self.db.flush()

        project = await load_project(self.db, project_id)
        return project_to_response(project)

    async def delete_project(self, project_id: UUID, user: User) -> None:
        project = await get_accessible_project(self.db, project_id, user)
        if project.owner_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"code": "OWNER_ONLY", "message": "Only the project owner can delete it"},
            )
        await self.db.delete(project)
        await self.db.flush()
        logger.info("Project deleted id=%s by=%s", project_id, user.id)

    async def list_members(self, project_id: UUID, user: User) -> ProjectMembersResponse:
        project = await get_accessible_project(self.db, project_id, user)
        members = [member_to_response(m) for m in project.members]
        return ProjectMembersResponse(members=members, total=len(members))
