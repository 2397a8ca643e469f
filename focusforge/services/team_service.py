"""
Team business logic.

Handles team CRUD, team member edits and the project participants
directory. Adding members goes through invitations (see invitation_service).
"""

from __future__ import annotations

import logging
from uuid import UUID

import redis.asyncio as aioredis
from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.models.project import Project, ProjectMember
from focusforge.models.team import Team, TeamMember, TeamRole
from focusforge.models.user import User
from focusforge.schemas.auth import UserSummaryResponse
from focusforge.schemas.team import (
    ParticipantListResponse,
    ParticipantResponse,
    TeamCreateRequest,
    TeamListResponse,
    TeamMemberResponse,
    TeamMemberUpdateRequest,
    TeamResponse,
    TeamUpdateRequest,
)
from focusforge.services.project_service import count_user_projects

logger = logging.getLogger(__name__)


async def load_team(db: AsyncSession, team_id: UUID) -> Team | None:
    result = await db.execute(
        select(Team).where(Team.id == team_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_team_or_404(db: AsyncSession, team_id: UUID) -> Team:
    team = await load_team(db, team_id)
    if team is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "TEAM_NOT_FOUND", "message": "Team not found"},
        )
    return team


async def team_to_response(
    db: AsyncSession, team: Team, counts: dict[str, int] | None = None
) -> TeamResponse:
    """
    Build a team response with project_count on every member.

    Members without a linked user are resolved by email; unknown emails count 0.
    counts caches results by user id or email across calls.
    """
    if counts is None:
        counts = {}

    members: list[TeamMemberResponse] = []
    for member in team.members:
        key = str(member.user_id) if member.user_id else member.email
        if key not in counts:
            user_id = member.user_id
            if user_id is None:
                user_id = await db.scalar(select(User.id).where(User.email == member.email))
            counts[key] = await count_user_projects(db, user_id) if user_id else 0
        members.append(
            TeamMemberResponse(
                id=member.id,
                user_id=member.user_id,
                email=member.email,
                first_name=member.first_name,
                last_name=member.last_name,
                phone=member.phone,
                role=member.role.value,
                added_at=member.added_at,
                project_count=counts[key],
            )
        )

    return TeamResponse(
        id=team.id,
        name=team.name,
        description=team.description,
        created_by=team.created_by,
        creator=UserSummaryResponse.model_validate(team.creator) if team.creator else None,
        members=members,
        created_at=team.created_at,
        updated_at=team.updated_at,
    )


def _split_name(display_name: str) -> tuple[str, str]:
    parts = display_name.split()
    if not parts:
        return "Unknown", ""
    return parts[0], " ".join(parts[1:])


class TeamService:

    def __init__(self, db: AsyncSession, redis: aioredis.Redis) -> None:
        self.db = db
        self.redis = redis

    # -----------------------------------------------------------------------
    # Team CRUD
    # -----------------------------------------------------------------------

    async def create_team(self, data: TeamCreateRequest, creator: User) -> TeamResponse:
        team = Team(name=data.name, description=data.description, created_by=creator.id)
        self.db.add(team)
        await self.db.flush()
        logger.info("Team created id=%s by=%s", team.id, creator.id)
        return await team_to_response(self.db, await load_team(self.db, team.id))

    async def list_teams(self) -> TeamListResponse:
        """All teams, newest first."""
        result = await self.db.execute(select(Team).order_by(Team.created_at.desc()))
        teams = list(result.scalars().all())
        counts: dict[str, int] = {}
        items = [await team_to_response(self.db, t, counts) for t in teams]
        return TeamListResponse(teams=items, total=len(items))

    async def get_team(self, team_id: UUID) -> TeamResponse:
        team = await get_team_or_404(self.db, team_id)
        return await team_to_response(self.db, team)

    async def update_team(
        self, team_id: UUID, data: TeamUpdateRequest, user: User
    ) -> TeamResponse:
        team = await get_team_or_404(self.db, team_id)
        self._require_manager(team, user)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is not None:
            team.name = changes["name"]
        if "description" in changes:
            team.description = changes["description"]
        await self.db.flush()

        return await team_to_response(self.db, await load_team(self.db, team_id))

    async def delete_team(self, team_id: UUID, user: User) -> None:
        team = await get_team_or_404(self.db, team_id)
        self._require_manager(team, user)
        await self.db.delete(team)
        await self.db.flush()
        logger.info("Team deleted id=%s by=%s", team_id, user.id)

    # -----------------------------------------------------------------------
    # Members
    # -----------------------------------------------------------------------

    async def update_member(
        self, team_id: UUID, member_id: UUID, data: TeamMemberUpdateRequest, user: User
    ) -> TeamResponse:
        team = await get_team_or_404(self.db, team_id)
        self._require_manager(team, user)
        member = self._get_member(team, member_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("first_name"):
            member.first_name = changes["first_name"].strip()
        if changes.get("last_name"):
            member.last_name = changes["last_name"].strip()
        if "phone" in changes:
            member.phone = changes["phone"] or None
        if changes.get("role"):
            member.role = TeamRole(changes["role"])
        await self.db.flush()

        return await team_to_response(self.db, await load_team(self.db, team_id))

    async def remove_member(self, team_id: UUID, member_id: UUID, user: User) -> TeamResponse:
        team = await get_team_or_404(self.db, team_id)
        self._require_manager(team, user)
        member = self._get_member(team, member_id)

        await self.db.delete(member)
        await self.db.flush()
        logger.info("Team member removed team=%s member=%s", team_id, member_id)

        return await team_to_response(self.db, await load_team(self.db, team_id))

    # -----------------------------------------------------------------------
    # Participants
    # -----------------------------------------------------------------------

    async def list_participants(self, user: User) -> ParticipantListResponse:
        """
        Everyone who owns or belongs to one of the caller's projects.

        role is taken from the first project the person is seen in.
        """
        member_of = select(ProjectMember.project_id).where(ProjectMember.user_id == user.id)
        result = await self.db.execute(
            select(Project)
            .where(or_(Project.owner_id == user.id, Project.id.in_(member_of)))
            .order_by(Project.created_at)
        )

        participants: dict[UUID, ParticipantResponse] = {}
        for project in result.scalars().all():
            entries = [(project.owner, "owner")]
            entries.extend((m.user, m.role.value) for m in project.members)

            seen: set[UUID] = set()
            for person, role in entries:
                if person is None or person.id in seen:
                    continue
                seen.add(person.id)

                participant = participants.get(person.id)
                if participant is None:
                    first_name, last_name = _split_name(person.display_name)
                    participants[person.id] = ParticipantResponse(
                        id=person.id,
                        email=person.email,
                        display_name=person.display_name,
                        first_name=first_name,
                        last_name=last_name,
                        role=role,
                        project_count=1,
                        project_ids=[project.id],
                    )
                else:
                    participant.project_count += 1
                    participant.project_ids.append(project.id)

        items = sorted(participants.values(), key=lambda p: p.display_name.lower())
        return ParticipantListResponse(participants=items, total=len(items))

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    @staticmethod
    def _require_manager(team: Team, user: User) -> None:
        """Team creator or a team admin."""
        if team.created_by == user.id:
            return
        if any(m.user_id == user.id and m.role == TeamRole.admin for m in team.members):
            return
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "INSUFFICIENT_ROLE",
                "message": "Only the team creator or a team admin can do this",
            },
        )

    @staticmethod
    def _get_member(team: Team, member_id: UUID) -> TeamMember:
        for member in team.members:
            if member.id == member_id:
                return member
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "MEMBER_NOT_FOUND", "message": "Member not found"},
        )
