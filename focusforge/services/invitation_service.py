"""
Invitation business logic.

Team and project invitations share one lifecycle:

    pending -> accepted | rejected | expired

Only pending invitations transition. A pending invitation touched after
expires_at is marked expired (and committed) before the 410 is raised.
"""

from __future__ import annotations

import logging
from uuid import UUID

import redis.asyncio as aioredis
from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.core.config import settings
from focusforge.core.security import generate_invitation_token, password_problem, verify_password
from focusforge.models.base import utcnow
from focusforge.models.invitation import InvitationStatus, ProjectInvitation, TeamInvitation
from focusforge.models.notification import NotificationType
from focusforge.models.project import ProjectMember, ProjectRole
from focusforge.models.team import Team, TeamMember, TeamRole
from focusforge.models.user import User
from focusforge.schemas.auth import UserSummaryResponse
from focusforge.schemas.invitation import (
    InvitationActionResponse,
    InvitationTargetSummary,
    ProjectInvitationAcceptResponse,
    ProjectInvitationCreatedResponse,
    ProjectInvitationListResponse,
    ProjectInvitationResponse,
    ProjectInviteRequest,
    TeamInvitationAcceptResponse,
    TeamInvitationCreatedResponse,
    TeamInvitationListResponse,
    TeamInvitationResponse,
    TeamInvitationTokenAcceptRequest,
    TeamInvitationTokenAcceptResponse,
    TeamInviteRequest,
)
from focusforge.schemas.team import TeamInvitationStatusesResponse
from focusforge.services.auth_service import AuthService
from focusforge.services.notification_service import NotificationService
from focusforge.services.project_service import (
    get_managed_project,
    load_project,
    project_to_response,
)
from focusforge.services.team_service import get_team_or_404, load_team, team_to_response

logger = logging.getLogger(__name__)

TEAM_TOKEN_BYTES = 32
PROJECT_TOKEN_BYTES = 20

Invitation = TeamInvitation | ProjectInvitation


def _first_name(display_name: str | None) -> str:
    parts = (display_name or "").split()
    return parts[0] if parts else ""


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------

def _common_fields(invitation: Invitation) -> dict:
    return {
        "id": invitation.id,
        "email": invitation.email,
        "first_name": invitation.first_name,
        "last_name": invitation.last_name,
        "role": invitation.role.value,
        "status": invitation.status.value,
        "token": invitation.token,
        "expires_at": invitation.expires_at,
        "created_at": invitation.created_at,
        "invited_user_id": invitation.invited_user_id,
        "invited_by_user_id": invitation.invited_by_user_id,
        "invited_by": (
            UserSummaryResponse.model_validate(invitation.invited_by)
            if invitation.invited_by
            else None
        ),
        "is_expired": invitation.is_expired(utcnow()),
    }


def team_invitation_to_response(invitation: TeamInvitation) -> TeamInvitationResponse:
    team = invitation.team
    return TeamInvitationResponse(
        **_common_fields(invitation),
        team_id=invitation.team_id,
        phone=invitation.phone,
        team=(
            InvitationTargetSummary(id=team.id, name=team.name, description=team.description)
            if team
            else None
        ),
    )


def project_invitation_to_response(invitation: ProjectInvitation) -> ProjectInvitationResponse:
    project = invitation.project
    return ProjectInvitationResponse(
        **_common_fields(invitation),
        project_id=invitation.project_id,
        project=(
            InvitationTargetSummary(
                id=project.id, name=project.name, description=project.description
            )
            if project
            else None
        ),
    )


# ---------------------------------------------------------------------------
# Periodic expiry
# ---------------------------------------------------------------------------

async def expire_stale_invitations(db: AsyncSession) -> dict[str, int]:
    """Mark every pending invitation past expires_at as expired. Caller commits."""
    now = utcnow()
    counts: dict[str, int] = {}
    for key, model in (("team", TeamInvitation), ("project", ProjectInvitation)):
        result = await db.execute(
            update(model)
            .where(model.status == InvitationStatus.pending, model.expires_at < now)
            .values(status=InvitationStatus.expired)
            .execution_options(synchronize_session=False)
        )
        counts[key] = result.rowcount or 0
    logger.info(
        "Expired invitations team=%d project=%d", counts["team"], counts["project"]
    )
    return counts


class InvitationService:
    """Creates invitations and drives their state transitions."""

    def __init__(self, db: AsyncSession, redis: aioredis.Redis) -> None:
        self.db = db
        self.redis = redis
        self.notifications = NotificationService(db)

    # =======================================================================
    # Team invitations
    # =======================================================================

    async def invite_to_team(
        self, team_id: UUID, data: TeamInviteRequest, inviter: User
    ) -> TeamInvitationCreatedResponse:
        """
        Create a pending team invitation.

        - 400 ALREADY_MEMBER if a member already has the email
        - 400 INVITE_EXISTS if a pending invitation exists for the email
        - Existing users are linked and notified
        - Invitation email is queued
        """
        team = await get_team_or_404(self.db, team_id)
        email = data.email.lower()

        if any(m.email.lower() == email for m in team.members):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "code": "ALREADY_MEMBER",
                    "message": "A member with this email already exists in this team",
                },
            )
        await self._ensure_no_pending(TeamInvitation, TeamInvitation.team_id == team_id, email)

        invited_user = await self._find_user(email)
        invitation = TeamInvitation(
            team_id=team_id,
            email=email,
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone or None,
            role=TeamRole(data.role),
            token=generate_invitation_token(TEAM_TOKEN_BYTES),
            status=InvitationStatus.pending,
            expires_at=utcnow() + settings.invitation_ttl,
            invited_user_id=invited_user.id if invited_user else None,
            invited_by_user_id=inviter.id,
        )
        self.db.add(invitation)
        await self.db.flush()
        logger.info("Team invitation created id=%s team=%s", invitation.id, team_id)

        if invited_user is not None:
            await self.notifications.notify(
                [invited_user.id],
                type=NotificationType.team_invitation,
                title="Team invitation",
                message=(
                    f'You have been invited to join the team "{team.name}". '
                    "Accept or decline this invitation."
                ),
                entity_type="team",
                entity_id=team_id,
            )

        invitation_url = settings.frontend_link(f"accept-invitation/{invitation.token}")
        email_queued = self._queue_invitation_email(
            email, invitation_url, team.name, inviter.display_name, data.first_name
        )

        invitation = await self._load_team_invitation(invitation.id)
        return TeamInvitationCreatedResponse(
            invitation=team_invitation_to_response(invitation),
            invitation_url=invitation_url,
            email_queued=email_queued,
            message=self._created_message(email, invitation_url, email_queued),
        )

    async def list_pending_team_invitations(self, user: User) -> TeamInvitationListResponse:
        """Caller's pending, unexpired team invitations, newest first."""
        result = await self.db.execute(
            select(TeamInvitation)
            .where(
                TeamInvitation.invited_user_id == user.id,
                TeamInvitation.status == InvitationStatus.pending,
                TeamInvitation.expires_at > utcnow(),
            )
            .order_by(TeamInvitation.created_at.desc())
        )
        items = [team_invitation_to_response(i) for i in result.scalars().all()]
        return TeamInvitationListResponse(invitations=items, total=len(items))

    async def team_invitation_statuses(self, team_id: UUID) -> TeamInvitationStatusesResponse:
        """Status per invited user id; unlinked invitations are keyed by email."""
        await get_team_or_404(self.db, team_id)
        result = await self.db.execute(
            select(TeamInvitation)
            .where(TeamInvitation.team_id == team_id)
            .order_by(TeamInvitation.created_at)
        )
        statuses: dict[str, str] = {}
        for invitation in result.scalars().all():
            key = str(invitation.invited_user_id) if invitation.invited_user_id else invitation.email
            statuses[key] = invitation.status.value
        return TeamInvitationStatusesResponse(statuses=statuses)

    async def accept_team_invitation(
        self, invitation_id: UUID, user: User
    ) -> TeamInvitationAcceptResponse:
        invitation = await self._get_team_invitation(invitation_id)
        self._require_invitee(invitation, user, action="accept")
        await self._ensure_pending(invitation)

        team = invitation.team
        already_member = team.has_member(user.id)
        if not already_member:
            self._add_team_member(invitation, user.id)

        invitation.status = InvitationStatus.accepted
        if invitation.invited_user_id is None:
            invitation.invited_user_id = user.id
        await self.db.flush()
        logger.info("Team invitation accepted id=%s user=%s", invitation.id, user.id)

        if already_member:
            message = "You are already a member of this team"
        else:
            message = "Invitation accepted. You have been added to the team."
            await self._notify_team_inviter(invitation, team, accepted=True)

        team = await load_team(self.db, team.id)
        invitation = await self._load_team_invitation(invitation.id)
        return TeamInvitationAcceptResponse(
            message=message,
            team=await team_to_response(self.db, team),
            invitation=team_invitation_to_response(invitation),
        )

    async def reject_team_invitation(
        self, invitation_id: UUID, user: User
    ) -> InvitationActionResponse:
        invitation = await self._get_team_invitation(invitation_id)
        self._require_invitee(invitation, user, action="reject")
        await self._ensure_pending(invitation)

        invitation.status = InvitationStatus.rejected
        await self.db.flush()
        logger.info("Team invitation rejected id=%s user=%s", invitation.id, user.id)

        await self._notify_team_inviter(invitation, invitation.team, accepted=False)

        invitation = await self._load_team_invitation(invitation.id)
        return InvitationActionResponse(
            message="Invitation rejected successfully.",
            invitation=team_invitation_to_response(invitation),
        )

    async def accept_team_invitation_by_token(
        self, token: str, data: TeamInvitationTokenAcceptRequest
    ) -> TeamInvitationTokenAcceptResponse:
        """
        Public accept flow from the emailed link.

        Creates the account when the email is new, otherwise checks the
        password. Returns a token pair so the client is signed in.
        """
        result = await self.db.execute(
            select(TeamInvitation).where(
                TeamInvitation.token == token,
                TeamInvitation.status == InvitationStatus.pending,
            )
        )
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={
                    "code": "INVITATION_NOT_FOUND",
                    "message": "Invalid or expired invitation token",
                },
            )
        await self._ensure_pending(invitation)

        email = data.email.lower()
        if invitation.email.lower() != email:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"code": "EMAIL_MISMATCH", "message": "Email does not match the invitation"},
            )

        auth = AuthService(self.db, self.redis)
        user = await auth.get_user_by_email(email)
        if user is None:
            self._check_new_password(data.password)
            user = await auth.create_user(
                email=email,
                password=data.password,
                display_name=data.display_name or invitation.full_name,
            )
        elif not verify_password(data.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail={"code": "INVALID_CREDENTIALS", "message": "Invalid email or password"},
            )

        team = invitation.team
        if not team.has_member(user.id):
            self._add_team_member(invitation, user.id)

        invitation.invited_user_id = user.id
        invitation.status = InvitationStatus.accepted
        await self.db.flush()
        logger.info("Team invitation accepted by token id=%s user=%s", invitation.id, user.id)

        await self._notify_team_inviter(invitation, team, accepted=True)

        inviter = invitation.invited_by
        if inviter is not None and inviter.email_notifications:
            self._queue_accepted_email(
                inviter.email,
                _first_name(inviter.display_name),
                invitation.full_name,
                team.name,
            )

        tokens = await auth.issue_tokens(user)
        team = await load_team(self.db, team.id)
        invitation = await self._load_team_invitation(invitation.id)
        return TeamInvitationTokenAcceptResponse(
            message="Invitation accepted successfully! You have been added to the team.",
            user=tokens.user,
            tokens=tokens,
            team=await team_to_response(self.db, team),
            invitation=team_invitation_to_response(invitation),
        )

    # =======================================================================
    # Project invitations
    # =======================================================================

    async def invite_to_project(
        self, project_id: UUID, data: ProjectInviteRequest, inviter: User
    ) -> ProjectInvitationCreatedResponse:
        """Owner or project admin invites someone by email."""
        project = await get_managed_project(self.db, project_id, inviter)
        email = data.email.lower()

        if any(m.user.email.lower() == email for m in project.members) or (
            project.owner and project.owner.email.lower() == email
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "code": "ALREADY_MEMBER",
                    "message": "This user is already a member of the project",
                },
            )
        await self._ensure_no_pending(
            ProjectInvitation, ProjectInvitation.project_id == project_id, email
        )

        invited_user = await self._find_user(email)
        invitation = ProjectInvitation(
            project_id=project_id,
            email=email,
            first_name=data.first_name,
            last_name=data.last_name,
            role=TeamRole(data.role),
            token=generate_invitation_token(PROJECT_TOKEN_BYTES),
            status=InvitationStatus.pending,
            expires_at=utcnow() + settings.invitation_ttl,
            invited_user_id=invited_user.id if invited_user else None,
            invited_by_user_id=inviter.id,
        )
        self.db.add(invitation)
        await self.db.flush()
        logger.info("Project invitation created id=%s project=%s", invitation.id, project_id)

        if invited_user is not None:
            await self.notifications.notify(
                [invited_user.id],
                type=NotificationType.project_invitation,
                title="Project invitation",
                message=f'{inviter.display_name} invited you to the project "{project.name}"',
                entity_type="project",
                entity_id=project_id,
            )

        invitation_url = settings.frontend_link(f"accept-project-invitation/{invitation.token}")
        email_queued = self._queue_invitation_email(
            email, invitation_url, project.name, inviter.display_name, data.first_name
        )

        invitation = await self._load_project_invitation(invitation.id)
        return ProjectInvitationCreatedResponse(
            invitation=project_invitation_to_response(invitation),
            invitation_url=invitation_url,
            email_queued=email_queued,
            message=self._created_message(email, invitation_url, email_queued),
        )

    async def list_pending_project_invitations(
        self, user: User
    ) -> ProjectInvitationListResponse:
        result = await self.db.execute(
            select(ProjectInvitation)
            .where(
                ProjectInvitation.invited_user_id == user.id,
                ProjectInvitation.status == InvitationStatus.pending,
                ProjectInvitation.expires_at > utcnow(),
            )
            .order_by(ProjectInvitation.created_at.desc())
        )
        items = [project_invitation_to_response(i) for i in result.scalars().all()]
        return ProjectInvitationListResponse(invitations=items, total=len(items))

    async def list_project_invitations(
        self, project_id: UUID, user: User
    ) -> ProjectInvitationListResponse:
        """All invitations of a project, any status. Owner/admin only."""
        await get_managed_project(self.db, project_id, user)
        result = await self.db.execute(
            select(ProjectInvitation)
            .where(ProjectInvitation.project_id == project_id)
            .order_by(ProjectInvitation.created_at.desc())
        )
        items = [project_invitation_to_response(i) for i in result.scalars().all()]
        return ProjectInvitationListResponse(invitations=items, total=len(items))

    async def accept_project_invitation(
        self, token: str, user: User
    ) -> ProjectInvitationAcceptResponse:
        result = await self.db.execute(
            select(ProjectInvitation).where(
                ProjectInvitation.token == token,
                ProjectInvitation.status == InvitationStatus.pending,
            )
        )
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "INVITATION_NOT_FOUND", "message": "Invalid or expired invitation"},
            )
        await self._ensure_pending(invitation)

        if invitation.email.lower() != user.email.lower():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"code": "EMAIL_MISMATCH", "message": "Email does not match"},
            )

        project = invitation.project
        if project.member_role(user.id) is None:
            self.db.add(
                ProjectMember(
                    project_id=project.id,
                    user_id=user.id,
                    role=ProjectRole(invitation.role.value),
                )
            )
            logger.info("Project member added project=%s user=%s", project.id, user.id)

        invitation.status = InvitationStatus.accepted
        if invitation.invited_user_id is None:
            invitation.invited_user_id = user.id
        await self.db.flush()

        await self.notifications.notify(
            [invitation.invited_by_user_id],
            type=NotificationType.project_invitation_accepted,
            title="Project invitation accepted",
            message=(
                f"{invitation.full_name} accepted the invitation to the project "
                f'"{project.name}"'
            ),
            entity_type="project",
            entity_id=project.id,
        )

        project = await load_project(self.db, project.id)
        invitation = await self._load_project_invitation(invitation.id)
        return ProjectInvitationAcceptResponse(
            message="Invitation accepted",
            project=project_to_response(project),
            invitation=project_invitation_to_response(invitation),
        )

    async def reject_project_invitation(
        self, invitation_id: UUID, user: User
    ) -> InvitationActionResponse:
        invitation = await self._load_project_invitation(invitation_id)
        if invitation is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "INVITATION_NOT_FOUND", "message": "Invitation not found"},
            )
        self._require_invitee(invitation, user, action="reject")
        await self._ensure_pending(invitation)

        invitation.status = InvitationStatus.rejected
        await self.db.flush()
        logger.info("Project invitation rejected id=%s user=%s", invitation.id, user.id)

        await self.notifications.notify(
            [invitation.invited_by_user_id],
            type=NotificationType.project_invitation_rejected,
            title="Project invitation declined",
            message=(
                f"{invitation.full_name} declined the invitation to the project "
                f'"{invitation.project.name}"'
            ),
            entity_type="project",
            entity_id=invitation.project_id,
        )

        invitation = await self._load_project_invitation(invitation.id)
        return InvitationActionResponse(
            message="Invitation rejected",
            invitation=project_invitation_to_response(invitation),
        )

    async def revoke_project_invitation(
        self, project_id: UUID, invitation_id: UUID, user: User
    ) -> None:
        """Delete a pending invitation. Owner/admin only."""
        await get_managed_project(self.db, project_id, user)
        invitation = await self._load_project_invitation(invitation_id)
        if invitation is None or invitation.project_id != project_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "INVITATION_NOT_FOUND", "message": "Invitation not found"},
            )
        if invitation.status != InvitationStatus.pending:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "code": "INVITATION_NOT_PENDING",
                    "message": f"Invitation is already {invitation.status.value}",
                },
            )
        await self.db.delete(invitation)
        await self.db.flush()
        logger.info("Project invitation revoked id=%s by=%s", invitation_id, user.id)

    # =======================================================================
    # Shared helpers
    # =======================================================================

    async def _ensure_pending(self, invitation: Invitation) -> None:
        """410 for expired invitations, 400 for any other non-pending status."""
        if invitation.status == InvitationStatus.expired:
            raise self._expired_error()
        if invitation.status != InvitationStatus.pending:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "code": "INVITATION_NOT_PENDING",
                    "message": f"Invitation is already {invitation.status.value}",
                },
            )
        if invitation.is_expired(utcnow()):
            invitation.status = InvitationStatus.expired
            # Persist the transition even though the request fails
            await self.db.commit()
            logger.info("Invitation expired on access id=%s", invitation.id)
            raise self._expired_error()

    @staticmethod
    def _expired_error() -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_410_GONE,
            detail={"code": "INVITATION_EXPIRED", "message": "This invitation has expired"},
        )

    @staticmethod
    def _require_invitee(invitation: Invitation, user: User, action: str) -> None:
        """Linked invitations belong to invited_user_id, unlinked ones to the email."""
        if invitation.invited_user_id is not None:
            allowed = invitation.invited_user_id == user.id
        else:
            allowed = invitation.email.lower() == user.email.lower()
        if not allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "code": "NOT_INVITEE",
                    "message": f"You are not authorized to {action} this invitation",
                },
            )

    @staticmethod
    def _check_new_password(password: str) -> None:
        problem = password_problem(password)
        if problem:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"code": "WEAK_PASSWORD", "message": problem},
            )

    async def _ensure_no_pending(self, model: type, target_clause, email: str) -> None:
        existing = await self.db.scalar(
            select(model.id).where(
                target_clause,
                model.email == email,
                model.status == InvitationStatus.pending,
            )
        )
        if existing is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "code": "INVITE_EXISTS",
                    "message": "An invitation is already pending for this email",
                },
            )

    async def _find_user(self, email: str) -> User | None:
        return await self.db.scalar(select(User).where(User.email == email))

    def _add_team_member(self, invitation: TeamInvitation, user_id: UUID) -> None:
        self.db.add(
            TeamMember(
                team_id=invitation.team_id,
                user_id=user_id,
                email=invitation.email,
                first_name=invitation.first_name,
                last_name=invitation.last_name,
                phone=invitation.phone,
                role=invitation.role,
            )
        )
        logger.info("Team member added team=%s user=%s", invitation.team_id, user_id)

    async def _notify_team_inviter(
        self, invitation: TeamInvitation, team: Team, accepted: bool
    ) -> None:
        verb = "accepted" if accepted else "declined"
        await self.notifications.notify(
            [invitation.invited_by_user_id],
            type=(
                NotificationType.team_invitation_accepted
                if accepted
                else NotificationType.team_invitation_rejected
            ),
            title=f"Invitation {verb}",
            message=f'{invitation.full_name} {verb} your invitation to join the team "{team.name}"',
            entity_type="team",
            entity_id=team.id,
        )

    async def _get_team_invitation(self, invitation_id: UUID) -> TeamInvitation:
        invitation = await self._load_team_invitation(invitation_id)
        if invitation is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "INVITATION_NOT_FOUND", "message": "Invitation not found"},
            )
        return invitation

    async def _load_team_invitation(self, invitation_id: UUID) -> TeamInvitation | None:
        result = await self.db.execute(
            select(TeamInvitation)
            .where(TeamInvitation.id == invitation_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _load_project_invitation(self, invitation_id: UUID) -> ProjectInvitation | None:
        result = await self.db.execute(
            select(ProjectInvitation)
            .where(ProjectInvitation.id == invitation_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _queue_invitation_email(
        to_email: str,
        invitation_url: str,
        target_name: str,
        inviter_name: str,
        invitee_first_name: str,
    ) -> bool:
        from focusforge.workers.email_tasks import send_invitation_email

        try:
            send_invitation_email.delay(
                to_email=to_email,
                invitation_url=invitation_url,
                target_name=target_name,
                inviter_name=inviter_name,
                invitee_first_name=invitee_first_name,
            )
        except Exception as exc:
            logger.warning(
                "Could not queue invitation email to %s (%s), share the link manually: %s",
                to_email,
                exc,
                invitation_url,
            )
            return False
        return True

    @staticmethod
    def _queue_accepted_email(
        to_email: str, inviter_first_name: str, invitee_name: str, target_name: str
    ) -> None:
        from focusforge.workers.email_tasks import send_invitation_accepted_email

        try:
            send_invitation_accepted_email.delay(
                to_email=to_email,
                inviter_first_name=inviter_first_name,
                invitee_name=invitee_name,
                target_name=target_name,
            )
        except Exception as exc:
            logger.warning("Could not queue acceptance email to %s: %s", to_email, exc)

    @staticmethod
    def _created_message(email: str, invitation_url: str, email_queued: bool) -> str:
        if email_queued:
            return f"Invitation created and email queued for {email}"
        return f"Invitation created but the email could not be queued. Share the link manually: {invitation_url}"
