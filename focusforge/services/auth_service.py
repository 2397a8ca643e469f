"""
Accounts and sessions.

Sessions are a short-lived access JWT plus a rotating refresh JWT whose jti
is registered in Redis. Logout blacklists the access jti until it would have
expired anyway.
"""

from __future__ import annotations

import logging
from uuid import UUID

import redis.asyncio as aioredis
from fastapi import HTTPException, status
from jose import JWTError
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.core.config import settings
from focusforge.core.security import (
    blacklist_redis_key,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    refresh_token_redis_key,
    verify_password,
)
from focusforge.models.invitation import InvitationStatus, ProjectInvitation, TeamInvitation
from focusforge.models.user import User
from focusforge.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    NotificationPreferences,
    NotificationPreferencesUpdate,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)


def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail={"code": code, "message": message}
    )


class AuthService:
    def __init__(self, db: AsyncSession, redis: aioredis.Redis) -> None:
        self.db = db
        self.redis = redis

    # -----------------------------------------------------------------------
    # Register
    # -----------------------------------------------------------------------

    async def register(self, data: RegisterRequest) -> TokenResponse:
        user = await self.create_user(
            email=data.email, password=data.password, display_name=data.display_name
        )
        return await self.issue_tokens(user)

    async def create_user(self, email: str, password: str, display_name: str) -> User:
        """Create a user and link any pending invitations for their email. 409 if taken."""
        email = email.lower()
        existing = await self.get_user_by_email(email)
        if existing is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"code": "EMAIL_TAKEN", "message": "Email is already registered"},
            )

        user = User(
            email=email,
            password_hash=hash_password(password),
            display_name=display_name,
        )
        self.db.add(user)
        await self.db.flush()

        linked = await self._link_pending_invitations(user)
        logger.info("User registered id=%s linked_invitations=%d", user.id, linked)
        return user

    async def _link_pending_invitations(self, user: User) -> int:
        """Attach pending, unlinked team and project invitations for user.email to user."""
        linked = 0
        for model in (TeamInvitation, ProjectInvitation):
            result = await self.db.execute(
                update(model)
                .where(
                    model.email == user.email,
                    model.status == InvitationStatus.pending,
                    model.invited_user_id.is_(None),
                )
                .values(invited_user_id=user.id)
                .execution_options(synchronize_session=False)
            )
            linked += result.rowcount or 0
        return linked

    # -----------------------------------------------------------------------
    # Login
    # -----------------------------------------------------------------------

    async def login(self, data: LoginRequest) -> TokenResponse:
        # Same 401 whether the email or the password is wrong
        user = await self.get_user_by_email(data.email)

        if user is None or not verify_password(data.password, user.password_hash):
            raise _unauthorized("INVALID_CREDENTIALS", "Invalid email or password")

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"code": "ACCOUNT_DISABLED", "message": "Account is disabled"},
            )

        return await self.issue_tokens(user)

    # -----------------------------------------------------------------------
    # Refresh
    # -----------------------------------------------------------------------

    async def refresh(self, refresh_token: str) -> TokenResponse:
        """
        Rotate a refresh token.

        The presented token must decode and still be registered in Redis; it
        is removed before the new pair is issued, so each one works once.
        """
        try:
            claims = decode_refresh_token(refresh_token)
            user_id = UUID(claims.get("sub", ""))
        except (JWTError, ValueError):
            raise _unauthorized("INVALID_TOKEN", "Refresh token is invalid or expired")

        registry_key = refresh_token_redis_key(str(user_id), claims.get("jti", ""))
        if not await self.redis.delete(registry_key):
            raise _unauthorized("TOKEN_REVOKED", "Refresh token has been revoked")

        user = await self.db.get(User, user_id)
        if user is None or not user.is_active:
            raise _unauthorized("USER_NOT_FOUND", "User not found or inactive")
        return await self.issue_tokens(user)

    # -----------------------------------------------------------------------
    # Logout
    # -----------------------------------------------------------------------

    async def logout(self, access_token_jti: str, refresh_token: str) -> None:
        """Blacklist the access jti for its remaining lifetime and drop the refresh token."""
        access_ttl = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60
        await self.redis.setex(blacklist_redis_key(access_token_jti), access_ttl, "1")

        try:
            claims = decode_refresh_token(refresh_token)
        except JWTError:
            # an expired refresh token has already fallen out of the registry
            return
        await self.redis.delete(refresh_token_redis_key(claims.get("sub", ""), claims.get("jti", "")))

    # -----------------------------------------------------------------------
    # Profile
    # -----------------------------------------------------------------------

    async def update_profile(self, user: User, data: ProfileUpdateRequest) -> UserResponse:
        user.display_name = data.display_name
        await self.db.flush()
        await self.db.refresh(user)
        return UserResponse.model_validate(user)

    async def change_password(self, user: User, data: ChangePasswordRequest) -> None:
        if not verify_password(data.current_password, user.password_hash):
            raise _unauthorized("INVALID_PASSWORD", "Current password is incorrect")
        user.password_hash = hash_password(data.new_password)
        await self.db.flush()
        logger.info("Password changed user_id=%s", user.id)

    # -----------------------------------------------------------------------
    # Notification preferences
    # -----------------------------------------------------------------------

    @staticmethod
    def get_preferences(user: User) -> NotificationPreferences:
        return NotificationPreferences(
            email_notifications=user.email_notifications,
            new_comments=user.notify_new_comments,
            ticket_assignment=user.notify_ticket_assignment,
        )

    async def update_preferences(
        self, user: User, data: NotificationPreferencesUpdate
    ) -> NotificationPreferences:
        if data.email_notifications is not None:
            user.email_notifications = data.email_notifications
        if data.new_comments is not None:
            user.notify_new_comments = data.new_comments
        if data.ticket_assignment is not None:
            user.notify_ticket_assignment = data.ticket_assignment
        await self.db.flush()
        return self.get_preferences(user)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def issue_tokens(self, user: User) -> TokenResponse:
        """Sign a fresh pair and register the refresh jti in Redis for its lifetime."""
        user_id = str(user.id)
        refresh_token, refresh_jti = create_refresh_token(user_id)
        refresh_ttl = settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
        await self.redis.setex(refresh_token_redis_key(user_id, refresh_jti), refresh_ttl, "1")

        return TokenResponse(
            access_token=create_access_token(user_id),
            refresh_token=refresh_token,
            expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user),
        )
