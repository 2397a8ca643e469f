"""
Account endpoints, mounted at /api/auth.

POST /signup (alias /register), POST /login, POST /refresh, POST /logout,
GET /me, PUT /profile, PUT /change-password and the notification
preference pair under /notification-preferences.
"""

from __future__ import annotations

from typing import Any

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from focusforge.core.database import get_db
from focusforge.core.dependencies import get_access_claims, get_current_user, get_redis
from focusforge.models.user import User
from focusforge.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LogoutRequest,
    NotificationPreferences,
    NotificationPreferencesUpdate,
    ProfileUpdateRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from focusforge.services.auth_service import AuthService

router = APIRouter()


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
) -> AuthService:
    return AuthService(db=db, redis=redis)


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def signup(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Create an account and sign it in.

    Invitations already sent to this email are attached to the new user so
    they show up in the pending lists right away.
    """
    return await service.register(data)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return await service.login(data)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    data: RefreshRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Trade a refresh token for a new pair. The old refresh token stops working."""
    return await service.refresh(data.refresh_token)


@router.post("/logout")
async def logout(
    data: LogoutRequest,
    current_user: User = Depends(get_current_user),
    claims: dict[str, Any] = Depends(get_access_claims),
    service: AuthService = Depends(get_auth_service),
) -> dict:
    await service.logout(access_token_jti=claims.get("jti", ""), refresh_token=data.refresh_token)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    return await service.update_profile(current_user, data)


@router.put("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> dict:
    # Tokens issued before the change remain valid until they expire
    await service.change_password(current_user, data)
    return {"message": "Password updated"}


@router.get("/notification-preferences", response_model=NotificationPreferences)
async def get_notification_preferences(
    current_user: User = Depends(get_current_user),
) -> NotificationPreferences:
    return AuthService.get_preferences(current_user)


@router.put("/notification-preferences", response_model=NotificationPreferences)
async def update_notification_preferences(
    data: NotificationPreferencesUpdate,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> NotificationPreferences:
    return await service.update_preferences(current_user, data)
