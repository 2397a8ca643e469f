"""
Account payloads: signup and login, the token pair, profile edits and
notification preferences.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

from focusforge.core.security import password_problem


def _strong_password(v: str) -> str:
    problem = password_problem(v)
    if problem:
        raise ValueError(problem)
    return v


def _required_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Display name is required")
    return v


def _signup_name(v: str) -> str:
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Display name is required")
    return v


NewPassword = Annotated[str, Field(min_length=8, max_length=128), AfterValidator(_strong_password)]
DisplayName = Annotated[str, Field(max_length=100), AfterValidator(_required_name)]
SignupName = Annotated[str, Field(min_length=2, max_length=100), AfterValidator(_signup_name)]


class RegisterRequest(BaseModel):
    display_name: SignupName
    email: EmailStr
    password: NewPassword


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserSummaryResponse(BaseModel):
    """The user as embedded in tickets, comments, members and invitations."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    display_name: str


class UserResponse(UserSummaryResponse):
    created_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token lifetime in seconds")
    user: UserResponse


class RefreshRequest(BaseModel):
    refresh_token: str


class LogoutRequest(RefreshRequest):
    pass


class ProfileUpdateRequest(BaseModel):
    display_name: DisplayName


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: NewPassword


class NotificationPreferences(BaseModel):
    email_notifications: bool = True
    new_comments: bool = True
    ticket_assignment: bool = True


class NotificationPreferencesUpdate(BaseModel):
    """Fields left out keep their stored value."""

    email_notifications: bool | None = None
    new_comments: bool | None = None
    ticket_assignment: bool | None = None
