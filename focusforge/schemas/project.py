from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from focusforge.schemas.auth import UserSummaryResponse


class ProjectCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    status: str = Field(default="active", pattern="^(active|inactive|archived)$")
    type: str = Field(default="backend", pattern="^(backend|frontend|design)$")
    due_date: date | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name is required")
        return v


class ProjectUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: str | None = Field(default=None, pattern="^(active|inactive|archived)$")
    type: str | None = Field(default=None, pattern="^(backend|frontend|design)$")
    due_date: date | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be blank")
        return v


class ProjectMemberResponse(BaseModel):
    """Single project member with user info and role."""

    id: UUID
    user_id: UUID
    email: str
    display_name: str
    role: str
    joined_at: datetime


class ProjectResponse(BaseModel):
    id: UUID
    name: str
    description: str | None
    status: str
    type: str
    due_date: date | None
    owner_id: UUID
    owner: UserSummaryResponse | None = None
    members: list[ProjectMemberResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    total: int


class ProjectMembersResponse(BaseModel):
    members: list[ProjectMemberResponse]
    total: int
