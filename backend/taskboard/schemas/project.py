from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from taskboard.models.enums import ProjectRole
from taskboard.schemas.member import MemberResponse
from taskboard.schemas.profile import ProfileSummary


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str | None = Field(None, max_length=500)


class ProjectUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    description: str | None = Field(None, max_length=500)


class ProjectResponse(BaseModel):
    id: UUID
    owner_id: UUID
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectListResponse(ProjectResponse):
    owner: ProfileSummary
    role: ProjectRole
    member_count: int = 0
    task_count: int = 0


class ProjectDetailResponse(ProjectResponse):
    owner: ProfileSummary
    role: ProjectRole
    members: list[MemberResponse] = Field(default_factory=list)
    task_count: int = 0
