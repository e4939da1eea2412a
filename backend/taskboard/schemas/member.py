from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from taskboard.models.enums import ProjectRole
from taskboard.schemas.profile import ProfileSummary


class MemberResponse(BaseModel):
    id: UUID
    project_id: UUID
    user_id: UUID
    role: ProjectRole
    joined_at: datetime
    user: ProfileSummary

    class Config:
        from_attributes = True


class MemberRoleUpdate(BaseModel):
    role: ProjectRole


class MemberListItem(MemberResponse):
    """Member row with the actions the caller may take on it."""

    can_remove: bool = False
