from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr

from taskboard.models.enums import InvitationStatus
from taskboard.schemas.profile import ProfileSummary


class InviteMemberRequest(BaseModel):
    email: EmailStr


class InvitationResponse(BaseModel):
    id: UUID
    project_id: UUID
    email: str | None
    token: str
    status: InvitationStatus
    is_public: bool
    expires_at: datetime
    created_at: datetime
    sender: ProfileSummary | None = None

    class Config:
        from_attributes = True


class InvitationProject(BaseModel):
    id: UUID
    name: str
    description: str | None

    class Config:
        from_attributes = True


class InvitationSender(BaseModel):
    name: str
    email: str

    class Config:
        from_attributes = True


class InvitationPreview(BaseModel):
    """What an invitee sees before accepting."""

    token: str
    email: str | None
    is_public: bool
    expires_at: datetime
    project: InvitationProject
    sender: InvitationSender

    class Config:
        from_attributes = True
