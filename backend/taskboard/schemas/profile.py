from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

_avatar_url = TypeAdapter(HttpUrl)


class ProfileSummary(BaseModel):
    id: UUID
    name: str
    email: str
    avatar: str | None = None

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    id: UUID
    firebase_uid: str
    email: str
    name: str
    avatar: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileDetails(BaseModel):
    id: UUID
    email: str
    name: str
    avatar: str | None
    created_at: datetime
    owned_projects_count: int
    assigned_tasks_count: int


class ProfileUpdate(BaseModel):
    name: str = Field(..., max_length=100)
    avatar: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must be at least 2 characters")
        return v

    @field_validator("avatar")
    @classmethod
    def validate_avatar(cls, v: str | None) -> str | None:
        """Empty string clears the avatar; anything else must be an http(s) URL."""
        if v is None or v.strip() == "":
            return None
        v = v.strip()
        try:
            url = _avatar_url.validate_python(v)
        except ValidationError:
            raise ValueError("avatar must be a valid URL") from None
        return str(url)
