from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from taskboard.models.enums import TaskPriority, TaskStatus
from taskboard.schemas.profile import ProfileSummary


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: str | None = Field(None, max_length=2000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: datetime | None = None
    assignee_id: UUID | None = None


class TaskUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    title: str | None = Field(None, min_length=2, max_length=200)
    description: str | None = Field(None, max_length=2000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    deadline: datetime | None = None
    assignee_id: UUID | None = None


class TaskMove(BaseModel):
    """Drag-and-drop result: destination column and the index computed there."""

    status: TaskStatus
    order: int = Field(..., ge=0)


class TaskResponse(BaseModel):
    id: UUID
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    deadline: datetime | None
    order: int
    project_id: UUID
    creator_id: UUID
    assignee_id: UUID | None
    assignee: ProfileSummary | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BoardColumn(BaseModel):
    status: TaskStatus
    label: str
    tasks: list[TaskResponse]


class BoardResponse(BaseModel):
    project_id: UUID
    columns: list[BoardColumn]


class TaskProject(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class TaskDetailResponse(TaskResponse):
    creator: ProfileSummary
    project: TaskProject
