from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from taskboard.models.enums import TaskPriority, TaskStatus
from taskboard.schemas.profile import ProfileSummary


class StatusCount(BaseModel):
    status: TaskStatus
    count: int
    label: str


class OverdueTask(BaseModel):
    id: UUID
    title: str
    deadline: datetime
    priority: TaskPriority
    assignee: ProfileSummary | None = None


class ProjectAnalytics(BaseModel):
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    completion_rate: int
    status_counts: list[StatusCount]
    overdue_tasks_list: list[OverdueTask]
