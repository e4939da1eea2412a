from typing import Literal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from taskboard.models.enums import TaskPriority


class GenerateTaskRequest(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)


class AIGeneratedTask(BaseModel):
    """Task details as returned by the model (camelCase keys accepted)."""

    description: str = Field(..., max_length=2000)
    priority: TaskPriority
    deadline_days: int = Field(
        ..., ge=1, le=90, validation_alias=AliasChoices("deadline_days", "deadlineDays")
    )


class DigestResponse(BaseModel):
    content: str


class AIProjectInfo(BaseModel):
    name: str
    description: str | None = None


class AIProjectTask(BaseModel):
    title: str = Field(..., min_length=1)
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline_days: int | None = Field(
        None, ge=1, validation_alias=AliasChoices("deadline_days", "deadlineDays")
    )


class AIGeneratedProject(BaseModel):
    """Project draft produced by the assistant chat."""

    action: str | None = None
    project: AIProjectInfo
    tasks: list[AIProjectTask] = Field(default_factory=list)


class AIProjectCreated(BaseModel):
    project_id: UUID


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., min_length=1)
