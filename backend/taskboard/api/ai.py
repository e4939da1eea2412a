"""AI assistant endpoints.

Every endpoint is rate limited per user with an in-process fixed window.
Upstream failures surface as AIServiceError and are rendered by the
application's error handler.
"""

from collections.abc import AsyncIterator
from uuid import UUID

from fastapi import APIRouter, status
from fastapi.responses import StreamingResponse

from taskboard.api.deps import AIClientDep, CurrentUser, DbSession
from taskboard.config import get_settings
from taskboard.schemas.ai import (
    AIGeneratedProject,
    AIGeneratedTask,
    AIProjectCreated,
    ChatRequest,
    DigestResponse,
    GenerateTaskRequest,
)
from taskboard.services import ai_service

settings = get_settings()

router = APIRouter()


# =============================================================================
# Task drafting and digests
# =============================================================================


@router.post("/tasks/generate", response_model=AIGeneratedTask)
async def generate_task(
    request: GenerateTaskRequest,
    current_user: CurrentUser,
    client: AIClientDep,
) -> AIGeneratedTask:
    """Draft description, priority and deadline for a task title."""
    ai_service.enforce_rate_limit("ai-generate", current_user.id, settings.ai_generate_rate_limit)
    return await ai_service.generate_task_details(client, request.title, settings.locale)


@router.get("/projects/{project_id}/digest", response_model=DigestResponse)
async def get_digest(
    project_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
    client: AIClientDep,
) -> DigestResponse:
    ai_service.enforce_rate_limit("ai-digest", current_user.id, settings.ai_digest_rate_limit)
    content = await ai_service.get_project_digest(db, client, project_id, current_user.id, settings.locale)
    return DigestResponse(content=content)


# =============================================================================
# Assistant
# =============================================================================


@router.post("/projects", response_model=AIProjectCreated, status_code=status.HTTP_201_CREATED)
async def create_project_from_ai(
    data: AIGeneratedProject,
    current_user: CurrentUser,
    db: DbSession,
) -> AIProjectCreated:
    """Create a project and its tasks from an assistant draft."""
    ai_service.enforce_rate_limit("ai-project", current_user.id, settings.ai_generate_rate_limit)
    project = await ai_service.create_project_from_ai(db, current_user.id, data)
    return AIProjectCreated(project_id=project.id)


@router.post("/chat")
async def chat(
    request: ChatRequest,
    current_user: CurrentUser,
    db: DbSession,
    client: AIClientDep,
) -> StreamingResponse:
    """Stream the assistant's reply as plain text."""
    ai_service.enforce_rate_limit("ai-chat", current_user.id, settings.ai_chat_rate_limit)

    context = await ai_service.get_assistant_context(db, current_user, settings.locale)
    stream = ai_service.stream_chat(client, context, request.messages, settings.locale)

    # Pull the first chunk here so upstream errors still become a JSON error response
    first = await anext(stream, "")

    async def body() -> AsyncIterator[str]:
        if first:
            yield first
        async for chunk in stream:
            yield chunk

    return StreamingResponse(
        body(),
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache"},
    )
