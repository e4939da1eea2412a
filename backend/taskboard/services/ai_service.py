"""AI assistant features: task drafting, project digests, project bootstrap and chat."""

import json
import logging
from collections.abc import AsyncIterator, Sequence
from datetime import UTC, date, datetime, timedelta
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.constants.error_codes import get_status_label
from taskboard.exceptions import AIInvalidResponseError, RateLimitedError, ValidationError
from taskboard.models.enums import TaskPriority, TaskStatus
from taskboard.models.profile import Profile
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard.models.task import Task
from taskboard.schemas.ai import AIGeneratedProject, AIGeneratedTask, ChatMessage
from taskboard.services.access import require_membership
from taskboard.services.ai_client import AIClient, parse_ai_json
from taskboard.services.analytics_service import is_overdue
from taskboard.services.project_service import build_project
from taskboard.services.prompts import (
    PRIORITY_MARKERS,
    AssistantContext,
    DigestInput,
    build_assistant_system_prompt,
    build_digest_prompt,
    build_task_generation_prompt,
)
from taskboard.services.rate_limiter import RateLimiter, rate_limiter

logger = logging.getLogger(__name__)

DIGEST_TASK_LIMIT = 30
DIGEST_ACTIVE_LIMIT = 10
AI_PROJECT_TASK_LIMIT = 10
MAX_DEADLINE_DAYS = 90
CHAT_TASK_LIMIT = 20

# Highest priority first when sorted ascending
PRIORITY_SORT = case(
    (Task.priority == TaskPriority.URGENT.value, 0),
    (Task.priority == TaskPriority.HIGH.value, 1),
    (Task.priority == TaskPriority.MEDIUM.value, 2),
    else_=3,
)


def enforce_rate_limit(
    feature: str,
    user_id: UUID,
    limit: tuple[int, int],
    limiter: RateLimiter = rate_limiter,
) -> None:
    max_attempts, window_seconds = limit
    result = limiter.check(f"{feature}:{user_id}", max_attempts, window_seconds)
    if not result.success:
        logger.warning(f"Rate limit hit for {feature} by user {user_id}, reset in {result.reset_in}s")
        raise RateLimitedError(result.reset_in)


async def generate_task_details(client: AIClient, title: str, locale: str = "en") -> AIGeneratedTask:
    prompt = build_task_generation_prompt(title, locale)
    response = await client.chat_completion([{"role": "user", "content": prompt}])

    try:
        return AIGeneratedTask.model_validate(parse_ai_json(response))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.error(f"AI response validation failed: {e}")
        raise AIInvalidResponseError()


def _format_deadline(deadline: datetime) -> str:
    return deadline.strftime("%d %b")


def build_digest_input(tasks: Sequence[Task], today: date, locale: str = "en") -> DigestInput:
    counts = {status: 0 for status in TaskStatus}
    for task in tasks:
        counts[TaskStatus(task.status)] += 1

    overdue_label = "просрочено" if locale == "ru" else "overdue"
    lines = []
    active = [t for t in tasks if t.status != TaskStatus.DONE][:DIGEST_ACTIVE_LIMIT]
    for t in active:
        line = f"{PRIORITY_MARKERS.get(t.priority, '⚪')} {t.title}"
        if t.deadline:
            line += f" (due {_format_deadline(t.deadline)})"
        if is_overdue(t, today):
            line += f" ⚠️ {overdue_label}"
        lines.append(line)

    return DigestInput(
        total=len(tasks),
        todo=counts[TaskStatus.TODO],
        in_progress=counts[TaskStatus.IN_PROGRESS],
        review=counts[TaskStatus.REVIEW],
        done=counts[TaskStatus.DONE],
        overdue=sum(1 for t in tasks if is_overdue(t, today)),
        tasks_list="\n".join(lines),
    )


async def get_project_digest(
    db: AsyncSession,
    client: AIClient,
    project_id: UUID,
    user_id: UUID,
    locale: str = "en",
) -> str:
    """Digest of the caller's assigned or created tasks in a project."""
    await require_membership(db, project_id, user_id)

    result = await db.execute(
        select(Task)
        .where(
            Task.project_id == project_id,
            or_(Task.assignee_id == user_id, Task.creator_id == user_id),
        )
        .order_by(PRIORITY_SORT, Task.deadline.asc())
        .limit(DIGEST_TASK_LIMIT)
    )
    tasks = list(result.scalars().all())

    digest = build_digest_input(tasks, datetime.now(UTC).date(), locale)
    prompt = build_digest_prompt(digest, locale)
    return await client.chat_completion([{"role": "user", "content": prompt}], max_tokens=500)


def build_project_from_ai(owner_id: UUID, data: AIGeneratedProject, now: datetime) -> Project:
    """Project, OWNER membership and up to ten TODO tasks from an AI draft."""
    name = (data.project.name or "").strip()
    if len(name) < 2:
        raise ValidationError()

    project = build_project(
        owner_id,
        name[:100],
        (data.project.description or "")[:500] or None,
    )
    for draft in data.tasks[:AI_PROJECT_TASK_LIMIT]:
        title = draft.title.strip()[:200]
        if len(title) < 2:
            continue
        deadline = None
        if draft.deadline_days:
            deadline = now + timedelta(days=min(draft.deadline_days, MAX_DEADLINE_DAYS))
        project.tasks.append(
            Task(
                title=title,
                description=(draft.description or "")[:2000] or None,
                status=TaskStatus.TODO.value,
                priority=draft.priority.value,
                deadline=deadline,
                order=len(project.tasks),
                creator_id=owner_id,
            )
        )
    return project


async def create_project_from_ai(db: AsyncSession, owner_id: UUID, data: AIGeneratedProject) -> Project:
    project = build_project_from_ai(owner_id, data, datetime.now(UTC))
    db.add(project)
    await db.flush()

    logger.info(f"User {owner_id} created project {project.id} from an AI draft with {len(project.tasks)} tasks")
    return project


async def get_assistant_context(db: AsyncSession, user: Profile, locale: str = "en") -> AssistantContext:
    member_projects = select(ProjectMember.project_id).where(ProjectMember.user_id == user.id)

    result = await db.execute(select(func.count(Project.id)).where(Project.id.in_(member_projects)))
    projects_count = result.scalar_one()

    result = await db.execute(
        select(Task)
        .where(Task.project_id.in_(member_projects), Task.status != TaskStatus.DONE.value)
        .options(selectinload(Task.project))
        .order_by(PRIORITY_SORT, Task.deadline.asc())
        .limit(CHAT_TASK_LIMIT)
    )
    tasks = result.scalars().all()

    lines = []
    for t in tasks:
        deadline = f" (due {t.deadline.date().isoformat()})" if t.deadline else ""
        status = get_status_label(t.status, locale)
        lines.append(f"{PRIORITY_MARKERS.get(t.priority, '⚪')} [{t.project.name}] {t.title}{deadline}: {status}")

    return AssistantContext(
        user_name=user.name or None,
        projects_count=projects_count,
        tasks_context="\n".join(lines) or None,
    )


def stream_chat(
    client: AIClient,
    context: AssistantContext,
    messages: list[ChatMessage],
    locale: str = "en",
) -> AsyncIterator[str]:
    full_messages = [{"role": "system", "content": build_assistant_system_prompt(context, locale)}]
    full_messages.extend({"role": m.role, "content": m.content} for m in messages)
    return client.stream_chat_completion(full_messages, max_tokens=2000, temperature=0.7)
