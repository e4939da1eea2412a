"""Task CRUD and per-column ordering."""

import logging
from enum import Enum
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.exceptions import AssigneeNotMemberError, ProjectAccessError, TaskNotFoundError
from taskboard.models.enums import TaskStatus
from taskboard.models.profile import Profile
from taskboard.models.project_member import ProjectMember
from taskboard.models.task import Task
from taskboard.schemas.task import TaskCreate, TaskMove, TaskUpdate
from taskboard.services.access import get_membership, require_membership

logger = logging.getLogger(__name__)


async def next_order(db: AsyncSession, project_id: UUID, status: TaskStatus | str) -> int:
    """Order for a new task: one past the largest order in its column, or 1."""
    status_value = status.value if isinstance(status, TaskStatus) else status
    result = await db.execute(
        select(func.max(Task.order)).where(
            Task.project_id == project_id,
            Task.status == status_value,
        )
    )
    max_order = result.scalar_one_or_none()
    return (max_order or 0) + 1


async def load_task(db: AsyncSession, task_id: UUID) -> Task | None:
    result = await db.execute(
        select(Task)
        .where(Task.id == task_id)
        .options(selectinload(Task.assignee), selectinload(Task.creator), selectinload(Task.project))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_task_for_member(db: AsyncSession, task_id: UUID, user_id: UUID) -> Task:
    """Load a task the caller can see.

    A task in a project the caller does not belong to is reported exactly
    like a missing task.
    """
    task = await load_task(db, task_id)
    if task is None:
        raise TaskNotFoundError()
    try:
        await require_membership(db, task.project_id, user_id)
    except ProjectAccessError:
        raise TaskNotFoundError() from None
    return task


async def _check_assignee(db: AsyncSession, project_id: UUID, assignee_id: UUID | None) -> None:
    if assignee_id is None:
        return
    if await get_membership(db, project_id, assignee_id) is None:
        raise AssigneeNotMemberError()


async def list_project_tasks(db: AsyncSession, project_id: UUID, user_id: UUID) -> list[Task]:
    await require_membership(db, project_id, user_id)
    result = await db.execute(
        select(Task)
        .where(Task.project_id == project_id)
        .options(selectinload(Task.assignee))
        .order_by(Task.order.asc())
    )
    return list(result.scalars().all())


async def create_task(db: AsyncSession, project_id: UUID, user_id: UUID, data: TaskCreate) -> Task:
    await require_membership(db, project_id, user_id)
    await _check_assignee(db, project_id, data.assignee_id)

    order = await next_order(db, project_id, data.status)
    task = Task(
        title=data.title,
        description=data.description,
        status=data.status.value,
        priority=data.priority.value,
        deadline=data.deadline,
        assignee_id=data.assignee_id,
        order=order,
        project_id=project_id,
        creator_id=user_id,
    )
    db.add(task)
    await db.flush()

    logger.info(f"User {user_id} created task {task.id} in project {project_id} ({data.status.value}, order={order})")
    return await load_task(db, task.id)


async def update_task(db: AsyncSession, task_id: UUID, user_id: UUID, data: TaskUpdate) -> Task:
    """Apply the fields present in ``data``. Changing status here keeps the order."""
    task = await get_task_for_member(db, task_id, user_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("assignee_id") is not None:
        await _check_assignee(db, task.project_id, update_data["assignee_id"])

    for field, value in update_data.items():
        if field in ("title", "status", "priority") and value is None:
            continue  # Not nullable
        if isinstance(value, Enum):
            value = value.value
        setattr(task, field, value)

    await db.flush()
    return await load_task(db, task.id)


async def move_task(db: AsyncSession, task_id: UUID, user_id: UUID, move: TaskMove) -> Task:
    """Set status and order exactly as computed by the board; siblings are untouched."""
    task = await get_task_for_member(db, task_id, user_id)

    task.status = move.status.value
    task.order = move.order
    await db.flush()

    logger.info(f"User {user_id} moved task {task_id} to {move.status.value} at {move.order}")
    return await load_task(db, task.id)


async def delete_task(db: AsyncSession, task_id: UUID, user_id: UUID) -> None:
    task = await get_task_for_member(db, task_id, user_id)
    await db.delete(task)
    logger.info(f"User {user_id} deleted task {task_id}")


async def list_assignees(db: AsyncSession, project_id: UUID, user_id: UUID) -> list[Profile]:
    """Profiles of every project member, for the assignee picker."""
    await require_membership(db, project_id, user_id)
    result = await db.execute(
        select(Profile)
        .join(ProjectMember, ProjectMember.user_id == Profile.id)
        .where(ProjectMember.project_id == project_id)
        .order_by(Profile.name)
    )
    return list(result.scalars().all())
