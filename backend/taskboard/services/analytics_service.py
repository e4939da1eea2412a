"""Per-project task statistics."""

from collections.abc import Iterable
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.constants.error_codes import get_status_label
from taskboard.models.enums import STATUS_ORDER, TaskStatus
from taskboard.models.task import Task
from taskboard.schemas.analytics import OverdueTask, ProjectAnalytics, StatusCount
from taskboard.schemas.profile import ProfileSummary
from taskboard.services.access import require_membership


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed tasks, rounded half up; 0 for an empty project."""
    if total == 0:
        return 0
    rate = Decimal(completed * 100) / Decimal(total)
    return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_overdue(task: Task, today: date) -> bool:
    if task.deadline is None or task.status == TaskStatus.DONE:
        return False
    deadline = task.deadline
    if deadline.tzinfo is not None:
        deadline = deadline.astimezone(UTC)
    return deadline.date() < today


def compute_analytics(tasks: Iterable[Task], today: date, locale: str = "en") -> ProjectAnalytics:
    tasks = list(tasks)
    counts = {status: 0 for status in STATUS_ORDER}
    overdue: list[Task] = []

    for task in tasks:
        counts[TaskStatus(task.status)] += 1
        if is_overdue(task, today):
            overdue.append(task)

    overdue.sort(key=lambda t: t.deadline)
    completed = counts[TaskStatus.DONE]

    return ProjectAnalytics(
        total_tasks=len(tasks),
        completed_tasks=completed,
        overdue_tasks=len(overdue),
        completion_rate=completion_rate(completed, len(tasks)),
        status_counts=[
            StatusCount(status=status, count=counts[status], label=get_status_label(status.value, locale))
            for status in STATUS_ORDER
        ],
        overdue_tasks_list=[
            OverdueTask(
                id=t.id,
                title=t.title,
                deadline=t.deadline,
                priority=t.priority,
                assignee=ProfileSummary.model_validate(t.assignee) if t.assignee else None,
            )
            for t in overdue
        ],
    )


async def get_project_analytics(
    db: AsyncSession, project_id: UUID, user_id: UUID, locale: str = "en"
) -> ProjectAnalytics:
    await require_membership(db, project_id, user_id)

    result = await db.execute(
        select(Task).where(Task.project_id == project_id).options(selectinload(Task.assignee))
    )
    today = datetime.now(UTC).date()
    return compute_analytics(result.scalars().all(), today, locale)
