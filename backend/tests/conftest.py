"""
Pytest fixtures for taskboard backend tests.

The database session is replaced by an AsyncMock whose ``execute`` returns
canned results in call order, so no PostgreSQL instance is needed.
Run with: pytest backend/tests -v
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskboard.models import Invitation, Profile, ProjectMember, Task
from taskboard.models.enums import InvitationStatus, ProjectRole, TaskPriority, TaskStatus


def make_result(value=None, items=None, rows=None):
    """Fake ``Result``: ``value`` for scalar access, ``items`` for ``scalars().all()``."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    result.scalars.return_value.all.return_value = list(items or [])
    result.first.return_value = value
    result.all.return_value = list(rows or [])
    return result


def make_db(*results):
    """AsyncSession stand-in returning ``results`` from successive execute calls."""
    db = AsyncMock()
    db.execute = AsyncMock(side_effect=list(results))
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.commit = AsyncMock()
    return db


def make_profile(email: str = "alice@example.com", name: str = "Alice") -> Profile:
    now = datetime.now(timezone.utc)
    return Profile(
        id=uuid.uuid4(),
        firebase_uid=f"uid-{uuid.uuid4().hex[:8]}",
        email=email,
        name=name,
        avatar=None,
        created_at=now,
        updated_at=now,
    )


def make_member(project_id, user_id, role: ProjectRole = ProjectRole.MEMBER) -> ProjectMember:
    return ProjectMember(
        id=uuid.uuid4(),
        project_id=project_id,
        user_id=user_id,
        role=role.value,
        joined_at=datetime.now(timezone.utc),
    )


def make_task(
    project_id=None,
    status: TaskStatus = TaskStatus.TODO,
    order: int = 1,
    title: str = "Write docs",
    deadline: datetime | None = None,
    priority: TaskPriority = TaskPriority.MEDIUM,
) -> Task:
    now = datetime.now(timezone.utc)
    return Task(
        id=uuid.uuid4(),
        title=title,
        description=None,
        status=status.value,
        priority=priority.value,
        deadline=deadline,
        order=order,
        project_id=project_id or uuid.uuid4(),
        creator_id=uuid.uuid4(),
        assignee_id=None,
        created_at=now,
        updated_at=now,
    )


def make_invitation(
    project_id=None,
    email: str | None = "bob@example.com",
    status: InvitationStatus = InvitationStatus.PENDING,
    expires_at: datetime | None = None,
    is_public: bool = False,
) -> Invitation:
    now = datetime.now(timezone.utc)
    return Invitation(
        id=uuid.uuid4(),
        email=email,
        token=uuid.uuid4().hex,
        status=status.value,
        is_public=is_public,
        expires_at=expires_at or datetime(2099, 1, 1, tzinfo=timezone.utc),
        sender_id=uuid.uuid4(),
        project_id=project_id or uuid.uuid4(),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def project_id():
    return uuid.uuid4()


@pytest.fixture
def owner():
    return make_profile("owner@example.com", "Olga Owner")


@pytest.fixture
def alice():
    return make_profile()
