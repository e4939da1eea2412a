"""Project lifecycle: creation with the owner membership, listing, updates."""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.models.enums import ProjectRole
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember
from taskboard.models.task import Task
from taskboard.schemas.project import (
    ProjectCreate,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectUpdate,
)
from taskboard.services.access import get_accessible_project, require_membership
from taskboard.services.member_service import list_members

logger = logging.getLogger(__name__)


def build_project(owner_id: UUID, name: str, description: str | None) -> Project:
    """New project with exactly one OWNER membership for its creator."""
    project = Project(owner_id=owner_id, name=name, description=description)
    project.members.append(ProjectMember(user_id=owner_id, role=ProjectRole.OWNER.value))
    return project


async def create_project(db: AsyncSession, owner_id: UUID, data: ProjectCreate) -> Project:
    project = build_project(owner_id, data.name, data.description)
    db.add(project)
    await db.flush()
    await db.refresh(project)

    logger.info(f"User {owner_id} created project {project.id}")
    return project


async def _task_count(db: AsyncSession, project_id: UUID) -> int:
    result = await db.execute(select(func.count(Task.id)).where(Task.project_id == project_id))
    return result.scalar_one()


async def list_projects(db: AsyncSession, user_id: UUID) -> list[ProjectListResponse]:
    """Projects the user belongs to, most recently updated first."""
    member_count = (
        select(func.count(ProjectMember.id))
        .where(ProjectMember.project_id == Project.id)
        .correlate(Project)
        .scalar_subquery()
    )
    task_count = (
        select(func.count(Task.id))
        .where(Task.project_id == Project.id)
        .correlate(Project)
        .scalar_subquery()
    )
    result = await db.execute(
        select(Project, ProjectMember.role, member_count, task_count)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .where(ProjectMember.user_id == user_id)
        .options(selectinload(Project.owner))
        .order_by(Project.updated_at.desc())
    )

    responses = []
    for project, role, members, tasks in result.all():
        response = ProjectListResponse.model_validate(
            {
                "id": project.id,
                "owner_id": project.owner_id,
                "name": project.name,
                "description": project.description,
                "created_at": project.created_at,
                "updated_at": project.updated_at,
                "owner": project.owner,
                "role": role,
                "member_count": members,
                "task_count": tasks,
            }
        )
        responses.append(response)
    return responses


async def get_project_detail(db: AsyncSession, project_id: UUID, user_id: UUID) -> ProjectDetailResponse:
    membership = await require_membership(db, project_id, user_id)

    result = await db.execute(
        select(Project).where(Project.id == project_id).options(selectinload(Project.owner))
    )
    project = result.scalar_one()
    members = await list_members(db, project_id, user_id)

    return ProjectDetailResponse.model_validate(
        {
            "id": project.id,
            "owner_id": project.owner_id,
            "name": project.name,
            "description": project.description,
            "created_at": project.created_at,
            "updated_at": project.updated_at,
            "owner": project.owner,
            "role": membership.role,
            "members": members,
            "task_count": await _task_count(db, project_id),
        }
    )


async def update_project(
    db: AsyncSession, project_id: UUID, user_id: UUID, data: ProjectUpdate
) -> Project:
    """OWNER or ADMIN only."""
    project, _ = await get_accessible_project(db, project_id, user_id, min_role=ProjectRole.ADMIN)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    for field, value in update_data.items():
        setattr(project, field, value)

    await db.flush()
    await db.refresh(project)

    logger.info(f"User {user_id} updated project {project_id}: {sorted(update_data)}")
    return project


async def delete_project(db: AsyncSession, project_id: UUID, user_id: UUID) -> None:
    """OWNER only. Tasks, members and invitations go with the project."""
    project, _ = await get_accessible_project(db, project_id, user_id, min_role=ProjectRole.OWNER)
    await db.delete(project)

    logger.info(f"User {user_id} deleted project {project_id}")
