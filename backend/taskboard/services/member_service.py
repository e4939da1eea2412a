"""Project membership: listing, role changes, removal and leaving."""

import logging
from uuid import UUID

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.exceptions import MemberNotFoundError, OwnerCannotBeRemovedError
from taskboard.models.enums import ProjectRole
from taskboard.models.project_member import ProjectMember
from taskboard.services.access import (
    check_member_removal,
    check_role_change,
    get_membership,
    require_membership,
)

logger = logging.getLogger(__name__)

# OWNER first, then ADMIN, then MEMBER
_ROLE_SORT = case(
    {ProjectRole.OWNER.value: 0, ProjectRole.ADMIN.value: 1, ProjectRole.MEMBER.value: 2},
    value=ProjectMember.role,
    else_=3,
)


async def list_members(db: AsyncSession, project_id: UUID, user_id: UUID) -> list[ProjectMember]:
    await require_membership(db, project_id, user_id)
    result = await db.execute(
        select(ProjectMember)
        .where(ProjectMember.project_id == project_id)
        .options(selectinload(ProjectMember.user))
        .order_by(_ROLE_SORT, ProjectMember.joined_at.asc())
    )
    return list(result.scalars().all())


async def _get_target(db: AsyncSession, project_id: UUID, member_user_id: UUID) -> ProjectMember:
    target = await get_membership(db, project_id, member_user_id)
    if target is None:
        raise MemberNotFoundError()
    return target


async def update_member_role(
    db: AsyncSession,
    project_id: UUID,
    user_id: UUID,
    member_user_id: UUID,
    role: ProjectRole,
) -> ProjectMember:
    """Owner-only role change between ADMIN and MEMBER."""
    actor = await require_membership(db, project_id, user_id)
    target = await _get_target(db, project_id, member_user_id)
    check_role_change(actor, target, role)

    target.role = role.value
    await db.flush()

    logger.info(f"User {user_id} set role of {member_user_id} in project {project_id} to {role.value}")
    result = await db.execute(
        select(ProjectMember)
        .where(ProjectMember.id == target.id)
        .options(selectinload(ProjectMember.user))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def remove_member(
    db: AsyncSession, project_id: UUID, user_id: UUID, member_user_id: UUID
) -> None:
    actor = await require_membership(db, project_id, user_id)
    target = await _get_target(db, project_id, member_user_id)
    check_member_removal(actor, target)

    await db.delete(target)
    logger.info(f"User {user_id} removed {member_user_id} from project {project_id}")


async def leave_project(db: AsyncSession, project_id: UUID, user_id: UUID) -> None:
    """Remove the caller's own membership. The owner cannot leave."""
    member = await require_membership(db, project_id, user_id)
    if member.role == ProjectRole.OWNER:
        raise OwnerCannotBeRemovedError()

    await db.delete(member)
    logger.info(f"User {user_id} left project {project_id}")
