"""Membership-based access control.

Every check reads the caller's membership row from the database; roles are
never cached in the session or token.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.exceptions import (
    AdminCannotRemoveAdminError,
    InvalidRoleError,
    OwnerCannotBeRemovedError,
    OwnerOnlyError,
    OwnerRoleImmutableError,
    PermissionDeniedError,
    ProjectAccessError,
)
from taskboard.models.enums import ProjectRole
from taskboard.models.project import Project
from taskboard.models.project_member import ProjectMember

ROLE_RANK: dict[str, int] = {
    ProjectRole.OWNER.value: 3,
    ProjectRole.ADMIN.value: 2,
    ProjectRole.MEMBER.value: 1,
}


def role_at_least(role: str, min_role: ProjectRole) -> bool:
    return ROLE_RANK.get(role, 0) >= ROLE_RANK[min_role.value]


async def get_membership(
    db: AsyncSession, project_id: UUID, user_id: UUID
) -> ProjectMember | None:
    result = await db.execute(
        select(ProjectMember).where(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def require_membership(
    db: AsyncSession,
    project_id: UUID,
    user_id: UUID,
    min_role: ProjectRole | None = None,
) -> ProjectMember:
    """Return the caller's membership or raise.

    Raises:
        ProjectAccessError: project missing or caller not a member (404)
        OwnerOnlyError / PermissionDeniedError: member below ``min_role`` (403)
    """
    member = await get_membership(db, project_id, user_id)
    if member is None:
        raise ProjectAccessError()

    if min_role is not None and not role_at_least(member.role, min_role):
        if min_role == ProjectRole.OWNER:
            raise OwnerOnlyError()
        raise PermissionDeniedError()

    return member


async def get_accessible_project(
    db: AsyncSession,
    project_id: UUID,
    user_id: UUID,
    min_role: ProjectRole | None = None,
) -> tuple[Project, ProjectMember]:
    """Load a project together with the caller's membership."""
    member = await require_membership(db, project_id, user_id, min_role)

    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if project is None:
        raise ProjectAccessError()

    return project, member


def check_role_change(actor: ProjectMember, target: ProjectMember, new_role: ProjectRole) -> None:
    """Validate a role change; the OWNER row is never a valid target."""
    if actor.role != ProjectRole.OWNER:
        raise OwnerOnlyError()
    if target.role == ProjectRole.OWNER:
        raise OwnerRoleImmutableError()
    if new_role not in (ProjectRole.ADMIN, ProjectRole.MEMBER):
        raise InvalidRoleError()


def check_member_removal(actor: ProjectMember, target: ProjectMember) -> None:
    """Validate removing ``target`` on behalf of ``actor``.

    Anyone but the owner may remove themselves. The owner may remove any
    other member, an admin may remove plain members only.
    """
    if target.role == ProjectRole.OWNER:
        raise OwnerCannotBeRemovedError()

    if actor.user_id == target.user_id:
        return

    if not role_at_least(actor.role, ProjectRole.ADMIN):
        raise PermissionDeniedError()

    if actor.role == ProjectRole.ADMIN and target.role == ProjectRole.ADMIN:
        raise AdminCannotRemoveAdminError()


def can_remove_member(actor_role: str, target_role: str, is_self: bool) -> bool:
    """Boolean form of :func:`check_member_removal`, used by the member listing."""
    if target_role == ProjectRole.OWNER:
        return False
    if is_self or actor_role == ProjectRole.OWNER:
        return True
    return actor_role == ProjectRole.ADMIN and target_role == ProjectRole.MEMBER
