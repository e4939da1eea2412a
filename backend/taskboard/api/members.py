"""Members API for project collaboration."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from taskboard.api.deps import CurrentUser, DbSession
from taskboard.schemas.member import MemberListItem, MemberResponse, MemberRoleUpdate
from taskboard.schemas.profile import ProfileSummary
from taskboard.services import member_service, task_service
from taskboard.services.access import can_remove_member

router = APIRouter()


@router.get("/projects/{project_id}/members", response_model=list[MemberListItem])
async def list_members(project_id: UUID, current_user: CurrentUser, db: DbSession) -> list[MemberListItem]:
    """List members: owner first, then admins, then members, oldest first.

    Each row says whether the caller may remove that member.
    """
    members = await member_service.list_members(db, project_id, current_user.id)
    actor_role = next((m.role for m in members if m.user_id == current_user.id), None)
    items = []
    for m in members:
        item = MemberListItem.model_validate(m)
        if actor_role is not None:
            item.can_remove = can_remove_member(actor_role, m.role, m.user_id == current_user.id)
        items.append(item)
    return items


@router.get("/projects/{project_id}/assignees", response_model=list[ProfileSummary])
async def list_assignees(project_id: UUID, current_user: CurrentUser, db: DbSession) -> list[ProfileSummary]:
    profiles = await task_service.list_assignees(db, project_id, current_user.id)
    return [ProfileSummary.model_validate(p) for p in profiles]


@router.patch("/projects/{project_id}/members/{user_id}", response_model=MemberResponse)
async def update_member_role(
    project_id: UUID,
    user_id: UUID,
    role_data: MemberRoleUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> MemberResponse:
    """Change a member's role. Owner only."""
    member = await member_service.update_member_role(
        db, project_id, current_user.id, user_id, role_data.role
    )
    return MemberResponse.model_validate(member)


@router.delete("/projects/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    project_id: UUID,
    user_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> Response:
    await member_service.remove_member(db, project_id, current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/projects/{project_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
async def leave_project(project_id: UUID, current_user: CurrentUser, db: DbSession) -> Response:
    await member_service.leave_project(db, project_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
