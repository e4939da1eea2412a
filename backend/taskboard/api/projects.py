from uuid import UUID

from fastapi import APIRouter, Response, status

from taskboard.api.deps import CurrentUser, DbSession
from taskboard.schemas.project import (
    ProjectCreate,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from taskboard.services import project_service

router = APIRouter()


@router.get("", response_model=list[ProjectListResponse])
async def list_projects(current_user: CurrentUser, db: DbSession) -> list[ProjectListResponse]:
    """List all projects the current user is a member of."""
    return await project_service.list_projects(db, current_user.id)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> ProjectResponse:
    """Create a new project owned by the current user."""
    project = await project_service.create_project(db, current_user.id, project_data)
    return ProjectResponse.model_validate(project)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(project_id: UUID, current_user: CurrentUser, db: DbSession) -> ProjectDetailResponse:
    return await project_service.get_project_detail(db, project_id, current_user.id)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    project_data: ProjectUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ProjectResponse:
    project = await project_service.update_project(db, project_id, current_user.id, project_data)
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: UUID, current_user: CurrentUser, db: DbSession) -> Response:
    """Delete a project with its tasks, members and invitations."""
    await project_service.delete_project(db, project_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
