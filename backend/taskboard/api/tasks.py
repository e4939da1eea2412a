from uuid import UUID

from fastapi import APIRouter, Response, status

from taskboard.api.deps import CurrentUser, DbSession
from taskboard.config import get_settings
from taskboard.constants.error_codes import get_status_label
from taskboard.models.enums import STATUS_ORDER
from taskboard.schemas.task import (
    BoardColumn,
    BoardResponse,
    TaskCreate,
    TaskDetailResponse,
    TaskMove,
    TaskResponse,
    TaskUpdate,
)
from taskboard.services import task_service
from taskboard.services.board import group_by_status

settings = get_settings()

router = APIRouter()


@router.get("/projects/{project_id}/board", response_model=BoardResponse)
async def get_board(project_id: UUID, current_user: CurrentUser, db: DbSession) -> BoardResponse:
    """Tasks grouped into status columns, each sorted by order."""
    tasks = await task_service.list_project_tasks(db, project_id, current_user.id)
    columns = group_by_status(tasks)
    return BoardResponse(
        project_id=project_id,
        columns=[
            BoardColumn(
                status=s,
                label=get_status_label(s.value, settings.locale),
                tasks=[TaskResponse.model_validate(t) for t in columns[s]],
            )
            for s in STATUS_ORDER
        ],
    )


@router.post(
    "/projects/{project_id}/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    project_id: UUID,
    task_data: TaskCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> TaskResponse:
    task = await task_service.create_task(db, project_id, current_user.id, task_data)
    return TaskResponse.model_validate(task)


@router.get("/tasks/{task_id}", response_model=TaskDetailResponse)
async def get_task(task_id: UUID, current_user: CurrentUser, db: DbSession) -> TaskDetailResponse:
    task = await task_service.get_task_for_member(db, task_id, current_user.id)
    return TaskDetailResponse.model_validate(task)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    task_data: TaskUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> TaskResponse:
    task = await task_service.update_task(db, task_id, current_user.id, task_data)
    return TaskResponse.model_validate(task)


@router.patch("/tasks/{task_id}/move", response_model=TaskResponse)
async def move_task(
    task_id: UUID,
    move: TaskMove,
    current_user: CurrentUser,
    db: DbSession,
) -> TaskResponse:
    """Persist a drag-and-drop move (status and order)."""
    task = await task_service.move_task(db, task_id, current_user.id, move)
    return TaskResponse.model_validate(task)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: UUID, current_user: CurrentUser, db: DbSession) -> Response:
    await task_service.delete_task(db, task_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
