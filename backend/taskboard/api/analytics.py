from uuid import UUID

from fastapi import APIRouter

from taskboard.api.deps import CurrentUser, DbSession
from taskboard.config import get_settings
from taskboard.schemas.analytics import ProjectAnalytics
from taskboard.services import analytics_service

settings = get_settings()

router = APIRouter()


@router.get("/projects/{project_id}/analytics", response_model=ProjectAnalytics)
async def get_project_analytics(project_id: UUID, current_user: CurrentUser, db: DbSession) -> ProjectAnalytics:
    return await analytics_service.get_project_analytics(db, project_id, current_user.id, settings.locale)
