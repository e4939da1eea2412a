from fastapi import APIRouter

from taskboard.api.deps import CurrentUser, DbSession
from taskboard.schemas.profile import ProfileDetails, ProfileResponse, ProfileUpdate
from taskboard.services import profile_service

router = APIRouter()


@router.get("", response_model=ProfileDetails)
async def get_profile(current_user: CurrentUser, db: DbSession) -> ProfileDetails:
    """Profile with counts of owned projects and assigned tasks."""
    return await profile_service.get_profile_details(db, current_user)


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ProfileResponse:
    profile = await profile_service.update_profile(db, current_user, profile_data)
    return ProfileResponse.model_validate(profile)
