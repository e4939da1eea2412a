from fastapi import APIRouter

from taskboard.api.deps import CurrentUser
from taskboard.schemas.profile import ProfileResponse

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_current_user_info(current_user: CurrentUser) -> ProfileResponse:
    """Get current authenticated user info."""
    return ProfileResponse.model_validate(current_user)
