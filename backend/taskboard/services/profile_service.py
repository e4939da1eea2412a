"""Profile reads and updates."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.models.profile import Profile
from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard.schemas.profile import ProfileDetails, ProfileUpdate

logger = logging.getLogger(__name__)


async def get_profile_details(db: AsyncSession, profile: Profile) -> ProfileDetails:
    result = await db.execute(select(func.count(Project.id)).where(Project.owner_id == profile.id))
    owned = result.scalar_one()
    result = await db.execute(select(func.count(Task.id)).where(Task.assignee_id == profile.id))
    assigned = result.scalar_one()

    return ProfileDetails(
        id=profile.id,
        email=profile.email,
        name=profile.name,
        avatar=profile.avatar,
        created_at=profile.created_at,
        owned_projects_count=owned,
        assigned_tasks_count=assigned,
    )


async def update_profile(db: AsyncSession, profile: Profile, data: ProfileUpdate) -> Profile:
    profile.name = data.name
    profile.avatar = data.avatar
    await db.flush()
    await db.refresh(profile)

    logger.info(f"User {profile.email} updated their profile")
    return profile
