import logging
from typing import Annotated, Optional

import firebase_admin
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.config import get_settings
from taskboard.exceptions import UnauthorizedError
from taskboard.models.database import get_db
from taskboard.models.profile import Profile
from taskboard.services.ai_client import AIClient, get_ai_client

settings = get_settings()
logger = logging.getLogger(__name__)

# Initialize Firebase Admin SDK
_firebase_app = None


def get_firebase_app() -> firebase_admin.App:
    global _firebase_app
    if _firebase_app is None:
        try:
            _firebase_app = firebase_admin.get_app()
        except ValueError:
            # App not initialized yet
            if settings.firebase_project_id:
                cred = credentials.ApplicationDefault()
                _firebase_app = firebase_admin.initialize_app(
                    cred, {"projectId": settings.firebase_project_id}
                )
            else:
                _firebase_app = firebase_admin.initialize_app()
    return _firebase_app


# Use auto_error=False to allow dev token bypass
security = HTTPBearer(auto_error=False)

DEV_TOKEN = "dev-token"


async def get_or_create_profile(
    db: AsyncSession,
    firebase_uid: str,
    email: str,
    name: str | None = None,
    avatar: str | None = None,
) -> Profile:
    """Profile for a verified identity, created on first sign-in."""
    result = await db.execute(select(Profile).where(Profile.firebase_uid == firebase_uid))
    profile = result.scalar_one_or_none()
    if profile is not None:
        return profile

    email = email.strip().lower()
    profile = Profile(
        firebase_uid=firebase_uid,
        email=email,
        name=name or email.split("@")[0],
        avatar=avatar,
    )
    db.add(profile)
    await db.flush()

    logger.info(f"Created profile for {email}")
    return profile


async def authenticate(
    db: AsyncSession,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Profile:
    """Resolve the bearer token to a profile.

    In dev mode a missing token or ``dev-token`` maps to the dev profile.
    """
    token = credentials.credentials if credentials else None

    if settings.dev_mode and (token == DEV_TOKEN or token is None):
        return await get_or_create_profile(
            db, settings.dev_user_id, settings.dev_user_email, settings.dev_user_name
        )

    if not token:
        raise UnauthorizedError()

    try:
        get_firebase_app()
        decoded_token = firebase_auth.verify_id_token(token)
    except Exception as e:
        logger.warning(f"Rejected authentication token: {e}")
        raise UnauthorizedError()

    email = decoded_token.get("email", "")
    if not email:
        raise UnauthorizedError()

    return await get_or_create_profile(
        db,
        decoded_token["uid"],
        email,
        decoded_token.get("name"),
        decoded_token.get("picture"),
    )


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile:
    return await authenticate(db, credentials)


CurrentUser = Annotated[Profile, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
AIClientDep = Annotated[AIClient, Depends(get_ai_client)]
