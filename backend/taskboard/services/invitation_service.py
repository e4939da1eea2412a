"""Invitation lifecycle.

PENDING -> ACCEPTED | DECLINED, each transition happening at most once.
Expired PENDING invitations are never deleted; every reader treats them as
absent. Public links carry no email, skip the email check and stay PENDING
so they can be reused until they expire.
"""

import logging
import secrets
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.config import get_settings
from taskboard.exceptions import (
    AlreadyMemberError,
    CannotInviteSelfError,
    InvitationAlreadySentError,
    InvitationAlreadyUsedError,
    InvitationEmailMismatchError,
    InvitationExpiredError,
    InvitationNotFoundError,
    PublicInvitationNotDeclinableError,
)
from taskboard.models.enums import InvitationStatus, ProjectRole
from taskboard.models.invitation import Invitation
from taskboard.models.profile import Profile
from taskboard.models.project_member import ProjectMember
from taskboard.services.access import get_membership, require_membership

settings = get_settings()
logger = logging.getLogger(__name__)


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def _now() -> datetime:
    return datetime.now(UTC)


def _expiry(now: datetime) -> datetime:
    return now + timedelta(days=settings.invitation_ttl_days)


async def _load_invitation(db: AsyncSession, invitation_id: UUID) -> Invitation:
    result = await db.execute(
        select(Invitation)
        .where(Invitation.id == invitation_id)
        .options(selectinload(Invitation.sender))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def invite_by_email(
    db: AsyncSession, project_id: UUID, sender: Profile, email: str
) -> Invitation:
    """Personal invitation. OWNER or ADMIN only."""
    await require_membership(db, project_id, sender.id, min_role=ProjectRole.ADMIN)

    email = email.strip().lower()
    if email == sender.email.lower():
        raise CannotInviteSelfError()

    result = await db.execute(
        select(ProjectMember.id)
        .join(Profile, ProjectMember.user_id == Profile.id)
        .where(
            ProjectMember.project_id == project_id,
            func.lower(Profile.email) == email,
        )
    )
    if result.first() is not None:
        raise AlreadyMemberError()

    now = _now()
    result = await db.execute(
        select(Invitation.id).where(
            Invitation.project_id == project_id,
            Invitation.email == email,
            Invitation.status == InvitationStatus.PENDING.value,
            Invitation.expires_at > now,
        )
    )
    if result.first() is not None:
        raise InvitationAlreadySentError()

    invitation = Invitation(
        email=email,
        token=generate_token(),
        status=InvitationStatus.PENDING.value,
        is_public=False,
        expires_at=_expiry(now),
        sender_id=sender.id,
        project_id=project_id,
    )
    db.add(invitation)
    await db.flush()

    logger.info(f"User {sender.email} invited {email} to project {project_id}")
    return await _load_invitation(db, invitation.id)


async def get_or_create_public_link(db: AsyncSession, project_id: UUID, sender: Profile) -> Invitation:
    """Return the project's live public link, creating one if there is none."""
    await require_membership(db, project_id, sender.id, min_role=ProjectRole.ADMIN)

    now = _now()
    result = await db.execute(
        select(Invitation)
        .where(
            Invitation.project_id == project_id,
            Invitation.is_public.is_(True),
            Invitation.status == InvitationStatus.PENDING.value,
            Invitation.expires_at > now,
        )
        .options(selectinload(Invitation.sender))
        .order_by(Invitation.expires_at.desc())
        .limit(1)
    )
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing

    invitation = Invitation(
        email=None,
        token=generate_token(),
        status=InvitationStatus.PENDING.value,
        is_public=True,
        expires_at=_expiry(now),
        sender_id=sender.id,
        project_id=project_id,
    )
    db.add(invitation)
    await db.flush()

    logger.info(f"User {sender.email} created a public invite link for project {project_id}")
    return await _load_invitation(db, invitation.id)


async def list_project_invitations(db: AsyncSession, project_id: UUID, user_id: UUID) -> list[Invitation]:
    """Live (PENDING, unexpired) invitations, newest first. Any member."""
    await require_membership(db, project_id, user_id)
    result = await db.execute(
        select(Invitation)
        .where(
            Invitation.project_id == project_id,
            Invitation.status == InvitationStatus.PENDING.value,
            Invitation.expires_at > _now(),
        )
        .options(selectinload(Invitation.sender))
        .order_by(Invitation.created_at.desc())
    )
    return list(result.scalars().all())


async def cancel_invitation(db: AsyncSession, invitation_id: UUID, user_id: UUID) -> None:
    result = await db.execute(select(Invitation).where(Invitation.id == invitation_id))
    invitation = result.scalar_one_or_none()
    if invitation is None:
        raise InvitationNotFoundError()

    await require_membership(db, invitation.project_id, user_id, min_role=ProjectRole.ADMIN)
    await db.delete(invitation)
    logger.info(f"User {user_id} cancelled invitation {invitation_id}")


async def get_invitation_by_token(db: AsyncSession, token: str) -> Invitation | None:
    """Live invitation for a token, or None if missing, used or expired."""
    result = await db.execute(
        select(Invitation)
        .where(Invitation.token == token)
        .options(selectinload(Invitation.project), selectinload(Invitation.sender))
    )
    invitation = result.scalar_one_or_none()
    if invitation is None:
        return None
    if invitation.status != InvitationStatus.PENDING or invitation.is_expired(_now()):
        return None
    return invitation


def check_acceptable(invitation: Invitation, profile: Profile, now: datetime) -> None:
    """Preconditions for accepting ``invitation`` as ``profile``."""
    if invitation.status != InvitationStatus.PENDING:
        raise InvitationAlreadyUsedError()
    if invitation.is_expired(now):
        raise InvitationExpiredError()
    if not invitation.is_public:
        if (invitation.email or "").lower() != profile.email.lower():
            raise InvitationEmailMismatchError()


async def accept_invitation(db: AsyncSession, token: str, profile: Profile) -> ProjectMember:
    """Join the invitation's project as MEMBER.

    The invitation row is locked for the rest of the transaction; the new
    membership and the status change are committed together by the request
    session.
    """
    result = await db.execute(
        select(Invitation).where(Invitation.token == token).with_for_update()
    )
    invitation = result.scalar_one_or_none()
    if invitation is None:
        raise InvitationNotFoundError()

    check_acceptable(invitation, profile, _now())

    existing = await get_membership(db, invitation.project_id, profile.id)
    if existing is not None:
        if not invitation.is_public:
            invitation.status = InvitationStatus.ACCEPTED.value
            # Keep the status change even though the request reports a conflict
            await db.commit()
        raise AlreadyMemberError()

    member = ProjectMember(
        project_id=invitation.project_id,
        user_id=profile.id,
        role=ProjectRole.MEMBER.value,
    )
    db.add(member)
    if not invitation.is_public:
        invitation.status = InvitationStatus.ACCEPTED.value
    await db.flush()

    logger.info(f"User {profile.email} accepted invitation to project {invitation.project_id}")
    result = await db.execute(
        select(ProjectMember)
        .where(ProjectMember.id == member.id)
        .options(selectinload(ProjectMember.user))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def decline_invitation(db: AsyncSession, token: str, profile: Profile) -> Invitation:
    """Decline a personal invitation addressed to ``profile``."""
    result = await db.execute(
        select(Invitation).where(Invitation.token == token).with_for_update()
    )
    invitation = result.scalar_one_or_none()
    if invitation is None:
        raise InvitationNotFoundError()
    if invitation.status != InvitationStatus.PENDING:
        raise InvitationAlreadyUsedError()
    if invitation.is_public:
        raise PublicInvitationNotDeclinableError()
    if invitation.is_expired(_now()):
        raise InvitationExpiredError()
    if (invitation.email or "").lower() != profile.email.lower():
        raise InvitationEmailMismatchError()

    invitation.status = InvitationStatus.DECLINED.value
    await db.flush()

    logger.info(f"Invitation {invitation.id} to project {invitation.project_id} declined")
    return invitation
