"""Tests for the invitation lifecycle."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_db, make_invitation, make_member, make_profile, make_result
from taskboard.exceptions import (
    AlreadyMemberError,
    CannotInviteSelfError,
    InvitationAlreadySentError,
    InvitationAlreadyUsedError,
    InvitationEmailMismatchError,
    InvitationExpiredError,
    InvitationNotFoundError,
    PermissionDeniedError,
    PublicInvitationNotDeclinableError,
)
from taskboard.models.enums import InvitationStatus, ProjectRole
from taskboard.services import invitation_service

YESTERDAY = datetime.now(timezone.utc) - timedelta(days=1)


@pytest.fixture
def bob():
    return make_profile("bob@example.com", "Bob")


class TestInviteByEmail:
    @pytest.mark.asyncio
    async def test_creates_pending_invitation(self, project_id, owner):
        db = make_db(
            make_result(make_member(project_id, owner.id, ProjectRole.OWNER)),
            make_result(None),  # no member with that email
            make_result(None),  # no live invitation for it
            make_result("reloaded"),
        )

        result = await invitation_service.invite_by_email(db, project_id, owner, " Bob@Example.COM ")

        invitation = db.add.call_args.args[0]
        assert invitation.email == "bob@example.com"
        assert invitation.status == "PENDING"
        assert invitation.is_public is False
        assert len(invitation.token) >= 32
        assert invitation.expires_at - datetime.now(timezone.utc) > timedelta(days=6)
        assert result == "reloaded"

    @pytest.mark.asyncio
    async def test_member_cannot_invite(self, project_id, alice):
        db = make_db(make_result(make_member(project_id, alice.id, ProjectRole.MEMBER)))

        with pytest.raises(PermissionDeniedError):
            await invitation_service.invite_by_email(db, project_id, alice, "bob@example.com")

    @pytest.mark.asyncio
    async def test_cannot_invite_self(self, project_id, owner):
        db = make_db(make_result(make_member(project_id, owner.id, ProjectRole.OWNER)))

        with pytest.raises(CannotInviteSelfError):
            await invitation_service.invite_by_email(db, project_id, owner, owner.email.upper())

    @pytest.mark.asyncio
    async def test_existing_member_rejected(self, project_id, owner):
        db = make_db(
            make_result(make_member(project_id, owner.id, ProjectRole.OWNER)),
            make_result(("member-id",)),
        )

        with pytest.raises(AlreadyMemberError):
            await invitation_service.invite_by_email(db, project_id, owner, "bob@example.com")

    @pytest.mark.asyncio
    async def test_live_invitation_rejected(self, project_id, owner):
        db = make_db(
            make_result(make_member(project_id, owner.id, ProjectRole.OWNER)),
            make_result(None),
            make_result(("invitation-id",)),
        )

        with pytest.raises(InvitationAlreadySentError):
            await invitation_service.invite_by_email(db, project_id, owner, "bob@example.com")


class TestPublicLink:
    @pytest.mark.asyncio
    async def test_reuses_live_link(self, project_id, owner):
        existing = make_invitation(project_id, email=None, is_public=True)
        db = make_db(
            make_result(make_member(project_id, owner.id, ProjectRole.ADMIN)),
            make_result(existing),
        )

        assert await invitation_service.get_or_create_public_link(db, project_id, owner) is existing
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_link_without_email(self, project_id, owner):
        db = make_db(
            make_result(make_member(project_id, owner.id, ProjectRole.OWNER)),
            make_result(None),
            make_result("reloaded"),
        )

        await invitation_service.get_or_create_public_link(db, project_id, owner)

        invitation = db.add.call_args.args[0]
        assert invitation.is_public is True
        assert invitation.email is None


class TestAccept:
    def test_email_mismatch_rejected(self, bob):
        invitation = make_invitation(email="carol@example.com")

        with pytest.raises(InvitationEmailMismatchError):
            invitation_service.check_acceptable(invitation, bob, datetime.now(timezone.utc))

    def test_email_match_is_case_insensitive(self, bob):
        invitation = make_invitation(email="BOB@example.com")
        invitation_service.check_acceptable(invitation, bob, datetime.now(timezone.utc))

    def test_expired_rejected(self, bob):
        invitation = make_invitation(email=bob.email, expires_at=YESTERDAY)

        with pytest.raises(InvitationExpiredError):
            invitation_service.check_acceptable(invitation, bob, datetime.now(timezone.utc))

    def test_used_rejected(self, bob):
        invitation = make_invitation(email=bob.email, status=InvitationStatus.DECLINED)

        with pytest.raises(InvitationAlreadyUsedError):
            invitation_service.check_acceptable(invitation, bob, datetime.now(timezone.utc))

    def test_public_link_skips_email_check(self, bob):
        invitation = make_invitation(email=None, is_public=True)
        invitation_service.check_acceptable(invitation, bob, datetime.now(timezone.utc))

    @pytest.mark.asyncio
    async def test_accept_creates_member_and_marks_accepted(self, bob):
        invitation = make_invitation(email=bob.email)
        db = make_db(make_result(invitation), make_result(None), make_result("member"))

        result = await invitation_service.accept_invitation(db, invitation.token, bob)

        member = db.add.call_args.args[0]
        assert member.user_id == bob.id
        assert member.project_id == invitation.project_id
        assert member.role == "MEMBER"
        assert invitation.status == "ACCEPTED"
        db.flush.assert_awaited_once()
        assert result == "member"

    @pytest.mark.asyncio
    async def test_mismatch_leaves_state_untouched(self, bob):
        invitation = make_invitation(email="carol@example.com")
        db = make_db(make_result(invitation))

        with pytest.raises(InvitationEmailMismatchError):
            await invitation_service.accept_invitation(db, invitation.token, bob)

        db.add.assert_not_called()
        assert invitation.status == "PENDING"

    @pytest.mark.asyncio
    async def test_public_link_stays_pending(self, bob):
        invitation = make_invitation(email=None, is_public=True)
        db = make_db(make_result(invitation), make_result(None), make_result("member"))

        await invitation_service.accept_invitation(db, invitation.token, bob)

        assert invitation.status == "PENDING"
        db.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_already_member_marks_personal_invitation_used(self, bob):
        invitation = make_invitation(email=bob.email)
        existing = make_member(invitation.project_id, bob.id)
        db = make_db(make_result(invitation), make_result(existing))

        with pytest.raises(AlreadyMemberError):
            await invitation_service.accept_invitation(db, invitation.token, bob)

        assert invitation.status == "ACCEPTED"
        db.commit.assert_awaited_once()
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_token(self, bob):
        db = make_db(make_result(None))

        with pytest.raises(InvitationNotFoundError):
            await invitation_service.accept_invitation(db, "nope", bob)


class TestDeclineAndLookup:
    @pytest.mark.asyncio
    async def test_decline(self, bob):
        invitation = make_invitation(email="Bob@Example.com")
        db = make_db(make_result(invitation))

        await invitation_service.decline_invitation(db, invitation.token, bob)

        assert invitation.status == "DECLINED"

    @pytest.mark.asyncio
    async def test_expired_invitation_cannot_be_declined(self, bob):
        invitation = make_invitation(expires_at=YESTERDAY)
        db = make_db(make_result(invitation))

        with pytest.raises(InvitationExpiredError):
            await invitation_service.decline_invitation(db, invitation.token, bob)
        assert invitation.status == "PENDING"

    @pytest.mark.asyncio
    async def test_only_recipient_can_decline(self, alice):
        invitation = make_invitation(email="bob@example.com")
        db = make_db(make_result(invitation))

        with pytest.raises(InvitationEmailMismatchError):
            await invitation_service.decline_invitation(db, invitation.token, alice)
        assert invitation.status == "PENDING"

    @pytest.mark.asyncio
    async def test_decline_twice_rejected(self, bob):
        invitation = make_invitation(status=InvitationStatus.DECLINED)
        db = make_db(make_result(invitation))

        with pytest.raises(InvitationAlreadyUsedError):
            await invitation_service.decline_invitation(db, invitation.token, bob)

    @pytest.mark.asyncio
    async def test_public_link_cannot_be_declined(self, bob):
        invitation = make_invitation(email=None, is_public=True)
        db = make_db(make_result(invitation))

        with pytest.raises(PublicInvitationNotDeclinableError):
            await invitation_service.decline_invitation(db, invitation.token, bob)
        assert invitation.status == "PENDING"

    @pytest.mark.asyncio
    async def test_expired_invitation_reads_as_absent(self):
        db = make_db(make_result(make_invitation(expires_at=YESTERDAY)))
        assert await invitation_service.get_invitation_by_token(db, "token") is None

    @pytest.mark.asyncio
    async def test_accepted_invitation_reads_as_absent(self):
        db = make_db(make_result(make_invitation(status=InvitationStatus.ACCEPTED)))
        assert await invitation_service.get_invitation_by_token(db, "token") is None

    @pytest.mark.asyncio
    async def test_live_invitation_found(self):
        invitation = make_invitation()
        db = make_db(make_result(invitation))
        assert await invitation_service.get_invitation_by_token(db, invitation.token) is invitation

    @pytest.mark.asyncio
    async def test_cancel_requires_admin(self, alice):
        invitation = make_invitation()
        db = make_db(
            make_result(invitation),
            make_result(make_member(invitation.project_id, alice.id, ProjectRole.MEMBER)),
        )

        with pytest.raises(PermissionDeniedError):
            await invitation_service.cancel_invitation(db, invitation.id, alice.id)
        db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancel_unknown(self, alice):
        db = make_db(make_result(None))

        with pytest.raises(InvitationNotFoundError):
            await invitation_service.cancel_invitation(db, uuid.uuid4(), alice.id)
