"""Tests for member listing, role changes, removal and leaving."""

import uuid

import pytest

from conftest import make_db, make_member, make_result
from taskboard.exceptions import (
    AdminCannotRemoveAdminError,
    MemberNotFoundError,
    OwnerCannotBeRemovedError,
    OwnerOnlyError,
    OwnerRoleImmutableError,
)
from taskboard.models.enums import ProjectRole
from taskboard.services import member_service


class TestRoleChange:
    @pytest.mark.asyncio
    async def test_owner_promotes_member(self, project_id, owner):
        actor = make_member(project_id, owner.id, ProjectRole.OWNER)
        target = make_member(project_id, uuid.uuid4(), ProjectRole.MEMBER)
        db = make_db(make_result(actor), make_result(target), make_result(target))

        member = await member_service.update_member_role(
            db, project_id, owner.id, target.user_id, ProjectRole.ADMIN
        )

        assert member.role == "ADMIN"
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_owner_role_can_never_change(self, project_id, owner):
        actor = make_member(project_id, owner.id, ProjectRole.OWNER)
        db = make_db(make_result(actor), make_result(actor))

        with pytest.raises(OwnerRoleImmutableError):
            await member_service.update_member_role(
                db, project_id, owner.id, owner.id, ProjectRole.ADMIN
            )
        assert actor.role == "OWNER"

    @pytest.mark.asyncio
    async def test_admin_cannot_change_roles(self, project_id, alice):
        actor = make_member(project_id, alice.id, ProjectRole.ADMIN)
        target = make_member(project_id, uuid.uuid4(), ProjectRole.MEMBER)
        db = make_db(make_result(actor), make_result(target))

        with pytest.raises(OwnerOnlyError):
            await member_service.update_member_role(
                db, project_id, alice.id, target.user_id, ProjectRole.ADMIN
            )

    @pytest.mark.asyncio
    async def test_unknown_target(self, project_id, owner):
        db = make_db(make_result(make_member(project_id, owner.id, ProjectRole.OWNER)), make_result(None))

        with pytest.raises(MemberNotFoundError):
            await member_service.update_member_role(
                db, project_id, owner.id, uuid.uuid4(), ProjectRole.ADMIN
            )


class TestRemoval:
    @pytest.mark.asyncio
    async def test_admin_removes_member(self, project_id, alice):
        actor = make_member(project_id, alice.id, ProjectRole.ADMIN)
        target = make_member(project_id, uuid.uuid4(), ProjectRole.MEMBER)
        db = make_db(make_result(actor), make_result(target))

        await member_service.remove_member(db, project_id, alice.id, target.user_id)

        db.delete.assert_awaited_once_with(target)

    @pytest.mark.asyncio
    async def test_admin_cannot_remove_admin(self, project_id, alice):
        actor = make_member(project_id, alice.id, ProjectRole.ADMIN)
        target = make_member(project_id, uuid.uuid4(), ProjectRole.ADMIN)
        db = make_db(make_result(actor), make_result(target))

        with pytest.raises(AdminCannotRemoveAdminError):
            await member_service.remove_member(db, project_id, alice.id, target.user_id)
        db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_owner_cannot_leave(self, project_id, owner):
        db = make_db(make_result(make_member(project_id, owner.id, ProjectRole.OWNER)))

        with pytest.raises(OwnerCannotBeRemovedError):
            await member_service.leave_project(db, project_id, owner.id)

    @pytest.mark.asyncio
    async def test_member_leaves(self, project_id, alice):
        member = make_member(project_id, alice.id, ProjectRole.MEMBER)
        db = make_db(make_result(member))

        await member_service.leave_project(db, project_id, alice.id)

        db.delete.assert_awaited_once_with(member)
