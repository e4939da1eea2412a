"""Tests for task CRUD and per-column ordering."""

import uuid

import pytest

from conftest import make_db, make_member, make_result, make_task
from taskboard.exceptions import AssigneeNotMemberError, TaskNotFoundError
from taskboard.models.enums import TaskStatus
from taskboard.schemas.task import TaskCreate, TaskMove, TaskUpdate
from taskboard.services import task_service


class TestNextOrder:
    @pytest.mark.asyncio
    async def test_empty_column_starts_at_one(self, project_id):
        db = make_db(make_result(None))
        assert await task_service.next_order(db, project_id, TaskStatus.TODO) == 1

    @pytest.mark.asyncio
    async def test_appends_after_max(self, project_id):
        db = make_db(make_result(4))
        assert await task_service.next_order(db, project_id, "REVIEW") == 5


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_new_task_goes_to_end_of_column(self, project_id, alice):
        created = make_task(project_id, TaskStatus.IN_PROGRESS, order=3)
        db = make_db(
            make_result(make_member(project_id, alice.id)),  # caller membership
            make_result(2),  # max order in IN_PROGRESS
            make_result(created),  # reload
        )
        data = TaskCreate(title="Ship it", status=TaskStatus.IN_PROGRESS)

        task = await task_service.create_task(db, project_id, alice.id, data)

        added = db.add.call_args.args[0]
        assert added.order == 3
        assert added.status == "IN_PROGRESS"
        assert added.priority == "MEDIUM"
        assert added.creator_id == alice.id
        assert task is created

    @pytest.mark.asyncio
    async def test_first_task_in_empty_project(self, project_id, alice):
        db = make_db(
            make_result(make_member(project_id, alice.id)),
            make_result(None),
            make_result(make_task(project_id)),
        )

        await task_service.create_task(db, project_id, alice.id, TaskCreate(title="First"))

        assert db.add.call_args.args[0].order == 1

    @pytest.mark.asyncio
    async def test_assignee_must_be_member(self, project_id, alice):
        db = make_db(
            make_result(make_member(project_id, alice.id)),
            make_result(None),  # assignee membership lookup
        )
        data = TaskCreate(title="Review PR", assignee_id=uuid.uuid4())

        with pytest.raises(AssigneeNotMemberError):
            await task_service.create_task(db, project_id, alice.id, data)
        db.add.assert_not_called()


class TestTaskAccess:
    @pytest.mark.asyncio
    async def test_task_in_foreign_project_reads_as_missing(self, alice):
        task = make_task()
        db = make_db(make_result(task), make_result(None))

        with pytest.raises(TaskNotFoundError) as exc_info:
            await task_service.get_task_for_member(db, task.id, alice.id)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_task(self, alice):
        db = make_db(make_result(None))

        with pytest.raises(TaskNotFoundError):
            await task_service.get_task_for_member(db, uuid.uuid4(), alice.id)


class TestUpdateAndMove:
    @pytest.mark.asyncio
    async def test_status_change_through_update_keeps_order(self, project_id, alice):
        task = make_task(project_id, TaskStatus.TODO, order=7)
        db = make_db(
            make_result(task),
            make_result(make_member(project_id, alice.id)),
            make_result(task),
        )

        updated = await task_service.update_task(
            db, task.id, alice.id, TaskUpdate(status=TaskStatus.DONE)
        )

        assert updated.status == "DONE"
        assert updated.order == 7

    @pytest.mark.asyncio
    async def test_update_clears_deadline_but_not_title(self, project_id, alice):
        task = make_task(project_id, title="Keep me")
        db = make_db(
            make_result(task),
            make_result(make_member(project_id, alice.id)),
            make_result(task),
        )

        await task_service.update_task(
            db, task.id, alice.id, TaskUpdate.model_validate({"title": None, "deadline": None})
        )

        assert task.title == "Keep me"
        assert task.deadline is None

    @pytest.mark.asyncio
    async def test_move_sets_status_and_order_verbatim(self, project_id, alice):
        task = make_task(project_id, TaskStatus.TODO, order=1)
        sibling = make_task(project_id, TaskStatus.REVIEW, order=0)
        db = make_db(
            make_result(task),
            make_result(make_member(project_id, alice.id)),
            make_result(task),
        )

        await task_service.move_task(
            db, task.id, alice.id, TaskMove(status=TaskStatus.REVIEW, order=0)
        )

        assert (task.status, task.order) == ("REVIEW", 0)
        # Siblings are never re-sequenced, duplicates are allowed
        assert sibling.order == 0

    def test_move_rejects_negative_order(self):
        with pytest.raises(ValueError):
            TaskMove(status=TaskStatus.DONE, order=-1)

    @pytest.mark.asyncio
    async def test_delete_task(self, project_id, alice):
        task = make_task(project_id)
        db = make_db(make_result(task), make_result(make_member(project_id, alice.id)))

        await task_service.delete_task(db, task.id, alice.id)

        db.delete.assert_awaited_once_with(task)
