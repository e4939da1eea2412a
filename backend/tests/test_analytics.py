"""Tests for project analytics."""

from datetime import date, datetime, timezone

import pytest

from conftest import make_db, make_member, make_result, make_task
from taskboard.exceptions import ProjectAccessError
from taskboard.models.enums import TaskStatus
from taskboard.services.analytics_service import (
    completion_rate,
    compute_analytics,
    get_project_analytics,
    is_overdue,
)

TODAY = date(2025, 3, 10)


def at(day: int, hour: int = 12) -> datetime:
    return datetime(2025, 3, day, hour, tzinfo=timezone.utc)


class TestCompletionRate:
    def test_empty_project(self):
        assert completion_rate(0, 0) == 0

    def test_rounds_half_up(self):
        assert completion_rate(2, 6) == 33
        assert completion_rate(1, 8) == 13  # 12.5
        assert completion_rate(2, 3) == 67
        assert completion_rate(3, 3) == 100


class TestOverdue:
    def test_deadline_before_today(self):
        assert is_overdue(make_task(deadline=at(9, 23)), TODAY)

    def test_deadline_today_is_not_overdue(self):
        assert not is_overdue(make_task(deadline=at(10, 0)), TODAY)

    def test_done_is_never_overdue(self):
        assert not is_overdue(make_task(status=TaskStatus.DONE, deadline=at(1)), TODAY)

    def test_no_deadline(self):
        assert not is_overdue(make_task(deadline=None), TODAY)


class TestComputeAnalytics:
    @pytest.fixture
    def tasks(self):
        return [
            make_task(status=TaskStatus.TODO, title="late", deadline=at(5)),
            make_task(status=TaskStatus.TODO, title="later", deadline=at(8)),
            make_task(status=TaskStatus.IN_PROGRESS, deadline=at(10)),
            make_task(status=TaskStatus.REVIEW),
            make_task(status=TaskStatus.DONE, deadline=at(1)),
            make_task(status=TaskStatus.DONE),
        ]

    def test_totals(self, tasks):
        result = compute_analytics(tasks, TODAY)

        assert result.total_tasks == 6
        assert result.completed_tasks == 2
        assert result.completion_rate == 33
        assert result.overdue_tasks == 2

    def test_status_counts_in_column_order(self, tasks):
        result = compute_analytics(tasks, TODAY)

        assert [(c.status, c.count) for c in result.status_counts] == [
            (TaskStatus.TODO, 2),
            (TaskStatus.IN_PROGRESS, 1),
            (TaskStatus.REVIEW, 1),
            (TaskStatus.DONE, 2),
        ]
        assert result.status_counts[0].label == "To do"

    def test_overdue_sorted_by_deadline(self, tasks):
        result = compute_analytics(reversed(tasks), TODAY)
        assert [t.title for t in result.overdue_tasks_list] == ["late", "later"]

    def test_localized_labels(self, tasks):
        result = compute_analytics(tasks, TODAY, locale="ru")
        assert result.status_counts[-1].label == "Готово"

    def test_empty(self):
        result = compute_analytics([], TODAY)
        assert result.completion_rate == 0
        assert all(c.count == 0 for c in result.status_counts)


class TestGetProjectAnalytics:
    @pytest.mark.asyncio
    async def test_requires_membership(self, project_id, alice):
        db = make_db(make_result(None))

        with pytest.raises(ProjectAccessError):
            await get_project_analytics(db, project_id, alice.id)

    @pytest.mark.asyncio
    async def test_member_gets_stats(self, project_id, alice):
        tasks = [make_task(project_id, TaskStatus.DONE), make_task(project_id)]
        db = make_db(make_result(make_member(project_id, alice.id)), make_result(items=tasks))

        result = await get_project_analytics(db, project_id, alice.id)

        assert result.total_tasks == 2
        assert result.completion_rate == 50
