"""Kanban board columns and optimistic drag-and-drop state.

``group_by_status`` builds the four columns the board endpoint returns.
``BoardState`` is the client-side half of a move: it applies the move to the
in-memory columns immediately, computes the order value to send to the
server, and restores the previous columns if the server rejects the move.
There is no cross-client reconciliation; the last write wins.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from taskboard.models.enums import STATUS_ORDER, TaskStatus


class BoardItem(Protocol):
    id: Any
    status: Any
    order: int


def group_by_status(tasks: Iterable[BoardItem]) -> dict[TaskStatus, list[BoardItem]]:
    """Split tasks into status columns, each sorted by ``order``.

    Equal orders keep their incoming relative position.
    """
    columns: dict[TaskStatus, list[BoardItem]] = {status: [] for status in STATUS_ORDER}
    for task in tasks:
        columns[TaskStatus(task.status)].append(task)
    for items in columns.values():
        items.sort(key=lambda t: t.order)
    return columns


@dataclass
class BoardSnapshot:
    """Everything needed to undo one optimistic move."""

    columns: dict[TaskStatus, list[BoardItem]]
    item: BoardItem
    status: Any
    order: int


@dataclass
class PendingMove:
    task_id: Any
    status: TaskStatus
    order: int
    snapshot: BoardSnapshot


class BoardState:
    def __init__(self, columns: dict[TaskStatus, list[BoardItem]]):
        self.columns = {status: list(columns.get(status, [])) for status in STATUS_ORDER}

    @classmethod
    def from_tasks(cls, tasks: Iterable[BoardItem]) -> "BoardState":
        return cls(group_by_status(tasks))

    def find(self, task_id: Any) -> tuple[TaskStatus, int] | None:
        for status, items in self.columns.items():
            for index, item in enumerate(items):
                if item.id == task_id:
                    return status, index
        return None

    def move(self, task_id: Any, to_status: TaskStatus, to_index: int | None = None) -> PendingMove:
        """Apply a move locally and return the request to send.

        With ``to_index`` the task is inserted at that position of the
        destination column and its order becomes the index. Without it the
        task is appended with order ``max + 1`` (0 for an empty column).
        Siblings are not renumbered.
        """
        location = self.find(task_id)
        if location is None:
            raise KeyError(task_id)

        from_status, from_index = location
        item = self.columns[from_status][from_index]
        snapshot = BoardSnapshot(
            columns={status: list(items) for status, items in self.columns.items()},
            item=item,
            status=item.status,
            order=item.order,
        )

        del self.columns[from_status][from_index]
        destination = self.columns[to_status]

        if to_index is None:
            order = max((t.order for t in destination), default=-1) + 1
            destination.append(item)
        else:
            to_index = max(0, min(to_index, len(destination)))
            order = to_index
            destination.insert(to_index, item)

        item.status = to_status.value
        item.order = order
        return PendingMove(task_id=task_id, status=to_status, order=order, snapshot=snapshot)

    def rollback(self, snapshot: BoardSnapshot) -> None:
        """Restore the columns and the moved task as they were before the move."""
        self.columns = snapshot.columns
        snapshot.item.status = snapshot.status
        snapshot.item.order = snapshot.order
