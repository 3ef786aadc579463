"""Read-only summaries derived from the task store and board state."""

from __future__ import annotations

from datetime import date, datetime

from .models import Priority, Task
from .state import BoardState
from .store import TaskStore


def _as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_remaining(task: Task, as_of: date | datetime) -> int:
    """Signed number of calendar days from ``as_of`` until the task is due."""
    return (task.due_date - _as_day(as_of)).days


class AggregationEngine:
    """Pure projections over a store and a board; never mutates either."""

    def __init__(self, store: TaskStore, board: BoardState, default_column: str):
        self.store = store
        self.board = board
        self.default_column = default_column

    def priority_histogram(self) -> dict[Priority, int]:
        """Count tasks per priority across every column."""
        counts = {priority: 0 for priority in Priority}
        for task in self.store:
            counts[task.priority] += 1
        return counts

    def overdue_tasks(self, as_of: date | datetime) -> list[Task]:
        """Tasks due strictly before the calendar day of ``as_of``."""
        day = _as_day(as_of)
        return [task for task in self.store if task.due_date < day]

    def days_remaining(self, task: Task, as_of: date | datetime) -> int:
        return days_remaining(task, as_of)

    def deadline_series(
        self, as_of: date | datetime, column: str | None = None
    ) -> list[tuple[str, int]]:
        """
        Title and days remaining for each task of one column.

        Args:
            as_of: Reference day
            column: Column to chart (the default column if None)

        Returns:
            ``(title, days)`` pairs in column order; ids missing from the
            store are skipped
        """
        column_id = column or self.default_column
        series: list[tuple[str, int]] = []
        for task_id in self.board.column(column_id):
            task = self.store.get_task(task_id)
            if task is not None:
                series.append((task.title, days_remaining(task, as_of)))
        return series

    def column_counts(self) -> dict[str, int]:
        return {
            column_id: len(task_ids)
            for column_id, task_ids in self.board.columns_snapshot().items()
        }
