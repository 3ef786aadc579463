"""Core task management for the task board."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from loguru import logger

from .aggregates import AggregationEngine
from .drag import DragEngine, DragPhase
from .members import MemberRoster
from .models import BoardConfig, Priority, Task
from .state import BoardState
from .store import TaskStore


class TaskBoard:
    """
    Thread-safe task board with drag-and-drop placement.

    Wires the task store, member roster, board state, drag engine and
    aggregation engine together. Every operation runs under one re-entrant
    lock, so events are handled one at a time and subscribers may read the
    board from inside their callback.
    """

    def __init__(
        self,
        config: BoardConfig | None = None,
        today: Callable[[], date] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Initialize the task board.

        Args:
            config: Columns, default column and initial members
            today: Returns the current calendar day (``date.today`` if None)
            clock: Returns epoch seconds used for task ids (``time.time`` if None)
        """
        self.config = config or BoardConfig()
        self._today = today or date.today
        self._lock = threading.RLock()
        self._store = TaskStore(today=self._today, clock=clock)
        self._members = MemberRoster(self.config.members)
        self._board = BoardState(self.config.column_ids)
        self._drag = DragEngine(self._board, is_live=self._store.__contains__)
        self._aggregates = AggregationEngine(
            self._store, self._board, self.config.resolved_default_column
        )
        self._subscribers: list[Callable[[], None]] = []
        self._subscriber_lock = threading.Lock()

    # ---- tasks ----

    def create_task(self, **fields: Any) -> str:
        """
        Create a task and append it to the default column.

        Args:
            title: Non-empty title
            description: Non-empty description
            due_date: ``date`` or ISO string, strictly after today
            priority: ``Priority`` or its name (defaults to Low)
            assignee: Registered member name (optional)

        Returns:
            The new task id

        Raises:
            ValidationError: If any field is invalid; nothing is created
        """
        with self._lock:
            task = self._store.create_task(fields, members=self._members.__contains__)
            self._board.append(self.config.resolved_default_column, task.id)
            self._notify_subscribers()
            return task.id

    def get_task(self, task_id: str) -> Task | None:
        """Get a specific task by ID."""
        with self._lock:
            return self._store.get_task(task_id)

    def get_all_tasks(self) -> list[Task]:
        """Get all tasks in creation order."""
        with self._lock:
            return list(self._store)

    # ---- members ----

    def add_member(self, name: str) -> str | None:
        with self._lock:
            added = self._members.add(name)
            if added is not None:
                self._notify_subscribers()
            return added

    def remove_member(self, name: str) -> None:
        with self._lock:
            self._members.remove(name)
            self._notify_subscribers()

    def members(self) -> list[str]:
        with self._lock:
            return list(self._members)

    # ---- drag lifecycle ----

    def handle_drag_start(self, task_id: str) -> None:
        with self._lock:
            self._drag.start(task_id)

    def handle_drag_over(self, task_id: str, over_id: str | None) -> None:
        with self._lock:
            if self._drag.over(task_id, over_id):
                self._notify_subscribers()

    def handle_drag_end(self, task_id: str, over_id: str | None) -> None:
        with self._lock:
            if self._drag.end(task_id, over_id):
                self._notify_subscribers()

    def handle_drag_cancel(self) -> None:
        with self._lock:
            self._drag.cancel()

    @property
    def drag_phase(self) -> DragPhase:
        return self._drag.phase

    def active_task(self) -> Task | None:
        """The task currently being dragged, if any."""
        with self._lock:
            subject = self._drag.subject
            return self._store.get_task(subject) if subject else None

    # ---- queries ----

    def locate_container(self, ref: str | None) -> str | None:
        with self._lock:
            return self._drag.locate(ref)

    def columns_snapshot(self) -> dict[str, tuple[str, ...]]:
        with self._lock:
            return self._board.columns_snapshot()

    def audit(self) -> list[str]:
        """Invariant violations between the store and the board (normally [])."""
        with self._lock:
            return self._board.audit(self._store.ids())

    def priority_histogram(self) -> dict[Priority, int]:
        with self._lock:
            return self._aggregates.priority_histogram()

    def overdue_tasks(self, as_of: date | datetime | None = None) -> list[Task]:
        with self._lock:
            return self._aggregates.overdue_tasks(as_of or self._today())

    def days_remaining(self, task: Task, as_of: date | datetime | None = None) -> int:
        return self._aggregates.days_remaining(task, as_of or self._today())

    def deadline_series(
        self, as_of: date | datetime | None = None, column: str | None = None
    ) -> list[tuple[str, int]]:
        with self._lock:
            return self._aggregates.deadline_series(as_of or self._today(), column)

    def get_summary(self, as_of: date | datetime | None = None) -> dict[str, Any]:
        """Get summary statistics of the board."""
        with self._lock:
            day = as_of or self._today()
            active = self._drag.subject
            return {
                "total": len(self._store),
                "columns": {
                    cid: list(task_ids)
                    for cid, task_ids in self._board.columns_snapshot().items()
                },
                "labels": {
                    column.id: column.label for column in self.config.columns
                },
                "by_column": self._aggregates.column_counts(),
                "by_priority": {
                    priority.value: count
                    for priority, count in self._aggregates.priority_histogram().items()
                },
                "overdue": [task.id for task in self._aggregates.overdue_tasks(day)],
                "deadlines": [
                    {"title": title, "days_remaining": days}
                    for title, days in self._aggregates.deadline_series(day)
                ],
                "dragging": active,
                "members": list(self._members),
                "tasks": [task.to_dict() for task in self._store],
            }

    # ---- subscriptions ----

    def subscribe(self, callback: Callable[[], None]) -> None:
        """
        Subscribe to board updates.

        Args:
            callback: Function to call after each change to tasks, placement
                or members
        """
        with self._subscriber_lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        """
        Unsubscribe from board updates.

        Args:
            callback: Function to remove from subscribers
        """
        with self._subscriber_lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def _notify_subscribers(self) -> None:
        """Notify all subscribers of board updates."""
        with self._subscriber_lock:
            subscribers = self._subscribers.copy()

        for callback in subscribers:
            try:
                callback()
            except Exception:
                logger.exception("Task board subscriber failed")


_default_board: TaskBoard | None = None
_default_lock = threading.Lock()


def get_task_board() -> TaskBoard:
    """Get the global task board instance."""
    global _default_board
    if _default_board is None:
        with _default_lock:
            if _default_board is None:
                _default_board = TaskBoard()
    return _default_board
