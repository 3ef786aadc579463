"""Task storage: validation, id allocation and lookup."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from datetime import date, datetime
from typing import Any

from loguru import logger

from .models import Priority, Task


class ValidationError(ValueError):
    """Raised when a task or member request carries invalid fields."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


def _parse_due_date(value: date | str | None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError("due_date", "Due date is required.")
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValidationError(
            "due_date", f"Due date '{value}' is not an ISO date (YYYY-MM-DD)."
        ) from exc


def _require_text(fields: dict[str, Any], name: str) -> str:
    value = fields.get(name)
    if value is None or not str(value).strip():
        raise ValidationError(name, f"Task {name} must not be empty.")
    return str(value)


class TaskStore:
    """
    In-memory store owning every task and its identity.

    Ids have the form ``task-<epoch ms>`` and are strictly increasing within
    a store, even when several tasks are created in the same millisecond.
    """

    def __init__(
        self,
        today: Callable[[], date] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._tasks: dict[str, Task] = {}
        self._today = today or date.today
        self._clock = clock or time.time
        self._last_stamp = 0

    def _allocate_id(self) -> str:
        stamp = int(self._clock() * 1000)
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        self._last_stamp = stamp
        return f"task-{stamp}"

    def validate(
        self, fields: dict[str, Any], members: Callable[[str], bool] | None = None
    ) -> dict[str, Any]:
        """
        Check creation fields and return them normalized.

        Args:
            fields: Raw creation fields (title, description, due_date,
                priority, assignee)
            members: Predicate telling whether an assignee is a known member

        Returns:
            Normalized keyword arguments for ``Task``

        Raises:
            ValidationError: If any field is missing or invalid
        """
        title = _require_text(fields, "title")
        description = _require_text(fields, "description")

        due_date = _parse_due_date(fields.get("due_date"))
        today = self._today()
        if due_date <= today:
            raise ValidationError(
                "due_date",
                f"Due date {due_date.isoformat()} must be after {today.isoformat()}.",
            )

        try:
            priority = Priority.parse(fields.get("priority") or Priority.LOW)
        except ValueError as exc:
            raise ValidationError("priority", str(exc)) from exc

        assignee = fields.get("assignee") or None
        if assignee is not None and members is not None and not members(assignee):
            raise ValidationError("assignee", f"Unknown assignee '{assignee}'.")

        return {
            "title": title,
            "description": description,
            "due_date": due_date,
            "priority": priority,
            "assignee": assignee,
        }

    def create_task(
        self, fields: dict[str, Any], members: Callable[[str], bool] | None = None
    ) -> Task:
        """Validate ``fields`` and store a new task with a fresh id."""
        normalized = self.validate(fields, members)
        task = Task(id=self._allocate_id(), **normalized)
        self._tasks[task.id] = task
        logger.info(f"Created task {task.id} '{task.title}' due {task.due_date}")
        return task

    def get_task(self, task_id: str) -> Task | None:
        """Get a specific task by ID."""
        return self._tasks.get(task_id)

    def discard(self, task_id: str) -> Task | None:
        """Drop a task from the store without touching any board placement."""
        return self._tasks.pop(task_id, None)

    def ids(self) -> list[str]:
        return list(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))

    def __len__(self) -> int:
        return len(self._tasks)
