"""Data models for the task board: priorities, tasks, columns and config."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Final


class Priority(str, Enum):
    """Priority of a task."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: Priority | str) -> Priority:
        """Parse a priority case-insensitively (``"high"`` -> ``HIGH``)."""
        if isinstance(value, Priority):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown priority '{value}'") from exc


@dataclass
class Task:
    """Represents a single task on the board."""

    id: str
    title: str
    description: str
    due_date: date
    priority: Priority = Priority.LOW
    assignee: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert task to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date.isoformat(),
            "priority": self.priority.value,
            "assignee": self.assignee,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class Column:
    """A board column: a stable id and its display label."""

    id: str
    label: str


DEFAULT_COLUMNS: Final[tuple[Column, ...]] = (
    Column("todo", "TODO"),
    Column("inprogress", "IN PROGRESS"),
    Column("done", "DONE"),
)


@dataclass(frozen=True)
class BoardConfig:
    """
    Static configuration of a board.

    Args:
        columns: Ordered, fixed set of columns
        default_column: Column new tasks are appended to (first column if None)
        members: Initial member roster used to validate assignees
    """

    columns: tuple[Column, ...] = DEFAULT_COLUMNS
    default_column: str | None = None
    members: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.columns:
            raise ValueError("A board needs at least one column.")
        ids = [column.id for column in self.columns]
        if any(not cid.strip() for cid in ids):
            raise ValueError(f"Column ids must not be empty: {ids}.")
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate column ids in {ids}.")
        if self.default_column is not None and self.default_column not in ids:
            available = ", ".join(ids)
            raise ValueError(
                f"Unknown default column '{self.default_column}'. "
                f"Available options: {available}."
            )

    @property
    def column_ids(self) -> tuple[str, ...]:
        return tuple(column.id for column in self.columns)

    @property
    def resolved_default_column(self) -> str:
        return self.default_column or self.columns[0].id

    def label_for(self, column_id: str) -> str:
        for column in self.columns:
            if column.id == column_id:
                return column.label
        raise KeyError(column_id)
