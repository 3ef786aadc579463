"""Board state: which task sits in which column, in which order."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable


class BoardState:
    """
    Ordered mapping from column id to an ordered list of task ids.

    The set of columns is fixed at construction. Container lookups are a
    linear scan over every column, with no secondary index to keep in sync.
    """

    def __init__(self, column_ids: Iterable[str]) -> None:
        self._columns: dict[str, list[str]] = {cid: [] for cid in column_ids}
        if not self._columns:
            raise ValueError("A board needs at least one column.")

    @property
    def column_ids(self) -> tuple[str, ...]:
        return tuple(self._columns)

    def is_column(self, ref: str | None) -> bool:
        return ref in self._columns

    def locate_container(self, ref: str | None) -> str | None:
        """
        Return the column for a column id or a task id.

        A column id maps to itself; a task id maps to the column holding it.
        Anything else (empty space, unknown ids) maps to None.
        """
        if ref is None:
            return None
        if ref in self._columns:
            return ref
        for column_id, task_ids in self._columns.items():
            if ref in task_ids:
                return column_id
        return None

    def columns_snapshot(self) -> dict[str, tuple[str, ...]]:
        """Read-only copy of every column's sequence, in column order."""
        return {cid: tuple(task_ids) for cid, task_ids in self._columns.items()}

    def column(self, column_id: str) -> tuple[str, ...]:
        return tuple(self._columns[column_id])

    def index_of(self, column_id: str, task_id: str) -> int:
        return self._columns[column_id].index(task_id)

    def append(self, column_id: str, task_id: str) -> None:
        self._columns[column_id].append(task_id)

    def remove(self, task_id: str) -> str | None:
        """Remove a task from whichever column holds it; return that column."""
        column_id = self.locate_container(task_id)
        if column_id is None or column_id == task_id:
            return None
        self._columns[column_id].remove(task_id)
        return column_id

    def move(self, task_id: str, dst: str) -> None:
        """Take ``task_id`` out of its column and append it to ``dst``."""
        if dst not in self._columns:
            raise KeyError(dst)
        self.remove(task_id)
        self._columns[dst].append(task_id)

    def relocate(self, column_id: str, from_index: int, to_index: int) -> None:
        """Move the item at ``from_index`` to ``to_index`` within one column."""
        task_ids = self._columns[column_id]
        task_ids.insert(to_index, task_ids.pop(from_index))

    def audit(self, task_ids: Iterable[str]) -> list[str]:
        """
        List every violation of the placement invariants.

        Args:
            task_ids: Ids currently held by the task store

        Returns:
            Human-readable problems; empty when every stored task sits in
            exactly one column exactly once and no column holds a stray id
        """
        expected = set(task_ids)
        placed = Counter(
            task_id for seq in self._columns.values() for task_id in seq
        )
        problems: list[str] = []
        for task_id, count in placed.items():
            if count > 1:
                problems.append(f"{task_id} placed {count} times")
            if task_id not in expected:
                problems.append(f"{task_id} placed but not stored")
        for task_id in sorted(expected - placed.keys()):
            problems.append(f"{task_id} stored but not placed")
        return problems
