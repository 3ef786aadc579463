"""Drag-and-drop transition engine.

Cross-column moves are applied eagerly while the pointer hovers a target in
another column (the task is appended to that column's end), whereas the
final position inside a column is only resolved on drop. Drag events come
from an external gesture layer and may reference tasks that no longer
exist; such events are dropped as no-ops instead of raising.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from loguru import logger

from .state import BoardState


class DragPhase(str, Enum):
    """Phase of the drag session."""

    IDLE = "idle"
    DRAGGING = "dragging"


class DragEngine:
    """
    State machine turning drag lifecycle events into board mutations.

    Every handler returns True when the board state changed.
    """

    def __init__(
        self, board: BoardState, is_live: Callable[[str], bool] | None = None
    ) -> None:
        self.board = board
        self._is_live = is_live or (lambda _task_id: True)
        self._subject: str | None = None

    @property
    def phase(self) -> DragPhase:
        return DragPhase.IDLE if self._subject is None else DragPhase.DRAGGING

    @property
    def subject(self) -> str | None:
        return self._subject

    def locate(self, ref: str | None) -> str | None:
        """Resolve a task or column id to its column, ignoring stale task ids."""
        if ref is None:
            return None
        if self.board.is_column(ref):
            return ref
        if not self._is_live(ref):
            return None
        return self.board.locate_container(ref)

    def _tracks(self, subject: str) -> bool:
        if self._subject != subject:
            logger.debug(f"Ignoring event for {subject}; active drag is {self._subject}")
            return False
        return True

    def start(self, task_id: str) -> bool:
        if self._subject is not None:
            logger.debug(f"Drag of {task_id} supersedes drag of {self._subject}")
        container = self.locate(task_id)
        if container is None or container == task_id:
            logger.debug(f"Ignoring drag start for unknown task {task_id}")
            self._subject = None
            return False
        self._subject = task_id
        logger.debug(f"Drag started: {task_id} in {container}")
        return False

    def over(self, subject: str, over: str | None) -> bool:
        if not self._tracks(subject) or over is None:
            return False

        src = self.locate(subject)
        dst = self.locate(over)
        if src is None or dst is None or src == dst:
            return False

        self.board.move(subject, dst)
        logger.debug(f"Moved {subject} from {src} to end of {dst} while dragging")
        return True

    def end(self, subject: str, over: str | None) -> bool:
        try:
            if not self._tracks(subject) or over is None:
                return False
            return self._drop(subject, over)
        finally:
            self._subject = None

    def cancel(self) -> bool:
        if self._subject is not None:
            logger.debug(f"Drag of {self._subject} cancelled")
        self._subject = None
        return False

    def _drop(self, subject: str, over: str) -> bool:
        src = self.locate(subject)
        dst = self.locate(over)
        if src is None or dst is None or src != dst:
            # cross-column drops were already applied by over()
            return False

        sequence = self.board.column(src)
        from_index = sequence.index(subject)
        if over == dst:
            to_index = len(sequence) - 1
        else:
            to_index = sequence.index(over)
        if from_index == to_index:
            return False

        self.board.relocate(src, from_index, to_index)
        logger.debug(f"Dropped {subject} in {src}: index {from_index} -> {to_index}")
        return True
