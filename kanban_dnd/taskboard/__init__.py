"""Task board module: columns, drag-and-drop placement and summaries."""

from .drag import DragPhase
from .manager import TaskBoard, get_task_board
from .models import BoardConfig, Column, Priority, Task
from .store import ValidationError

__all__ = [
    "BoardConfig",
    "Column",
    "DragPhase",
    "Priority",
    "Task",
    "TaskBoard",
    "ValidationError",
    "get_task_board",
]
