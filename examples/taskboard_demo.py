"""Simple demo of drag-and-drop on the task board without any UI."""

from datetime import date, timedelta

from loguru import logger
from rich.console import Console

from kanban_dnd.taskboard import TaskBoard, ValidationError
from kanban_dnd.utils.logging import setup_logger


def drag(board: TaskBoard, subject: str, *hover: str | None) -> None:
    """Simulate a gesture: hover each target in turn, then drop on the last."""
    board.handle_drag_start(subject)
    for target in hover:
        board.handle_drag_over(subject, target)
    board.handle_drag_end(subject, hover[-1] if hover else None)


def main():
    """Run a demo with a handful of tasks and gestures."""
    setup_logger(level="DEBUG", use_rich=True)

    board = TaskBoard()
    board.add_member("alice")
    board.add_member("bob")
    board.subscribe(lambda: logger.info(f"Board: {board.columns_snapshot()}"))

    tomorrow = date.today() + timedelta(days=1)
    ids = [
        board.create_task(
            title=f"Task {i}",
            description=f"Demo task number {i}",
            due_date=tomorrow + timedelta(days=i),
            priority=("Low", "Medium", "High")[i % 3],
            assignee=("alice", "bob", None)[i % 3],
        )
        for i in range(5)
    ]

    try:
        board.create_task(title="", description="no title", due_date=tomorrow)
    except ValidationError as exc:
        logger.warning(f"Rejected as expected: {exc}")

    # Hover a task in another column, then a column: the task follows eagerly
    drag(board, ids[0], "inprogress")
    drag(board, ids[1], ids[0], "done")
    # Reorder inside the todo column on drop
    drag(board, ids[4], ids[2])
    # Drop on empty space: no positional change
    drag(board, ids[3], None)

    logger.success("Demo finished")
    Console().print_json(data=board.get_summary())


if __name__ == "__main__":
    main()
