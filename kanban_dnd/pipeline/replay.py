"""Replay a script of task and drag events against a fresh board."""

from __future__ import annotations

import argparse
import json
from collections.abc import Iterable, Iterator
from datetime import date
from pathlib import Path
from typing import Any

from loguru import logger
from rich.console import Console

from kanban_dnd.taskboard import BoardConfig, Column, TaskBoard, ValidationError
from kanban_dnd.utils.logging import setup_logger

EVENT_TYPES = (
    "create",
    "drag_start",
    "drag_over",
    "drag_end",
    "drag_cancel",
    "add_member",
    "remove_member",
)


class ReplayError(RuntimeError):
    """Raised when a replay script cannot be parsed."""


def parse_columns(value: str) -> tuple[Column, ...]:
    """Parse ``"todo=TODO,done=DONE"`` into columns (label defaults to the id)."""
    columns = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        column_id, _, label = part.partition("=")
        columns.append(Column(column_id.strip(), label.strip() or column_id.strip()))
    return tuple(columns)


def iter_script(lines: Iterable[str]) -> Iterator[tuple[int, dict[str, Any]]]:
    """Yield ``(line number, event)`` for every non-blank, non-comment line."""
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            event = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ReplayError(f"Line {lineno}: invalid JSON ({exc.msg})") from exc
        if not isinstance(event, dict) or event.get("event") not in EVENT_TYPES:
            raise ReplayError(
                f"Line {lineno}: expected an object with 'event' in {', '.join(EVENT_TYPES)}"
            )
        yield lineno, event


def replay(board: TaskBoard, events: Iterable[tuple[int, dict[str, Any]]]) -> dict[str, str]:
    """
    Apply events to ``board`` in order.

    Returns:
        Mapping from each ``create`` event's ``ref`` alias to its task id
    """
    refs: dict[str, str] = {}

    def resolve(value: str | None) -> str | None:
        if value is None:
            return None
        return refs.get(value, value)

    for lineno, event in events:
        kind = event["event"]
        if kind == "create":
            fields = {
                key: event[key]
                for key in ("title", "description", "due_date", "priority", "assignee")
                if key in event
            }
            try:
                task_id = board.create_task(**fields)
            except ValidationError as exc:
                logger.warning(f"Line {lineno}: task rejected ({exc.field}): {exc}")
                continue
            if event.get("ref"):
                refs[event["ref"]] = task_id
        elif kind == "drag_start":
            board.handle_drag_start(resolve(event.get("subject")))
        elif kind == "drag_over":
            board.handle_drag_over(resolve(event.get("subject")), resolve(event.get("over")))
        elif kind == "drag_end":
            board.handle_drag_end(resolve(event.get("subject")), resolve(event.get("over")))
        elif kind == "drag_cancel":
            board.handle_drag_cancel()
        elif kind == "add_member":
            try:
                board.add_member(event.get("name", ""))
            except ValidationError as exc:
                logger.warning(f"Line {lineno}: member rejected: {exc}")
        elif kind == "remove_member":
            try:
                board.remove_member(event.get("name", ""))
            except KeyError:
                logger.warning(f"Line {lineno}: unknown member {event.get('name')!r}")
    return refs


def replay_file(
    script: Path,
    *,
    config: BoardConfig | None = None,
    as_of: date | None = None,
) -> dict[str, Any]:
    """Replay ``script`` on a new board and return its summary."""
    board = TaskBoard(config, today=(lambda: as_of) if as_of else None)
    with script.open(encoding="utf-8") as handle:
        refs = replay(board, iter_script(handle))

    problems = board.audit()
    if problems:  # pragma: no cover - would indicate an engine bug
        logger.error(f"Board invariants violated: {problems}")

    summary = board.get_summary(as_of)
    summary["refs"] = refs
    logger.success(
        f"Replayed {script.name}: {summary['total']} tasks across "
        f"{len(summary['columns'])} columns"
    )
    return summary


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments for event replay."""
    parser = argparse.ArgumentParser(
        description="Replay task and drag events against an in-memory board"
    )
    parser.add_argument("script", type=Path, help="JSON-lines event script")
    parser.add_argument(
        "--columns",
        default=None,
        help="Comma-separated columns as id=Label (defaults to todo, inprogress, done)",
    )
    parser.add_argument(
        "--default-column",
        default=None,
        help="Column new tasks are appended to (defaults to the first column)",
    )
    parser.add_argument(
        "--member",
        action="append",
        default=[],
        help="Register a member before replaying (repeatable)",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Treat this ISO date as today (defaults to the real date)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g., INFO, DEBUG)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    setup_logger(level=args.log_level)

    config_kwargs: dict[str, Any] = {
        "default_column": args.default_column,
        "members": tuple(args.member),
    }
    if args.columns:
        config_kwargs["columns"] = parse_columns(args.columns)

    summary = replay_file(args.script, config=BoardConfig(**config_kwargs), as_of=args.as_of)
    Console().print_json(data=summary)


if __name__ == "__main__":
    main()
