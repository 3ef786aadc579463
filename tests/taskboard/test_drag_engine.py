from __future__ import annotations

import random

import pytest

from kanban_dnd.taskboard.drag import DragEngine, DragPhase
from kanban_dnd.taskboard.state import BoardState

COLUMNS = ("todo", "inprogress", "done")


def make_engine(
    placement: dict[str, list[str]], live: set[str] | None = None
) -> tuple[DragEngine, BoardState]:
    board = BoardState(COLUMNS)
    for column_id, task_ids in placement.items():
        for task_id in task_ids:
            board.append(column_id, task_id)
    is_live = None if live is None else live.__contains__
    return DragEngine(board, is_live=is_live), board


def gesture(engine: DragEngine, subject: str, *hover: str | None) -> None:
    engine.start(subject)
    for target in hover:
        engine.over(subject, target)
    engine.end(subject, hover[-1] if hover else None)


def test_drag_start_enters_dragging_without_moving():
    engine, board = make_engine({"todo": ["a", "b"]})
    before = board.columns_snapshot()

    engine.start("a")

    assert engine.phase is DragPhase.DRAGGING
    assert engine.subject == "a"
    assert board.columns_snapshot() == before


def test_drag_start_on_unknown_task_stays_idle():
    engine, _ = make_engine({"todo": ["a"]})
    engine.start("ghost")
    assert engine.phase is DragPhase.IDLE

    engine.start("todo")  # a column is not draggable
    assert engine.phase is DragPhase.IDLE


def test_new_drag_start_supersedes_session():
    engine, _ = make_engine({"todo": ["a", "b"]})
    engine.start("a")
    engine.start("b")
    assert engine.subject == "b"


def test_hover_over_other_column_moves_to_end():
    engine, board = make_engine({"todo": ["a", "b", "c"], "done": ["x", "y"]})
    engine.start("b")

    assert engine.over("b", "x")

    snapshot = board.columns_snapshot()
    assert snapshot["todo"] == ("a", "c")
    assert snapshot["done"] == ("x", "y", "b")


def test_hover_over_empty_column_places_at_index_zero():
    engine, board = make_engine({"todo": ["a", "b"]})
    engine.start("a")
    engine.over("a", "inprogress")
    engine.end("a", "inprogress")
    assert board.column("inprogress") == ("a",)
    assert board.column("todo") == ("b",)


def test_repeated_hover_is_idempotent():
    engine, board = make_engine({"todo": ["a", "b"], "done": ["x"]})
    engine.start("a")

    assert engine.over("a", "x")
    after_first = board.columns_snapshot()
    assert not engine.over("a", "x")
    assert not engine.over("a", "done")

    assert board.columns_snapshot() == after_first


def test_hover_same_column_or_nowhere_is_noop():
    engine, board = make_engine({"todo": ["a", "b"], "done": ["x"]})
    before = board.columns_snapshot()
    engine.start("a")

    assert not engine.over("a", "b")
    assert not engine.over("a", "todo")
    assert not engine.over("a", None)
    assert not engine.over("a", "a")
    assert not engine.over("a", "missing")

    assert board.columns_snapshot() == before


def test_hover_without_active_drag_is_ignored():
    engine, board = make_engine({"todo": ["a"], "done": ["x"]})
    before = board.columns_snapshot()

    assert not engine.over("a", "done")

    engine.start("x")
    assert not engine.over("a", "done")  # not the dragged task
    assert board.columns_snapshot() == before


@pytest.mark.parametrize(
    ("subject", "target", "expected"),
    [
        ("a", "d", ("b", "c", "d", "a", "e")),
        ("d", "a", ("d", "a", "b", "c", "e")),
        ("b", "c", ("a", "c", "b", "d", "e")),
        ("e", "b", ("a", "e", "b", "c", "d")),
    ],
)
def test_same_column_drop_relocates_single_element(subject, target, expected):
    engine, board = make_engine({"todo": ["a", "b", "c", "d", "e"]})
    gesture(engine, subject, target)
    assert board.column("todo") == expected
    assert engine.phase is DragPhase.IDLE


def test_drop_on_own_column_moves_to_end():
    engine, board = make_engine({"todo": ["a", "b", "c"]})
    gesture(engine, "a", "todo")
    assert board.column("todo") == ("b", "c", "a")


def test_drop_on_itself_is_noop():
    engine, board = make_engine({"todo": ["a", "b", "c"]})
    assert not engine.start("b")
    assert not engine.over("b", "b")
    assert not engine.end("b", "b")
    assert board.column("todo") == ("a", "b", "c")


def test_drop_on_empty_space_keeps_hover_moves():
    engine, board = make_engine({"todo": ["a", "b"], "done": ["x"]})
    engine.start("a")
    engine.over("a", "x")

    assert not engine.end("a", None)

    assert board.column("done") == ("x", "a")
    assert engine.phase is DragPhase.IDLE


def test_cross_column_drop_without_hover_is_not_corrected():
    engine, board = make_engine({"todo": ["a", "b"], "done": ["x"]})
    engine.start("a")

    assert not engine.end("a", "x")

    assert board.column("todo") == ("a", "b")
    assert board.column("done") == ("x",)
    assert engine.phase is DragPhase.IDLE


def test_hover_then_reorder_in_destination():
    engine, board = make_engine({"todo": ["a"], "done": ["x", "y", "z"]})
    engine.start("a")
    engine.over("a", "y")  # appended after z
    engine.over("a", "x")  # now same column: no-op until drop
    engine.end("a", "x")

    assert board.column("done") == ("a", "x", "y", "z")
    assert board.column("todo") == ()


def test_cancel_ends_session_and_keeps_moves():
    engine, board = make_engine({"todo": ["a"], "done": []})
    engine.start("a")
    engine.over("a", "done")

    engine.cancel()

    assert engine.phase is DragPhase.IDLE
    assert board.column("done") == ("a",)
    assert not engine.over("a", "todo")


def test_drag_end_always_returns_to_idle():
    engine, _ = make_engine({"todo": ["a", "b"]})
    engine.start("a")
    engine.end("b", "a")  # mismatched subject
    assert engine.phase is DragPhase.IDLE


def test_stale_task_events_are_noops():
    engine, board = make_engine({"todo": ["a", "b"], "done": ["x"]}, live={"a", "x"})
    before = board.columns_snapshot()

    engine.start("a")
    assert not engine.over("a", "b")  # b vanished from the store
    assert not engine.end("a", "b")

    engine.start("b")
    assert engine.phase is DragPhase.IDLE
    assert not engine.over("b", "done")
    assert board.columns_snapshot() == before


def test_random_gestures_conserve_tasks():
    rng = random.Random(1234)
    task_ids = [f"t{i}" for i in range(8)]
    engine, board = make_engine(
        {"todo": task_ids[:4], "inprogress": task_ids[4:6], "done": task_ids[6:]}
    )
    targets = task_ids + list(COLUMNS) + [None, "ghost"]

    for _ in range(500):
        subject = rng.choice(task_ids)
        before = board.columns_snapshot()
        engine.start(subject)
        for _ in range(rng.randint(0, 3)):
            engine.over(subject, rng.choice(targets))
        src = board.locate_container(subject)
        remaining = [t for t in board.column(src) if t != subject]
        engine.end(subject, rng.choice(targets))

        assert board.audit(task_ids) == []
        # Only the subject ever moves; every other task keeps column and order
        for column_id in COLUMNS:
            others_before = [t for t in before[column_id] if t != subject]
            others_after = [t for t in board.column(column_id) if t != subject]
            assert others_after == others_before
        assert [t for t in board.column(src) if t != subject] == remaining
