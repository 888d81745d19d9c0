"""File-level board actions.

Each handler takes a board file path, loads (and migrates) the board,
applies one operation and saves the result when something changed.
No argparse or terminal dependency, so they are testable with a
``tmp_path`` board file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping

from .adapters.files import load_board, save_board
from .board import board as orchestrator
from .board import columns, labels, sprints, tasks
from .board.clock import Clock, system_clock
from .board.exceptions import NotFoundError
from .board.models import Board, Column, Label, Sprint, Task
from .config import BoardConfig

WELCOME_TASK = {
    "title": "Create a .knbn!",
    "description": "Create your .knbn file to start using knbn",
}


def _persist(path: Path | str, before: Board, after: Board, clock: Clock) -> Board:
    if after is before:
        return before
    return save_board(path, after, clock=clock)


# --- Boards ---


def create_board_file(
    path: Path | str,
    *,
    config: BoardConfig | None = None,
    clock: Clock = system_clock,
    **fields: Any,
) -> Board:
    """Create a new board file; a welcome task is added when no tasks are given."""
    path = Path(path)
    if path.exists():
        raise FileExistsError(f"Board file {path} already exists")

    board = orchestrator.create_board(config=config, clock=clock, **fields)
    if not board.tasks:
        board, _ = tasks.create_task(board, clock=clock, **WELCOME_TASK)
    return save_board(path, board, clock=clock)


# --- Tasks ---


def get_task(path: Path | str, task_id: int) -> Task | None:
    return tasks.get_task(load_board(path), task_id)


def find_tasks(path: Path | str, query: str, keys: Iterable[str] | None = None) -> list[Task]:
    return tasks.search_tasks(load_board(path), query, keys)


def create_task(
    path: Path | str, *, clock: Clock = system_clock, **fields: Any
) -> tuple[Board, Task]:
    board, task = tasks.create_task(load_board(path), clock=clock, **fields)
    return save_board(path, board, clock=clock), task


def update_task(
    path: Path | str, task_id: int, *, clock: Clock = system_clock, **fields: Any
) -> Board:
    board = tasks.update_task(load_board(path), task_id, clock=clock, **fields)
    return save_board(path, board, clock=clock)


def update_tasks_batch(
    path: Path | str,
    updates: Mapping[int, Mapping[str, Any]],
    *,
    clock: Clock = system_clock,
) -> tuple[Board, dict[int, Task]]:
    board, updated = tasks.update_tasks_batch(load_board(path), updates, clock=clock)
    return save_board(path, board, clock=clock), updated


def remove_task(path: Path | str, task_id: int, *, clock: Clock = system_clock) -> Board:
    board = load_board(path)
    return _persist(path, board, tasks.remove_task(board, task_id, clock=clock), clock)


# --- Columns ---


def create_column(
    path: Path | str, name: str, position: int | None = None, *, clock: Clock = system_clock
) -> Board:
    board = columns.add_column(load_board(path), columns.create_column(name), position, clock=clock)
    return save_board(path, board, clock=clock)


def update_column(
    path: Path | str, column_name: str, *, clock: Clock = system_clock, **fields: Any
) -> Board:
    board = columns.update_column(load_board(path), column_name, clock=clock, **fields)
    return save_board(path, board, clock=clock)


def remove_column(path: Path | str, name: str, *, clock: Clock = system_clock) -> Board:
    board = load_board(path)
    return _persist(path, board, columns.remove_column(board, name, clock=clock), clock)


def move_column(
    path: Path | str, name: str, position: int, *, clock: Clock = system_clock
) -> Board:
    board = columns.move_column(load_board(path), name, position, clock=clock)
    return save_board(path, board, clock=clock)


def list_columns(path: Path | str) -> list[Column]:
    return columns.list_columns(load_board(path))


def get_column(path: Path | str, name: str) -> Column | None:
    return columns.get_column(load_board(path), name)


def tasks_in_column(path: Path | str, name: str) -> list[Task]:
    return columns.tasks_in_column(load_board(path), name)


def column_task_count(path: Path | str, name: str) -> int:
    return columns.column_task_count(load_board(path), name)


def column_names(path: Path | str) -> list[str]:
    return columns.column_names(load_board(path))


# --- Labels ---


def add_label(
    path: Path | str, name: str, color: str | None = None, *, clock: Clock = system_clock
) -> Board:
    board = labels.add_label(load_board(path), labels.create_label(name, color), clock=clock)
    return save_board(path, board, clock=clock)


def update_label(
    path: Path | str, label_name: str, *, clock: Clock = system_clock, **fields: Any
) -> Board:
    board = labels.update_label(load_board(path), label_name, clock=clock, **fields)
    return save_board(path, board, clock=clock)


def remove_label(path: Path | str, name: str, *, clock: Clock = system_clock) -> Board:
    board = load_board(path)
    return _persist(path, board, labels.remove_label(board, name, clock=clock), clock)


def list_labels(path: Path | str) -> list[Label]:
    return labels.list_labels(load_board(path))


def get_label(path: Path | str, name: str) -> Label | None:
    return labels.get_label(load_board(path), name)


def find_labels(path: Path | str, query: str) -> list[Label]:
    return labels.find_labels(load_board(path), query)


# --- Sprints ---


def add_sprint(
    path: Path | str, name: str, *, clock: Clock = system_clock, **fields: Any
) -> Sprint:
    sprint = sprints.create_sprint(name, clock=clock, **fields)
    board = orchestrator.add_sprint(load_board(path), sprint, clock=clock)
    save_board(path, board, clock=clock)
    return sprint


def update_sprint(
    path: Path | str, sprint_name: str, *, clock: Clock = system_clock, **fields: Any
) -> Sprint:
    board = orchestrator.update_sprint(load_board(path), sprint_name, clock=clock, **fields)
    board = save_board(path, board, clock=clock)
    current_name = fields.get("name") or sprint_name
    updated = sprints.get_sprint(board, current_name)
    if updated is None:
        raise NotFoundError("sprint", current_name)
    return updated



def remove_sprint(path: Path | str, name: str, *, clock: Clock = system_clock) -> Board:
    board = load_board(path)
    return _persist(path, board, orchestrator.remove_sprint(board, name, clock=clock), clock)


def list_sprints(path: Path | str) -> list[Sprint]:
    return sprints.list_sprints(load_board(path))


def get_sprint(path: Path | str, name: str) -> Sprint:
    sprint = sprints.get_sprint(load_board(path), name)
    if sprint is None:
        raise NotFoundError("sprint", name)
    return sprint


def active_sprints(path: Path | str, *, clock: Clock = system_clock) -> list[Sprint]:
    return sprints.active_sprints(load_board(path), clock=clock)


def upcoming_sprints(path: Path | str, *, clock: Clock = system_clock) -> list[Sprint]:
    return sprints.upcoming_sprints(load_board(path), clock=clock)


def completed_sprints(path: Path | str, *, clock: Clock = system_clock) -> list[Sprint]:
    return sprints.completed_sprints(load_board(path), clock=clock)
