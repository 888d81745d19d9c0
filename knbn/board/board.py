"""Board orchestrator.

Creates boards and threads ``dates.updated`` through the operations whose
manager does not stamp it itself (sprints).
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..config import BoardConfig
from . import sprints as sprint_manager
from .clock import Clock, system_clock
from .models import Board, BoardDates, BoardMetadata, Column, Label, Sprint, Task, CURRENT_VERSION


def create_board(
    name: str | None = None,
    *,
    description: str | None = None,
    columns: Iterable[Column | str] | None = None,
    tasks: Mapping[int, Task] | None = None,
    labels: list[Label] | None = None,
    sprints: list[Sprint] | None = None,
    config: BoardConfig | None = None,
    clock: Clock = system_clock,
) -> Board:
    """Build a new board; anything not given comes from ``config``."""
    config = config or BoardConfig()
    now = clock()
    if columns is None:
        columns = config.columns
    return Board(
        name=name if name is not None else config.name,
        description=description if description is not None else config.description,
        columns=[c if isinstance(c, Column) else Column(name=c) for c in columns],
        tasks=dict(tasks or {}),
        labels=list(labels) if labels is not None else None,
        sprints=list(sprints) if sprints is not None else None,
        metadata=BoardMetadata(next_id=1, version=CURRENT_VERSION),
        dates=BoardDates(created=now, updated=now, saved=now),
    )


def default_column(board: Board) -> Column | None:
    return board.columns[0] if board.columns else None


def touch(board: Board, *, clock: Clock = system_clock) -> Board:
    return board.touched(clock())


def add_sprint(board: Board, sprint: Sprint, *, clock: Clock = system_clock) -> Board:
    return touch(sprint_manager.add_sprint(board, sprint), clock=clock)


def update_sprint(
    board: Board, sprint_name: str, *, clock: Clock = system_clock, **fields: Any
) -> Board:
    return touch(sprint_manager.update_sprint(board, sprint_name, **fields), clock=clock)


def remove_sprint(board: Board, name: str, *, clock: Clock = system_clock) -> Board:
    updated = sprint_manager.remove_sprint(board, name)
    if updated is board:
        return board
    return touch(updated, clock=clock)
