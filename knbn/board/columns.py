"""Column manager.

Columns are the ordered workflow stages of a board. Names are unique and
compared case-sensitively; tasks point at a column by name.
"""

from __future__ import annotations

from dataclasses import replace

from .clock import Clock, system_clock
from .exceptions import ColumnNotEmptyError, DuplicateNameError, InvalidPositionError, NotFoundError
from .models import Board, Column, Task, check_fields
from .tasks import sort_tasks


def create_column(name: str) -> Column:
    return Column(name=name)


def get_column(board: Board, name: str) -> Column | None:
    for column in board.columns:
        if column.name == name:
            return column
    return None


def _index_of(board: Board, name: str) -> int:
    for i, column in enumerate(board.columns):
        if column.name == name:
            return i
    return -1


def add_column(
    board: Board,
    column: Column,
    position: int | None = None,
    *,
    clock: Clock = system_clock,
) -> Board:
    """Insert ``column`` at ``position``, or append when position is out of range."""
    if get_column(board, column.name) is not None:
        raise DuplicateNameError("column", column.name)

    columns = list(board.columns)
    if position is not None and 0 <= position <= len(columns):
        columns.insert(position, column)
    else:
        columns.append(column)
    return replace(board, columns=columns).touched(clock())


def update_column(
    board: Board, column_name: str, *, clock: Clock = system_clock, **fields
) -> Board:
    """Merge ``fields`` over a column. ``name`` in ``fields`` renames it."""
    index = _index_of(board, column_name)
    if index == -1:
        raise NotFoundError("column", column_name)
    check_fields(Column, fields, "column")

    existing = board.columns[index]
    changes = dict(fields)
    # an empty name keeps the current one
    changes["name"] = fields.get("name") or existing.name
    if _index_of(board, changes["name"]) not in (-1, index):
        raise DuplicateNameError("column", changes["name"])
    columns = list(board.columns)
    columns[index] = replace(existing, **changes)
    return replace(board, columns=columns).touched(clock())


def remove_column(board: Board, name: str, *, clock: Clock = system_clock) -> Board:
    """Remove a column that no task references.

    Removing a column that does not exist returns the board untouched,
    timestamp included.
    """
    if get_column(board, name) is None:
        return board

    count = sum(1 for task in board.tasks.values() if task.column == name)
    if count:
        raise ColumnNotEmptyError(name, count)

    columns = [c for c in board.columns if c.name != name]
    return replace(board, columns=columns).touched(clock())


def move_column(board: Board, name: str, position: int, *, clock: Clock = system_clock) -> Board:
    index = _index_of(board, name)
    if index == -1:
        raise NotFoundError("column", name)
    if position < 0 or position >= len(board.columns):
        raise InvalidPositionError(position, len(board.columns))

    columns = list(board.columns)
    column = columns.pop(index)
    columns.insert(position, column)
    return replace(board, columns=columns).touched(clock())


def list_columns(board: Board) -> list[Column]:
    return list(board.columns)


def column_names(board: Board) -> list[str]:
    return [c.name for c in board.columns]


def tasks_in_column(board: Board, name: str) -> list[Task]:
    return sort_tasks(t for t in board.tasks.values() if t.column == name)


def column_task_count(board: Board, name: str) -> int:
    return len(tasks_in_column(board, name))
