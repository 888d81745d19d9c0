"""Task manager: ID allocation, updates, search and the canonical sort."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Mapping

from .clock import Clock, system_clock, timestamp_or_min
from .exceptions import NotFoundError
from .models import Board, Task, TaskDates, check_fields

STRING_SEARCH_KEYS = ("title", "description", "sprint")
ARRAY_SEARCH_KEYS = ("labels",)


def _sort_key(task: Task) -> tuple:
    has_priority = task.priority is not None
    return (
        0 if has_priority else 1,
        task.priority if has_priority else 0,
        -timestamp_or_min(task.dates.updated).timestamp(),
    )


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Canonical task order, returned as a new list.

    Tasks with a priority come first, lowest priority value first. Ties,
    including tasks without any priority, go most recently updated first.
    The sort is stable, so equal tasks keep their input order.
    """
    return sorted(tasks, key=_sort_key)


def default_column_name(board: Board) -> str:
    return board.columns[0].name if board.columns else ""


def create_task(
    board: Board,
    *,
    title: str = "",
    description: str = "",
    sprint: str | None = None,
    labels: list[str] | None = None,
    story_points: float | None = None,
    priority: float | None = None,
    dates: Mapping[str, Any] | None = None,
    clock: Clock = system_clock,
) -> tuple[Board, Task]:
    """Create a task in the board's first column.

    The id is taken from ``metadata.next_id`` which is then incremented;
    ids are never handed out twice, even after tasks are removed.
    """
    now = clock()
    dates = dates or {}
    task_id = board.metadata.next_id
    task = Task(
        id=task_id,
        title=title or "",
        description=description or "",
        column=default_column_name(board),
        sprint=sprint,
        labels=list(labels) if labels is not None else None,
        story_points=story_points,
        priority=priority,
        dates=TaskDates(
            created=dates.get("created") or now,
            updated=dates.get("updated") or now,
            moved=dates.get("moved"),
        ),
    )
    updated = replace(
        board,
        tasks={**board.tasks, task_id: task},
        metadata=replace(board.metadata, next_id=task_id + 1),
    )
    return updated.touched(now), task


def get_task(board: Board, task_id: int) -> Task | None:
    return board.tasks.get(int(task_id))


def _apply_update(task: Task, fields: Mapping[str, Any], now: str) -> Task:
    check_fields(Task, fields, "task")
    changes = {k: v for k, v in fields.items() if k not in ("id", "dates")}
    if changes.get("labels") is not None:
        changes["labels"] = list(changes["labels"])

    column_changed = "column" in changes and changes["column"] != task.column
    return replace(
        task,
        **changes,
        dates=TaskDates(
            created=task.dates.created,
            updated=now,
            moved=now if column_changed else task.dates.moved,
        ),
    )


def update_task(board: Board, task_id: int, *, clock: Clock = system_clock, **fields) -> Board:
    """Merge ``fields`` over an existing task.

    ``id`` and ``dates.created`` always survive. ``dates.updated`` is
    refreshed; ``dates.moved`` only when ``column`` changes to a new value.
    """
    task_id = int(task_id)
    task = board.tasks.get(task_id)
    if task is None:
        raise NotFoundError("task", task_id)

    now = clock()
    updated_task = _apply_update(task, fields, now)
    return replace(board, tasks={**board.tasks, task_id: updated_task}).touched(now)


def update_tasks_batch(
    board: Board,
    updates: Mapping[int, Mapping[str, Any]],
    *,
    clock: Clock = system_clock,
) -> tuple[Board, dict[int, Task]]:
    """Apply several task updates in one pass, all or nothing.

    Every id is checked before anything is applied, so a missing id leaves
    no trace. Returns the new board and the updated tasks keyed by id. The
    board is stamped once, even for an empty batch.
    """
    normalized = {int(task_id): fields for task_id, fields in updates.items()}
    for task_id in normalized:
        if task_id not in board.tasks:
            raise NotFoundError("task", task_id)

    now = clock()
    updated_tasks = {
        task_id: _apply_update(board.tasks[task_id], fields, now)
        for task_id, fields in normalized.items()
    }
    updated = replace(board, tasks={**board.tasks, **updated_tasks})
    return updated.touched(now), updated_tasks


def remove_task(board: Board, task_id: int, *, clock: Clock = system_clock) -> Board:
    """Drop a task. Unknown ids are a no-op; ``next_id`` is never rewound."""
    task_id = int(task_id)
    if task_id not in board.tasks:
        return board
    tasks = {k: v for k, v in board.tasks.items() if k != task_id}
    return replace(board, tasks=tasks).touched(clock())


def _matches(task: Task, query: str, string_keys: list[str], array_keys: list[str]) -> bool:
    for key in string_keys:
        value = getattr(task, key)
        if isinstance(value, str) and query in value.lower():
            return True
    for key in array_keys:
        value = getattr(task, key)
        if isinstance(value, list) and any(query in str(item).lower() for item in value):
            return True
    return False


def search_tasks(board: Board, query: str, keys: Iterable[str] | None = None) -> list[Task]:
    """Case-insensitive task search, canonically sorted.

    String fields match on substring, label lists when any label contains
    the query. ``keys`` limits which fields are looked at. An empty query
    returns every task.
    """
    if not query:
        return sort_tasks(board.tasks.values())

    wanted = set(keys) if keys is not None else None
    string_keys = [k for k in STRING_SEARCH_KEYS if wanted is None or k in wanted]
    array_keys = [k for k in ARRAY_SEARCH_KEYS if wanted is None or k in wanted]
    lowered = query.lower()
    return sort_tasks(
        task for task in board.tasks.values()
        if _matches(task, lowered, string_keys, array_keys)
    )
