"""Sprint manager.

Unlike the other managers, sprint mutations here leave ``dates.updated``
alone; the board orchestrator stamps it (see ``knbn.board.board``).
Sprint status is never stored, it is derived from the sprint dates:

- active: ``starts <= now`` and no ``ends`` or ``ends >= now``
- upcoming: ``starts > now``
- completed: ``ends < now`` (open-ended sprints never complete)
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Mapping

from .clock import Clock, parse_timestamp, system_clock
from .exceptions import DuplicateNameError, NotFoundError
from .models import Board, Sprint, SprintDates, check_fields


def create_sprint(
    name: str,
    *,
    description: str | None = None,
    capacity: int | None = None,
    dates: Mapping[str, Any] | None = None,
    clock: Clock = system_clock,
) -> Sprint:
    """Build a sprint; it starts now unless ``dates`` says otherwise."""
    now = clock()
    dates = dates or {}
    return Sprint(
        name=name,
        description=description,
        capacity=capacity,
        dates=SprintDates(
            created=dates.get("created") or now,
            starts=dates.get("starts") or now,
            ends=dates.get("ends"),
        ),
    )


def get_sprint(board: Board, name: str) -> Sprint | None:
    wanted = name.lower()
    for sprint in board.sprints or []:
        if sprint.name.lower() == wanted:
            return sprint
    return None


def list_sprints(board: Board) -> list[Sprint]:
    return list(board.sprints or [])


def add_sprint(board: Board, sprint: Sprint) -> Board:
    if get_sprint(board, sprint.name) is not None:
        raise DuplicateNameError("sprint", sprint.name)
    return replace(board, sprints=[*(board.sprints or []), sprint])


def _sprint_index(sprints: list[Sprint], name: str) -> int:
    wanted = name.lower()
    return next((i for i, s in enumerate(sprints) if s.name.lower() == wanted), -1)


def update_sprint(board: Board, sprint_name: str, **fields) -> Board:
    """Update a sprint found case-insensitively.

    ``dates`` is a mapping merged key by key into the existing dates.
    """
    sprints = list(board.sprints or [])
    index = _sprint_index(sprints, sprint_name)
    if index == -1:
        raise NotFoundError("sprint", sprint_name)
    check_fields(Sprint, fields, "sprint")

    existing = sprints[index]
    changes = dict(fields)
    changes["name"] = fields.get("name") or existing.name
    if _sprint_index(sprints, changes["name"]) not in (-1, index):
        raise DuplicateNameError("sprint", changes["name"])
    date_changes = changes.pop("dates", None) or {}
    check_fields(SprintDates, date_changes, "sprint date")
    changes["dates"] = replace(existing.dates, **date_changes)
    sprints[index] = replace(existing, **changes)
    return replace(board, sprints=sprints)


def remove_sprint(board: Board, name: str) -> Board:
    if get_sprint(board, name) is None:
        return board
    wanted = name.lower()
    return replace(board, sprints=[s for s in board.sprints or [] if s.name.lower() != wanted])


def _now(clock: Clock) -> datetime:
    return parse_timestamp(clock())


def _instant(value: str | None) -> datetime | None:
    # unreadable dates never satisfy a status predicate
    if not value:
        return None
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        return None


def is_active(sprint: Sprint, now: datetime) -> bool:
    starts = _instant(sprint.dates.starts)
    if starts is None or starts > now:
        return False
    if sprint.dates.ends is None:
        return True
    ends = _instant(sprint.dates.ends)
    return ends is not None and ends >= now


def is_upcoming(sprint: Sprint, now: datetime) -> bool:
    starts = _instant(sprint.dates.starts)
    return starts is not None and starts > now


def is_completed(sprint: Sprint, now: datetime) -> bool:
    ends = _instant(sprint.dates.ends)
    return ends is not None and ends < now


def active_sprints(board: Board, *, clock: Clock = system_clock) -> list[Sprint]:
    now = _now(clock)
    return [s for s in board.sprints or [] if is_active(s, now)]


def upcoming_sprints(board: Board, *, clock: Clock = system_clock) -> list[Sprint]:
    now = _now(clock)
    return [s for s in board.sprints or [] if is_upcoming(s, now)]


def completed_sprints(board: Board, *, clock: Clock = system_clock) -> list[Sprint]:
    now = _now(clock)
    return [s for s in board.sprints or [] if is_completed(s, now)]
