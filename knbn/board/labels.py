"""Label manager. Label names are unique regardless of case."""

from __future__ import annotations

from dataclasses import replace

from .clock import Clock, system_clock
from .exceptions import DuplicateNameError, NotFoundError
from .models import Board, Label, check_fields

COLOR_PREFIXES = ("#", "rgb(", "hsl(")


def create_label(name: str, color: str | None = None) -> Label:
    return Label(name=name, color=color)


def get_label(board: Board, name: str) -> Label | None:
    wanted = name.lower()
    for label in board.labels or []:
        if label.name.lower() == wanted:
            return label
    return None


def list_labels(board: Board) -> list[Label]:
    return list(board.labels or [])


def add_label(board: Board, label: Label, *, clock: Clock = system_clock) -> Board:
    if get_label(board, label.name) is not None:
        raise DuplicateNameError("label", label.name)
    labels = [*(board.labels or []), label]
    return replace(board, labels=labels).touched(clock())


def _label_index(labels: list[Label], name: str) -> int:
    wanted = name.lower()
    return next((i for i, l in enumerate(labels) if l.name.lower() == wanted), -1)


def update_label(
    board: Board, label_name: str, *, clock: Clock = system_clock, **fields
) -> Board:
    """Update a label found case-insensitively. A new name may change its case."""
    labels = list(board.labels or [])
    index = _label_index(labels, label_name)
    if index == -1:
        raise NotFoundError("label", label_name)
    check_fields(Label, fields, "label")

    existing = labels[index]
    changes = dict(fields)
    changes["name"] = fields.get("name") or existing.name
    if _label_index(labels, changes["name"]) not in (-1, index):
        raise DuplicateNameError("label", changes["name"])
    labels[index] = replace(existing, **changes)
    return replace(board, labels=labels).touched(clock())


def remove_label(board: Board, name: str, *, clock: Clock = system_clock) -> Board:
    if get_label(board, name) is None:
        return board
    wanted = name.lower()
    labels = [l for l in board.labels or [] if l.name.lower() != wanted]
    return replace(board, labels=labels).touched(clock())


def is_color_query(query: str) -> bool:
    return query.lower().startswith(COLOR_PREFIXES)


def find_labels(board: Board, query: str) -> list[Label]:
    """Labels whose name contains ``query``, ignoring case.

    A query that looks like a color literal (``#``, ``rgb(``, ``hsl(``)
    matches label colors exactly instead, still ignoring case.
    """
    lowered = query.lower()
    labels = board.labels or []
    if is_color_query(query):
        return [l for l in labels if l.color is not None and l.color.lower() == lowered]
    return [l for l in labels if lowered in l.name.lower()]
