"""Board defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BoardConfig:
    """Defaults used when creating and locating boards."""

    name: str = "My Board"
    description: str = "My local kanban board"
    columns: tuple[str, ...] = ("backlog", "todo", "working", "done")
    extension: str = ".knbn"
    default_filename: str = ".knbn"
