"""Board document models.

Every entity is a frozen dataclass. Managers never edit one in place; they
build a new value with ``dataclasses.replace`` and return it, so a caller
holding an older Board keeps seeing exactly what it had.

Attribute names are snake_case. ``to_dict``/``from_dict`` translate to and
from the persisted camelCase schema, and ``from_dict`` is the single place
where missing optional fields are resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from dataclasses import fields as dataclass_fields
from datetime import date, datetime
from typing import Any

from .clock import format_timestamp

CURRENT_VERSION = "0.2"


def _timestamp(value: Any) -> str | None:
    # Hand-edited YAML may carry unquoted timestamps that load as datetimes
    if value is None:
        return None
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _prune(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class Column:
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Column":
        return cls(name=str(data.get("name", "")))


@dataclass(frozen=True)
class Label:
    name: str
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _prune({"name": self.name, "color": self.color})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Label":
        color = data.get("color")
        return cls(name=str(data.get("name", "")), color=None if color is None else str(color))


@dataclass(frozen=True)
class SprintDates:
    created: str
    starts: str
    ends: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _prune({"created": self.created, "starts": self.starts, "ends": self.ends})


@dataclass(frozen=True)
class Sprint:
    name: str
    dates: SprintDates
    description: str | None = None
    capacity: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _prune({
            "name": self.name,
            "description": self.description,
            "capacity": self.capacity,
            "dates": self.dates.to_dict(),
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Sprint":
        dates = data.get("dates") or {}
        created = _timestamp(dates.get("created")) or ""
        return cls(
            name=str(data.get("name", "")),
            description=data.get("description"),
            capacity=data.get("capacity"),
            dates=SprintDates(
                created=created,
                starts=_timestamp(dates.get("starts")) or created,
                ends=_timestamp(dates.get("ends")),
            ),
        )


@dataclass(frozen=True)
class TaskDates:
    created: str
    updated: str
    moved: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _prune({"created": self.created, "updated": self.updated, "moved": self.moved})


_TASK_KEYS = frozenset(
    {"id", "title", "description", "column", "sprint", "labels", "storyPoints", "priority", "dates"}
)


@dataclass(frozen=True)
class Task:
    """One work item. ``id`` and ``dates.created`` never change once set.

    Keys the schema does not know (``assignee`` from 0.1 files, hand-added
    notes) are kept in ``extra`` and written back unchanged.
    """

    id: int
    dates: TaskDates
    title: str = ""
    description: str = ""
    column: str = ""
    sprint: str | None = None
    labels: list[str] | None = None
    story_points: float | None = None
    priority: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = _prune({
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "column": self.column,
            "sprint": self.sprint,
            "labels": list(self.labels) if self.labels is not None else None,
            "storyPoints": self.story_points,
            "priority": self.priority,
        })
        data.update((k, v) for k, v in self.extra.items() if k not in _TASK_KEYS)
        data["dates"] = self.dates.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        dates = data.get("dates") or {}
        created = _timestamp(dates.get("created")) or ""
        labels = data.get("labels")
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            column=data.get("column") or "",
            sprint=data.get("sprint"),
            labels=[str(name) for name in labels] if labels is not None else None,
            story_points=data.get("storyPoints"),
            priority=data.get("priority"),
            dates=TaskDates(
                created=created,
                updated=_timestamp(dates.get("updated")) or created,
                moved=_timestamp(dates.get("moved")),
            ),
            extra={k: v for k, v in data.items() if k not in _TASK_KEYS},
        )



@dataclass(frozen=True)
class BoardMetadata:
    next_id: int = 1
    version: str = CURRENT_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {"nextId": self.next_id, "version": self.version}


@dataclass(frozen=True)
class BoardDates:
    created: str
    updated: str
    saved: str

    def to_dict(self) -> dict[str, Any]:
        return {"created": self.created, "updated": self.updated, "saved": self.saved}


@dataclass(frozen=True)
class Board:
    """The aggregate root: one kanban project in one document."""

    name: str
    dates: BoardDates
    description: str | None = None
    columns: list[Column] = field(default_factory=list)
    tasks: dict[int, Task] = field(default_factory=dict)
    labels: list[Label] | None = None
    sprints: list[Sprint] | None = None
    metadata: BoardMetadata = field(default_factory=BoardMetadata)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in persisted key order; absent optionals are left out."""
        return _prune({
            "name": self.name,
            "description": self.description,
            "columns": [c.to_dict() for c in self.columns],
            "tasks": {task_id: task.to_dict() for task_id, task in self.tasks.items()},
            "labels": [l.to_dict() for l in self.labels] if self.labels is not None else None,
            "sprints": [s.to_dict() for s in self.sprints] if self.sprints is not None else None,
            "metadata": self.metadata.to_dict(),
            "dates": self.dates.to_dict(),
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Board":
        """Build a Board from a current-version raw document.

        Structure is trusted here; run ``migrate_board`` first on anything
        that may be older.
        """
        metadata = data.get("metadata") or {}
        dates = data.get("dates") or {}
        created = _timestamp(dates.get("created")) or ""
        updated = _timestamp(dates.get("updated")) or created
        labels = data.get("labels")
        sprints = data.get("sprints")
        # the mapping key is the authoritative task id
        tasks = {
            int(task_id): Task.from_dict({**raw, "id": int(task_id)})
            for task_id, raw in (data.get("tasks") or {}).items()
        }
        # never hand out an id that is already taken
        next_id = max(int(metadata.get("nextId") or 1), max(tasks, default=0) + 1)
        return cls(
            name=data.get("name") or "",
            description=data.get("description"),
            columns=[Column.from_dict(c) for c in data.get("columns") or []],
            tasks=tasks,
            labels=[Label.from_dict(l) for l in labels] if labels is not None else None,
            sprints=[Sprint.from_dict(s) for s in sprints] if sprints is not None else None,
            metadata=BoardMetadata(
                next_id=next_id,
                version=str(metadata.get("version", CURRENT_VERSION)),
            ),
            dates=BoardDates(
                created=created,
                updated=updated,
                saved=_timestamp(dates.get("saved")) or updated,
            ),
        )

    def touched(self, now: str) -> "Board":
        """Copy of this board with ``dates.updated`` set to ``now``."""
        return replace(self, dates=replace(self.dates, updated=now))


def check_fields(cls, fields: dict[str, Any], kind: str) -> None:
    """Reject update payload keys that are not fields of ``cls``."""
    known = {f.name for f in dataclass_fields(cls)}
    for key in fields:
        if key not in known:
            raise ValueError(f"Unknown {kind} field: {key}")
