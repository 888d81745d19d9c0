"""Schema migration engine.

A raw document is upgraded one version at a time by walking
``BOARD_VERSIONS`` forward from its ``metadata.version`` and applying the
transform registered for each ``(from, to)`` step in ``MIGRATIONS``. The
engine never guesses a path outside that list, so documents newer than the
engine or older than its first known version are both rejected.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable

from .exceptions import InvalidDocumentError, MissingVersionError, NoMigrationPathError
from .models import CURRENT_VERSION

logger = logging.getLogger(__name__)

BOARD_VERSIONS: tuple[str, ...] = ("0.1", "0.2")

Transform = Callable[[dict[str, Any]], dict[str, Any]]


def _migrate_0_1_to_0_2(data: dict[str, Any]) -> dict[str, Any]:
    """0.1 kept name/columns under ``configuration`` and clock fields in metadata."""
    configuration = data.get("configuration") or {}
    metadata = data.get("metadata") or {}
    tasks = data.get("tasks") or {}

    # distinct label names in order of first appearance
    label_names: dict[str, None] = {}
    for task in tasks.values():
        for name in task.get("labels") or []:
            label_names.setdefault(name, None)

    migrated: dict[str, Any] = {
        "name": configuration.get("name"),
        "description": configuration.get("description"),
        "columns": configuration.get("columns") or [],
        "tasks": tasks,
        "labels": [{"name": name} for name in label_names],
    }
    if data.get("sprints") is not None:
        migrated["sprints"] = data["sprints"]
    migrated["metadata"] = {
        "nextId": metadata.get("nextId"),
        "version": "0.2",
    }
    migrated["dates"] = {
        "created": metadata.get("createdAt"),
        "updated": metadata.get("lastModified"),
        "saved": metadata.get("lastModified"),
    }
    return migrated


MIGRATIONS: tuple[tuple[str, str, Transform], ...] = (
    ("0.1", "0.2", _migrate_0_1_to_0_2),
)


def document_version(data: Any) -> str | None:
    """Return ``metadata.version`` of a raw document, or None when absent."""
    if not isinstance(data, dict):
        return None
    metadata = data.get("metadata")
    if not isinstance(metadata, dict):
        return None
    version = metadata.get("version")
    if version is None or version == "":
        return None
    return str(version)


def _transform_for(from_version: str, to_version: str) -> Transform:
    for source, target, transform in MIGRATIONS:
        if source == from_version and target == to_version:
            return transform
    raise NoMigrationPathError(from_version, to_version)


def _next_version(version: str) -> str:
    try:
        index = BOARD_VERSIONS.index(version)
    except ValueError:
        raise NoMigrationPathError(version) from None
    if index + 1 >= len(BOARD_VERSIONS):
        raise NoMigrationPathError(version)
    return BOARD_VERSIONS[index + 1]


def migrate_board_to(data: dict[str, Any], to_version: str) -> dict[str, Any]:
    """Apply the single registered transform from the document's version to ``to_version``."""
    from_version = document_version(data)
    if from_version is None:
        raise MissingVersionError()
    transform = _transform_for(from_version, to_version)
    return transform(copy.deepcopy(data))


def migrate_board(data: Any, target_version: str = CURRENT_VERSION) -> dict[str, Any]:
    """Upgrade a raw board document to ``target_version``.

    A document already at the target version is returned as-is (same
    object). Otherwise every step runs on a deep copy, so the input is
    never touched.
    """
    if not isinstance(data, dict):
        raise InvalidDocumentError()
    if not data:
        raise InvalidDocumentError("Empty board data cannot be migrated")

    version = document_version(data)
    if version is None:
        raise MissingVersionError()
    if version == target_version:
        return data

    board = data
    while version != target_version:
        next_version = _next_version(version)
        board = migrate_board_to(board, next_version)
        logger.info("Migrated board document %s -> %s", version, next_version)
        version = document_version(board)
        if version is None:
            raise MissingVersionError()
    return board
