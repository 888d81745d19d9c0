"""YAML board file persistence.

The board file is plain YAML, written block-style with the schema's own
key order so it stays readable and diff-friendly by hand. Anything older
than the current schema is migrated on load; nothing is written back
until the caller saves.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable

import yaml

from ..board.clock import Clock, system_clock
from ..board.exceptions import InvalidDocumentError, LoadFailureError, SaveFailureError
from ..board.migrations import document_version, migrate_board
from ..board.models import CURRENT_VERSION, Board

logger = logging.getLogger(__name__)


def load_raw(path: Path | str) -> Any:
    """Read and decode a board file without interpreting it."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        return yaml.safe_load(text)
    except (OSError, UnicodeDecodeError) as e:
        raise LoadFailureError(path, str(e)) from e
    except yaml.YAMLError as e:
        raise LoadFailureError(path, f"invalid YAML: {e}") from e


def load_board(path: Path | str) -> Board:
    """Load a board file, migrating it to the current schema if needed."""
    data = load_raw(path)
    if not isinstance(data, dict):
        raise InvalidDocumentError("Invalid board file format")

    version = document_version(data)
    if version != CURRENT_VERSION:
        logger.warning(
            "Board version mismatch in %s: expected %s, found %s. Migrating...",
            path, CURRENT_VERSION, version,
        )
        data = migrate_board(data)

    logger.debug("Loaded board from %s", path)
    return Board.from_dict(data)


def load_board_fields(path: Path | str, keys: Iterable[str]) -> dict[str, Any]:
    """Read only the named top-level keys, without migrating."""
    data = load_raw(path)
    if not isinstance(data, dict):
        raise InvalidDocumentError("Invalid board file format")

    version = document_version(data)
    if version != CURRENT_VERSION:
        logger.warning(
            "Board version mismatch in %s: expected %s, found %s. Consider migrating.",
            path, CURRENT_VERSION, version,
        )
    wanted = set(keys)
    return {k: v for k, v in data.items() if k in wanted}


def dump_board(board: Board) -> str:
    return yaml.safe_dump(
        board.to_dict(),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    )


def save_board(path: Path | str, board: Board, *, clock: Clock = system_clock) -> Board:
    """Stamp ``dates.saved`` and write the board. Returns the stamped board."""
    path = Path(path)
    stamped = replace(board, dates=replace(board.dates, saved=clock()))
    try:
        content = dump_board(stamped)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise SaveFailureError(path, str(e)) from e
    except yaml.YAMLError as e:
        raise SaveFailureError(path, f"cannot encode board: {e}") from e

    logger.debug("Saved board to %s", path)
    return stamped
