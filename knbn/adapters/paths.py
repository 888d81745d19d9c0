"""Board file discovery and naming."""

from __future__ import annotations

import re
from pathlib import Path

from ..config import BoardConfig

_DEFAULTS = BoardConfig()


def find_board_files(directory: Path | str, config: BoardConfig = _DEFAULTS) -> list[Path]:
    """Board files directly inside ``directory``, the bare ``.knbn`` first."""
    directory = Path(directory).resolve()
    found = sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.name.endswith(config.extension)
    )
    found.sort(key=lambda p: p.name != config.default_filename)
    return found


def board_filename(name: str | None, ext: bool = True, config: BoardConfig = _DEFAULTS) -> str:
    """File name for a board called ``name``: lower-cased, spaces as dashes."""
    normalized = re.sub(r"\s+", "-", (name or "").lower())
    return normalized + (config.extension if ext else "")


def board_name_from_path(path: Path | str, ext: bool = False, config: BoardConfig = _DEFAULTS) -> str:
    filename = Path(path).name
    if ext or not filename.endswith(config.extension):
        return filename
    return filename[: -len(config.extension)]


def ensure_absolute(path: Path | str, cwd: Path | str | None = None) -> Path:
    path = Path(path)
    if path.is_absolute():
        return path
    return Path(cwd or Path.cwd()) / path


def board_filepath(filename: str, cwd: Path | str | None = None, config: BoardConfig = _DEFAULTS) -> Path:
    """Absolute path for ``filename`` under ``cwd``, extension added if missing."""
    if not filename.endswith(config.extension):
        filename += config.extension
    return Path(cwd or Path.cwd()) / filename
