from .clock import Clock, fixed_clock, parse_timestamp, system_clock
from .exceptions import (
    BoardError,
    ColumnNotEmptyError,
    DuplicateNameError,
    InvalidDocumentError,
    InvalidPositionError,
    LoadFailureError,
    MissingVersionError,
    NoMigrationPathError,
    NotFoundError,
    SaveFailureError,
)
from .migrations import BOARD_VERSIONS, migrate_board
from .models import (
    CURRENT_VERSION,
    Board,
    BoardDates,
    BoardMetadata,
    Column,
    Label,
    Sprint,
    SprintDates,
    Task,
    TaskDates,
)

__all__ = [
    "Board",
    "BoardDates",
    "BoardMetadata",
    "Column",
    "Label",
    "Sprint",
    "SprintDates",
    "Task",
    "TaskDates",
    "CURRENT_VERSION",
    "BOARD_VERSIONS",
    "migrate_board",
    "Clock",
    "fixed_clock",
    "parse_timestamp",
    "system_clock",
    "BoardError",
    "ColumnNotEmptyError",
    "DuplicateNameError",
    "InvalidDocumentError",
    "InvalidPositionError",
    "LoadFailureError",
    "MissingVersionError",
    "NoMigrationPathError",
    "NotFoundError",
    "SaveFailureError",
]
