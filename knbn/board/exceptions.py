"""Board exception types."""


class BoardError(Exception):
    """Base class for every error raised by the board core."""


class InvalidDocumentError(BoardError):
    """Raised when a raw document is not a mapping, or is empty."""

    def __init__(self, reason: str = "Invalid board data for migration"):
        self.reason = reason
        super().__init__(reason)


class MissingVersionError(BoardError):
    """Raised when a raw document carries no metadata.version."""

    def __init__(self):
        super().__init__("Missing version information in board data")


class NoMigrationPathError(BoardError):
    """Raised when no registered transform leads from one version to the next."""

    def __init__(self, from_version: str, to_version: str | None = None):
        self.from_version = from_version
        self.to_version = to_version
        if to_version is None:
            message = f"No migration path found for version: {from_version}"
        else:
            message = f"No migration found for version: {from_version} -> {to_version}"
        super().__init__(message)


class DuplicateNameError(BoardError):
    """Raised when a column, label or sprint name is already taken."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f'{kind.capitalize()} with name "{name}" already exists')


class NotFoundError(BoardError, LookupError):
    """Raised when a column, label, sprint or task does not exist."""

    def __init__(self, kind: str, key):
        self.kind = kind
        self.key = key
        if kind == "task":
            message = f"Task with ID {key} not found on the board"
        else:
            message = f'{kind.capitalize()} with name "{key}" not found'
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError-style quoting from LookupError subclasses is not wanted here
        return self.args[0]


class ColumnNotEmptyError(BoardError):
    """Raised when removing a column that tasks still reference."""

    def __init__(self, column: str, count: int):
        self.column = column
        self.count = count
        super().__init__(
            f'Cannot remove column "{column}" because it contains {count} task(s)'
        )


class InvalidPositionError(BoardError, IndexError):
    def __init__(self, position: int, length: int):
        self.position = position
        self.length = length
        super().__init__(
            f"Invalid position {position}. Must be between 0 and {length - 1}"
        )


class LoadFailureError(BoardError):
    """Raised when a board file cannot be read or decoded."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load board file {path}: {reason}")


class SaveFailureError(BoardError):
    """Raised when a board file cannot be encoded or written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save board file {path}: {reason}")
