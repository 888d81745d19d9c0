"""knbn: a single-file, human-editable kanban board."""

__version__ = "0.2.0"
