from .files import load_board, load_board_fields, load_raw, save_board
from .paths import board_filename, board_filepath, board_name_from_path, ensure_absolute, find_board_files

__all__ = [
    "load_board",
    "load_board_fields",
    "load_raw",
    "save_board",
    "board_filename",
    "board_filepath",
    "board_name_from_path",
    "ensure_absolute",
    "find_board_files",
]
