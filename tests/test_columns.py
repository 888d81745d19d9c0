"""Tests for the column manager."""

import pytest

from knbn.board.clock import fixed_clock
from knbn.board.columns import (
    add_column,
    column_names,
    column_task_count,
    create_column,
    get_column,
    list_columns,
    move_column,
    remove_column,
    tasks_in_column,
    update_column,
)
from knbn.board.exceptions import (
    ColumnNotEmptyError,
    DuplicateNameError,
    InvalidPositionError,
    NotFoundError,
)
from knbn.board.tasks import create_task, update_task

NOW = "2024-06-01T12:00:00.000Z"
EARLIER = "2024-01-01T00:00:00.000Z"


class TestReads:
    def test_names_in_order(self, empty_board):
        assert column_names(empty_board) == ["todo", "doing", "done"]

    def test_list_is_a_copy(self, empty_board):
        columns = list_columns(empty_board)
        columns.pop()
        assert len(empty_board.columns) == 3

    def test_get_is_case_sensitive(self, empty_board):
        assert get_column(empty_board, "todo").name == "todo"
        assert get_column(empty_board, "TODO") is None

    def test_tasks_in_column_sorted(self, board):
        assert [t.id for t in tasks_in_column(board, "todo")] == [1, 2]
        assert tasks_in_column(board, "done") == []

    def test_task_count(self, board, clock):
        board = update_task(board, 2, column="doing", clock=clock)
        assert column_task_count(board, "todo") == 1
        assert column_task_count(board, "doing") == 1
        assert column_task_count(board, "missing") == 0


class TestAddColumn:
    def test_append(self, empty_board, clock):
        board = add_column(empty_board, create_column("review"), clock=clock)
        assert column_names(board) == ["todo", "doing", "done", "review"]
        assert board.dates.updated == NOW

    def test_insert_at_position(self, empty_board, clock):
        board = add_column(empty_board, create_column("review"), 2, clock=clock)
        assert column_names(board) == ["todo", "doing", "review", "done"]

    def test_insert_at_end_position(self, empty_board, clock):
        board = add_column(empty_board, create_column("review"), 3, clock=clock)
        assert column_names(board)[-1] == "review"

    @pytest.mark.parametrize("position", [-1, 10])
    def test_out_of_range_appends(self, empty_board, clock, position):
        board = add_column(empty_board, create_column("review"), position, clock=clock)
        assert column_names(board) == ["todo", "doing", "done", "review"]

    def test_duplicate(self, empty_board, clock):
        with pytest.raises(DuplicateNameError, match='Column with name "todo" already exists'):
            add_column(empty_board, create_column("todo"), clock=clock)

    def test_original_unchanged(self, empty_board, clock):
        add_column(empty_board, create_column("review"), clock=clock)
        assert column_names(empty_board) == ["todo", "doing", "done"]


class TestUpdateColumn:
    def test_rename(self, empty_board, clock):
        board = update_column(empty_board, "doing", name="in progress", clock=clock)
        assert column_names(board) == ["todo", "in progress", "done"]
        assert board.dates.updated == NOW

    def test_without_name_keeps_name(self, empty_board, clock):
        board = update_column(empty_board, "doing", clock=clock)
        assert column_names(board) == ["todo", "doing", "done"]
        assert board.dates.updated == NOW

    def test_missing(self, empty_board, clock):
        with pytest.raises(NotFoundError, match='Column with name "review" not found'):
            update_column(empty_board, "review", name="x", clock=clock)

    def test_unknown_field(self, empty_board, clock):
        with pytest.raises(ValueError):
            update_column(empty_board, "todo", colour="red", clock=clock)

    def test_rename_to_taken_name(self, empty_board, clock):
        with pytest.raises(DuplicateNameError, match='Column with name "todo"'):
            update_column(empty_board, "doing", name="todo", clock=clock)

    def test_rename_to_own_name(self, empty_board, clock):
        board = update_column(empty_board, "doing", name="doing", clock=clock)
        assert column_names(board) == ["todo", "doing", "done"]


class TestRemoveColumn:
    def test_remove_empty_column(self, board, clock):
        updated = remove_column(board, "done", clock=clock)
        assert column_names(updated) == ["todo", "doing"]
        assert updated.dates.updated == NOW

    def test_missing_is_noop(self, board, clock):
        updated = remove_column(board, "review", clock=clock)
        assert updated == board
        assert updated.dates.updated == board.dates.updated

    def test_column_with_task_reports_count(self, empty_board, clock):
        board, _ = create_task(empty_board, title="Task", priority=1, clock=clock)
        with pytest.raises(ColumnNotEmptyError) as exc:
            remove_column(board, "todo", clock=clock)
        assert exc.value.count == 1
        assert "1 task(s)" in str(exc.value)
        assert column_names(board) == ["todo", "doing", "done"]

    def test_count_covers_every_task(self, board, clock):
        with pytest.raises(ColumnNotEmptyError) as exc:
            remove_column(board, "todo", clock=clock)
        assert exc.value.count == 2


class TestMoveColumn:
    def test_move_to_front(self, empty_board, clock):
        board = move_column(empty_board, "done", 0, clock=clock)
        assert column_names(board) == ["done", "todo", "doing"]
        assert board.dates.updated == NOW

    def test_move_to_end(self, empty_board, clock):
        board = move_column(empty_board, "todo", 2, clock=clock)
        assert column_names(board) == ["doing", "done", "todo"]

    def test_same_position_still_stamps(self, empty_board, clock):
        board = move_column(empty_board, "doing", 1, clock=clock)
        assert column_names(board) == column_names(empty_board)
        assert board.dates.updated == NOW
        assert empty_board.dates.updated == EARLIER

    def test_missing(self, empty_board, clock):
        with pytest.raises(NotFoundError):
            move_column(empty_board, "review", 0, clock=clock)

    @pytest.mark.parametrize("position", [-1, 3])
    def test_invalid_position(self, empty_board, clock, position):
        with pytest.raises(InvalidPositionError, match="Must be between 0 and 2"):
            move_column(empty_board, "todo", position, clock=clock)

    def test_position_error_is_index_error(self, empty_board):
        with pytest.raises(IndexError):
            move_column(empty_board, "todo", 5, clock=fixed_clock(NOW))
