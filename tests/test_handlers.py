"""Tests for file-level board handlers."""

import pytest

from knbn import handlers
from knbn.adapters.files import load_board, save_board
from knbn.board.clock import fixed_clock
from knbn.board.exceptions import ColumnNotEmptyError, DuplicateNameError, NotFoundError

NOW = "2024-06-01T12:00:00.000Z"
EARLIER = "2024-01-01T00:00:00.000Z"


@pytest.fixture
def board_file(tmp_path, board):
    """Board file holding the shared two-task board."""
    path = tmp_path / "test.knbn"
    save_board(path, board, clock=fixed_clock(EARLIER))
    return path


# --- Boards ---


class TestCreateBoardFile:
    def test_seeds_welcome_task(self, tmp_path, clock):
        path = tmp_path / ".knbn"
        board = handlers.create_board_file(path, clock=clock)
        assert board.name == "My Board"
        assert [t.title for t in board.tasks.values()] == [handlers.WELCOME_TASK["title"]]
        assert board.tasks[1].column == "backlog"
        assert board.metadata.next_id == 2
        assert load_board(path) == board

    def test_custom_fields(self, tmp_path, clock):
        board = handlers.create_board_file(
            tmp_path / "team.knbn", name="Team", columns=["a", "b"], clock=clock
        )
        assert board.name == "Team"
        assert board.tasks[1].column == "a"

    def test_existing_file(self, board_file, clock):
        with pytest.raises(FileExistsError):
            handlers.create_board_file(board_file, clock=clock)


# --- Tasks ---


class TestTaskHandlers:
    def test_create_persists(self, board_file, clock):
        board, task = handlers.create_task(board_file, title="Third", clock=clock)
        assert task.id == 3
        assert handlers.get_task(board_file, 3) == task
        assert load_board(board_file).dates.saved == NOW

    def test_update(self, board_file, clock):
        handlers.update_task(board_file, 2, column="done", clock=clock)
        task = handlers.get_task(board_file, 2)
        assert task.column == "done"
        assert task.dates.moved == NOW

    def test_update_missing_leaves_file(self, board_file, clock):
        before = board_file.read_text()
        with pytest.raises(NotFoundError):
            handlers.update_task(board_file, 9, title="x", clock=clock)
        assert board_file.read_text() == before

    def test_batch(self, board_file, clock):
        _, updated = handlers.update_tasks_batch(
            board_file, {1: {"priority": 3}, 2: {"priority": 1}}, clock=clock
        )
        assert set(updated) == {1, 2}
        assert [t.id for t in handlers.find_tasks(board_file, "")] == [2, 1]

    def test_find(self, board_file):
        assert [t.id for t in handlers.find_tasks(board_file, "docs")] == [2]
        assert handlers.find_tasks(board_file, "bug", keys=["description"]) == []

    def test_remove(self, board_file, clock):
        handlers.remove_task(board_file, 1, clock=clock)
        assert handlers.get_task(board_file, 1) is None

    def test_remove_missing_does_not_write(self, board_file, clock):
        before = board_file.read_text()
        handlers.remove_task(board_file, 9, clock=clock)
        assert board_file.read_text() == before


# --- Columns ---


class TestColumnHandlers:
    def test_create_and_list(self, board_file, clock):
        handlers.create_column(board_file, "review", 1, clock=clock)
        assert handlers.column_names(board_file) == ["todo", "review", "doing", "done"]
        assert [c.name for c in handlers.list_columns(board_file)][1] == "review"

    def test_create_duplicate(self, board_file, clock):
        with pytest.raises(DuplicateNameError):
            handlers.create_column(board_file, "todo", clock=clock)

    def test_update(self, board_file, clock):
        handlers.update_column(board_file, "done", name="shipped", clock=clock)
        assert handlers.get_column(board_file, "shipped") is not None

    def test_remove_non_empty(self, board_file, clock):
        with pytest.raises(ColumnNotEmptyError):
            handlers.remove_column(board_file, "todo", clock=clock)

    def test_remove_missing_does_not_write(self, board_file, clock):
        before = board_file.read_text()
        handlers.remove_column(board_file, "review", clock=clock)
        assert board_file.read_text() == before

    def test_move(self, board_file, clock):
        handlers.move_column(board_file, "done", 0, clock=clock)
        assert handlers.column_names(board_file) == ["done", "todo", "doing"]

    def test_tasks_in_column(self, board_file):
        assert [t.id for t in handlers.tasks_in_column(board_file, "todo")] == [1, 2]
        assert handlers.column_task_count(board_file, "todo") == 2


# --- Labels ---


class TestLabelHandlers:
    def test_add_update_find(self, board_file, clock):
        handlers.add_label(board_file, "bug", "#f00", clock=clock)
        handlers.update_label(board_file, "BUG", color="#0f0", clock=clock)
        assert handlers.get_label(board_file, "bug").color == "#0f0"
        assert [l.name for l in handlers.find_labels(board_file, "#0F0")] == ["bug"]

    def test_remove(self, board_file, clock):
        handlers.add_label(board_file, "bug", clock=clock)
        handlers.remove_label(board_file, "bug", clock=clock)
        assert handlers.list_labels(board_file) == []


# --- Sprints ---


class TestSprintHandlers:
    def test_add_stamps_board(self, board_file, clock):
        sprint = handlers.add_sprint(board_file, "Sprint 1", capacity=10, clock=clock)
        assert sprint.dates.starts == NOW
        board = load_board(board_file)
        assert board.dates.updated == NOW
        assert handlers.get_sprint(board_file, "sprint 1") == sprint

    def test_update_returns_sprint(self, board_file, clock):
        handlers.add_sprint(board_file, "Sprint 1", clock=clock)
        sprint = handlers.update_sprint(
            board_file, "Sprint 1", name="Sprint A", dates={"ends": "2024-06-15T00:00:00.000Z"},
            clock=clock,
        )
        assert sprint.name == "Sprint A"
        assert sprint.dates.starts == NOW
        assert sprint.dates.ends == "2024-06-15T00:00:00.000Z"

    def test_get_missing(self, board_file):
        with pytest.raises(NotFoundError):
            handlers.get_sprint(board_file, "nope")

    def test_remove(self, board_file, clock):
        handlers.add_sprint(board_file, "Sprint 1", clock=clock)
        handlers.remove_sprint(board_file, "sprint 1", clock=clock)
        assert handlers.list_sprints(board_file) == []

    def test_classification(self, board_file, clock):
        handlers.add_sprint(board_file, "now", dates={"starts": EARLIER}, clock=clock)
        handlers.add_sprint(board_file, "later", dates={"starts": "2025-01-01T00:00:00.000Z"},
                            clock=clock)
        handlers.add_sprint(
            board_file, "done", dates={"starts": EARLIER, "ends": "2024-02-01T00:00:00.000Z"},
            clock=clock,
        )
        assert [s.name for s in handlers.active_sprints(board_file, clock=clock)] == ["now"]
        assert [s.name for s in handlers.upcoming_sprints(board_file, clock=clock)] == ["later"]
        assert [s.name for s in handlers.completed_sprints(board_file, clock=clock)] == ["done"]
