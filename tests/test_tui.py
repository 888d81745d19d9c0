"""Tests for the board viewer."""

from __future__ import annotations

import pytest

pytest.importorskip("textual")

from knbn.adapters.files import load_board, save_board
from knbn.board.clock import fixed_clock
from knbn.board.models import Task, TaskDates
from knbn_tui.app import BoardApp, TaskCard, adjacent_column, task_detail, task_line

EARLIER = "2024-01-01T00:00:00.000Z"


def _task(**fields) -> Task:
    return Task(id=7, title="Card", column="todo",
                dates=TaskDates(created=EARLIER, updated=EARLIER), **fields)


@pytest.fixture
def board_file(tmp_path, board):
    path = tmp_path / "test.knbn"
    save_board(path, board, clock=fixed_clock(EARLIER))
    return path


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

class TestTaskLine:
    def test_with_priority(self):
        line = task_line(_task(priority=1))
        assert "#7" in line
        assert "Card" in line
        assert "p1" in line
        assert "yellow" in line

    def test_without_priority(self):
        line = task_line(_task())
        assert "white" in line
        assert "[dim]p" not in line

    def test_untitled(self):
        assert "<untitled>" in task_line(Task(id=1, dates=TaskDates(EARLIER, EARLIER)))


class TestTaskDetail:
    def test_optional_lines(self):
        detail = task_detail(_task(labels=["bug", "ui"], story_points=3, sprint="S1"))
        assert "labels: bug, ui" in detail
        assert "points: 3" in detail
        assert "sprint: S1" in detail
        assert "moved:" not in detail

    def test_moved(self):
        task = Task(id=1, dates=TaskDates(EARLIER, EARLIER, moved=EARLIER))
        assert f"moved: {EARLIER}" in task_detail(task)


class TestAdjacentColumn:
    def test_steps(self, board):
        assert adjacent_column(board, "todo", 1) == "doing"
        assert adjacent_column(board, "doing", -1) == "todo"

    def test_edges(self, board):
        assert adjacent_column(board, "todo", -1) is None
        assert adjacent_column(board, "done", 1) is None

    def test_unknown_column_goes_to_first(self, board):
        assert adjacent_column(board, "gone", 1) == "todo"


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

class TestBoardApp:
    def test_missing_board_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(FileNotFoundError):
            BoardApp()

    @pytest.mark.asyncio
    async def test_renders_columns_and_cards(self, board_file):
        app = BoardApp(board_file)
        async with app.run_test():
            assert app.sub_title == "Test Board"
            assert len(app.query(TaskCard)) == 2

    @pytest.mark.asyncio
    async def test_move_task(self, board_file):
        app = BoardApp(board_file)
        async with app.run_test() as pilot:
            card = app.query(TaskCard).first()
            card.focus()
            await pilot.pause()
            await app.action_move_task(1)
            await pilot.pause()
        moved = card.board_task.id
        assert load_board(board_file).tasks[moved].column == "doing"
