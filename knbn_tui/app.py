"""Board TUI: interactive terminal view of a single knbn board file."""

from __future__ import annotations

from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from knbn import handlers
from knbn.adapters.files import load_board
from knbn.adapters.paths import find_board_files
from knbn.board.columns import tasks_in_column
from knbn.board.exceptions import BoardError
from knbn.board.models import Board, Task

PRIORITY_COLORS = ["red", "yellow", "green", "cyan"]
NO_PRIORITY_COLOR = "white"


def _priority_color(priority: float | None) -> str:
    if priority is None:
        return NO_PRIORITY_COLOR
    index = min(max(int(priority), 0), len(PRIORITY_COLORS) - 1)
    return PRIORITY_COLORS[index]


def task_line(task: Task) -> str:
    """One-line card markup for a task."""
    color = _priority_color(task.priority)
    badge = f" [dim]p{task.priority:g}[/]" if task.priority is not None else ""
    return f"[bold {color}]#{task.id}[/] {task.title or '<untitled>'}{badge}"


def task_detail(task: Task) -> str:
    lines = [f"[bold]#{task.id} {task.title}[/]", ""]
    if task.description:
        lines += [task.description, ""]
    lines.append(f"column: {task.column}")
    if task.sprint:
        lines.append(f"sprint: {task.sprint}")
    if task.labels:
        lines.append(f"labels: {', '.join(task.labels)}")
    if task.story_points is not None:
        lines.append(f"points: {task.story_points:g}")
    if task.priority is not None:
        lines.append(f"priority: {task.priority:g}")
    lines.append(f"created: {task.dates.created}")
    lines.append(f"updated: {task.dates.updated}")
    if task.dates.moved:
        lines.append(f"moved: {task.dates.moved}")
    return "\n".join(lines)


def adjacent_column(board: Board, current: str, step: int) -> str | None:
    """Name of the column ``step`` places from ``current``, or None at the edges."""
    names = [c.name for c in board.columns]
    if current not in names:
        return names[0] if names else None
    target = names.index(current) + step
    if 0 <= target < len(names):
        return names[target]
    return None


class TaskSelected(Message):
    def __init__(self, task: Task) -> None:
        super().__init__()
        self.board_task = task


class TaskCard(Static):
    can_focus = True

    def __init__(self, task: Task, col_index: int, **kwargs) -> None:
        super().__init__(task_line(task), **kwargs)
        self.board_task = task
        self.col_index = col_index

    def on_focus(self) -> None:
        self.post_message(TaskSelected(self.board_task))


class BoardColumn(VerticalScroll):
    def __init__(self, name: str, tasks: list[Task], col_index: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.column_name = name
        self.column_tasks = tasks
        self.col_index = col_index

    def compose(self) -> ComposeResult:
        yield Static(
            f"[bold underline]{self.column_name}[/] [dim]({len(self.column_tasks)})[/]",
            classes="column-header",
        )
        if not self.column_tasks:
            yield Static("[dim]empty[/]", classes="empty-label")
            return
        for task in self.column_tasks:
            yield TaskCard(task, col_index=self.col_index, classes="card")


class DetailPanel(VerticalScroll):
    content_text: reactive[str] = reactive("")

    def compose(self) -> ComposeResult:
        yield Static("[dim]Select a task to view details[/]", id="detail-content")

    def watch_content_text(self, value: str) -> None:
        if not value:
            return
        self.query_one("#detail-content", Static).update(value)


class BoardApp(App):
    TITLE = "knbn"

    CSS = """
    #main-layout { height: 1fr; width: 100%; }
    #board { width: 1fr; height: 100%; }

    BoardColumn {
        width: 1fr;
        height: 100%;
        border-right: solid $surface-lighten-2;
    }

    .column-header {
        text-align: center;
        background: $surface-lighten-1;
        margin-bottom: 1;
        height: 1;
    }

    .empty-label { text-align: center; color: $text-muted; }
    .card { padding: 0 1; }
    TaskCard:focus { background: $surface-lighten-1; }

    #detail-panel {
        width: 50;
        height: 100%;
        border-left: solid $primary;
        padding: 1 1;
        display: none;
    }

    #detail-panel.visible { display: block; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("left_square_bracket", "move_task(-1)", "< Move"),
        Binding("right_square_bracket", "move_task(1)", "Move >"),
        Binding("d", "toggle_detail", "Detail"),
    ]

    def __init__(self, board_path: Path | None = None) -> None:
        super().__init__()
        self.board_path = board_path or self._find_board_file()
        self.board: Board | None = None

    def _find_board_file(self) -> Path:
        found = find_board_files(Path.cwd())
        if not found:
            raise FileNotFoundError("No board file found in the current directory")
        return found[0]

    def _columns(self) -> list[BoardColumn]:
        self.board = load_board(self.board_path)
        self.sub_title = self.board.name
        return [
            BoardColumn(c.name, tasks_in_column(self.board, c.name), col_index=i, id=f"col-{i}")
            for i, c in enumerate(self.board.columns)
        ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Horizontal(id="board"):
                yield from self._columns()
            yield DetailPanel(id="detail-panel")
        yield Footer()

    @on(TaskSelected)
    def _on_task_selected(self, event: TaskSelected) -> None:
        self.query_one("#detail-panel", DetailPanel).content_text = task_detail(event.board_task)

    async def action_refresh(self) -> None:
        board = self.query_one("#board", Horizontal)
        for child in list(board.children):
            await child.remove()
        for column in self._columns():
            await board.mount(column)

    async def action_move_task(self, step: int) -> None:
        focused = self.focused
        if not isinstance(focused, TaskCard) or self.board is None:
            self.notify("Select a task first", severity="warning")
            return

        task = focused.board_task
        target = adjacent_column(self.board, task.column, step)
        if target is None:
            return
        try:
            handlers.update_task(self.board_path, task.id, column=target)
        except BoardError as e:
            self.notify(str(e), severity="error")
            return
        await self.action_refresh()
        self.notify(f"#{task.id} moved to {target}")

    def action_toggle_detail(self) -> None:
        self.query_one("#detail-panel", DetailPanel).toggle_class("visible")


def run_board() -> None:
    """Entry point for the knbn-board script."""
    BoardApp().run()
