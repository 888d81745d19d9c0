"""CLI entry point for knbn boards.

Usage:
  knbn init [NAME] [--description TEXT] [--column NAME ...]
  knbn boards
  knbn task add TITLE [--description TEXT] [--label NAME ...] [--priority N] [--points N] [--sprint NAME]
  knbn task update ID [--title TEXT] [--description TEXT] [--column NAME] ...
  knbn task move ID COLUMN
  knbn task show ID
  knbn task list [--column NAME]
  knbn task search QUERY [--key KEY ...]
  knbn column {add,update,remove,move,list} ...
  knbn label {add,update,remove,list,find} ...
  knbn sprint {add,update,remove,list} ...
  knbn view

Every command except ``init`` and ``boards`` accepts ``--file PATH``;
without it the first board file in the current directory is used.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import handlers
from .adapters.paths import board_filename, ensure_absolute, find_board_files
from .board.exceptions import BoardError, NotFoundError
from .board.models import Sprint, Task
from .config import BoardConfig


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [knbn] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _resolve_board(args) -> Path:
    if getattr(args, "file", None):
        return ensure_absolute(args.file)
    found = find_board_files(Path.cwd())
    if not found:
        raise FileNotFoundError("No board file found in the current directory. Run `knbn init` first.")
    return found[0]


def _format_task(task: Task) -> str:
    priority = f" [p{task.priority:g}]" if task.priority is not None else ""
    labels = f" ({', '.join(task.labels)})" if task.labels else ""
    return f"#{task.id} {task.title}{priority}{labels} <{task.column}>"


def _format_sprint(sprint: Sprint) -> str:
    ends = sprint.dates.ends or "open"
    return f"{sprint.name}: {sprint.dates.starts} -> {ends}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="knbn", description="Single-file kanban boards")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    file_parent = argparse.ArgumentParser(add_help=False)
    file_parent.add_argument("--file", "-f", default=None, help="Board file (default: first in cwd)")

    init_parser = subparsers.add_parser("init", help="Create a new board file")
    init_parser.add_argument("name", nargs="?", default=None, help="Board name")
    init_parser.add_argument("--description", default=None)
    init_parser.add_argument("--column", action="append", dest="columns", help="Column name (repeatable)")
    init_parser.add_argument("--file", "-f", default=None, help="Board file to create")

    subparsers.add_parser("boards", help="List board files in the current directory")
    subparsers.add_parser("view", parents=[file_parent], help="Open the interactive board viewer")

    # task
    task_parser = subparsers.add_parser("task", help="Manage tasks")
    task_sub = task_parser.add_subparsers(dest="action")

    add = task_sub.add_parser("add", parents=[file_parent], help="Create a task")
    add.add_argument("title")
    add.add_argument("--description", default="")
    add.add_argument("--label", action="append", dest="labels")
    add.add_argument("--priority", type=float, default=None)
    add.add_argument("--points", type=float, default=None, dest="story_points")
    add.add_argument("--sprint", default=None)

    upd = task_sub.add_parser("update", parents=[file_parent], help="Update a task")
    upd.add_argument("id", type=int)
    upd.add_argument("--title", default=None)
    upd.add_argument("--description", default=None)
    upd.add_argument("--column", default=None)
    upd.add_argument("--label", action="append", dest="labels")
    upd.add_argument("--priority", type=float, default=None)
    upd.add_argument("--points", type=float, default=None, dest="story_points")
    upd.add_argument("--sprint", default=None)

    move = task_sub.add_parser("move", parents=[file_parent], help="Move a task to a column")
    move.add_argument("id", type=int)
    move.add_argument("column")

    show = task_sub.add_parser("show", parents=[file_parent], help="Show one task")
    show.add_argument("id", type=int)

    lst = task_sub.add_parser("list", parents=[file_parent], help="List tasks")
    lst.add_argument("--column", default=None)

    search = task_sub.add_parser("search", parents=[file_parent], help="Search tasks")
    search.add_argument("query")
    search.add_argument("--key", action="append", dest="keys",
                        choices=["title", "description", "sprint", "labels"])

    # column
    column_parser = subparsers.add_parser("column", help="Manage columns")
    column_sub = column_parser.add_subparsers(dest="action")
    c_add = column_sub.add_parser("add", parents=[file_parent])
    c_add.add_argument("name")
    c_add.add_argument("--position", type=int, default=None)
    c_upd = column_sub.add_parser("update", parents=[file_parent])
    c_upd.add_argument("name")
    c_upd.add_argument("--name", dest="new_name", default=None)
    c_rm = column_sub.add_parser("remove", parents=[file_parent])
    c_rm.add_argument("name")
    c_mv = column_sub.add_parser("move", parents=[file_parent])
    c_mv.add_argument("name")
    c_mv.add_argument("position", type=int)
    column_sub.add_parser("list", parents=[file_parent])

    # label
    label_parser = subparsers.add_parser("label", help="Manage labels")
    label_sub = label_parser.add_subparsers(dest="action")
    l_add = label_sub.add_parser("add", parents=[file_parent])
    l_add.add_argument("name")
    l_add.add_argument("--color", default=None)
    l_upd = label_sub.add_parser("update", parents=[file_parent])
    l_upd.add_argument("name")
    l_upd.add_argument("--name", dest="new_name", default=None)
    l_upd.add_argument("--color", default=None)
    l_rm = label_sub.add_parser("remove", parents=[file_parent])
    l_rm.add_argument("name")
    label_sub.add_parser("list", parents=[file_parent])
    l_find = label_sub.add_parser("find", parents=[file_parent])
    l_find.add_argument("query")

    # sprint
    sprint_parser = subparsers.add_parser("sprint", help="Manage sprints")
    sprint_sub = sprint_parser.add_subparsers(dest="action")
    s_add = sprint_sub.add_parser("add", parents=[file_parent])
    s_add.add_argument("name")
    s_add.add_argument("--description", default=None)
    s_add.add_argument("--capacity", type=int, default=None)
    s_add.add_argument("--starts", default=None)
    s_add.add_argument("--ends", default=None)
    s_upd = sprint_sub.add_parser("update", parents=[file_parent])
    s_upd.add_argument("name")
    s_upd.add_argument("--name", dest="new_name", default=None)
    s_upd.add_argument("--description", default=None)
    s_upd.add_argument("--capacity", type=int, default=None)
    s_upd.add_argument("--starts", default=None)
    s_upd.add_argument("--ends", default=None)
    s_rm = sprint_sub.add_parser("remove", parents=[file_parent])
    s_rm.add_argument("name")
    s_list = sprint_sub.add_parser("list", parents=[file_parent])
    status = s_list.add_mutually_exclusive_group()
    status.add_argument("--active", action="store_true")
    status.add_argument("--upcoming", action="store_true")
    status.add_argument("--completed", action="store_true")

    return parser


def _given(**fields) -> dict:
    return {k: v for k, v in fields.items() if v is not None}


def _init_command(args) -> None:
    config = BoardConfig()
    if args.file:
        path = ensure_absolute(args.file)
    elif args.name:
        path = ensure_absolute(board_filename(args.name))
    else:
        path = ensure_absolute(config.default_filename)
    board = handlers.create_board_file(
        path,
        config=config,
        **_given(name=args.name, description=args.description, columns=args.columns),
    )
    print(f"Created board '{board.name}' at {path}")


def _boards_command(args) -> None:
    for path in find_board_files(Path.cwd()):
        print(path)


def _view_command(args) -> None:
    from knbn_tui.app import BoardApp

    BoardApp(_resolve_board(args)).run()


def _task_command(args) -> None:
    path = _resolve_board(args)
    if args.action == "add":
        _, task = handlers.create_task(
            path,
            title=args.title,
            description=args.description,
            **_given(labels=args.labels, priority=args.priority,
                     story_points=args.story_points, sprint=args.sprint),
        )
        print(f"Created {_format_task(task)}")
    elif args.action == "update":
        fields = _given(title=args.title, description=args.description, column=args.column,
                        labels=args.labels, priority=args.priority,
                        story_points=args.story_points, sprint=args.sprint)
        board = handlers.update_task(path, args.id, **fields)
        print(f"Updated {_format_task(board.tasks[args.id])}")
    elif args.action == "move":
        board = handlers.update_task(path, args.id, column=args.column)
        print(f"Moved {_format_task(board.tasks[args.id])}")
    elif args.action == "show":
        task = handlers.get_task(path, args.id)
        if task is None:
            raise NotFoundError("task", args.id)
        print(_format_task(task))
        if task.description:
            print(f"  {task.description}")
        if task.sprint:
            print(f"  sprint: {task.sprint}")
        print(f"  created: {task.dates.created}  updated: {task.dates.updated}")
    elif args.action == "list":
        if args.column:
            found = handlers.tasks_in_column(path, args.column)
        else:
            found = handlers.find_tasks(path, "")
        for task in found:
            print(_format_task(task))
    elif args.action == "search":
        for task in handlers.find_tasks(path, args.query, args.keys):
            print(_format_task(task))
    else:
        raise SystemExit("task: choose an action (add, update, move, show, list, search)")


def _column_command(args) -> None:
    path = _resolve_board(args)
    if args.action == "add":
        handlers.create_column(path, args.name, args.position)
        print(f"Added column '{args.name}'")
    elif args.action == "update":
        handlers.update_column(path, args.name, **_given(name=args.new_name))
        print(f"Updated column '{args.name}'")
    elif args.action == "remove":
        handlers.remove_column(path, args.name)
        print(f"Removed column '{args.name}'")
    elif args.action == "move":
        handlers.move_column(path, args.name, args.position)
        print(f"Moved column '{args.name}' to position {args.position}")
    elif args.action == "list":
        for name in handlers.column_names(path):
            print(f"{name} ({handlers.column_task_count(path, name)})")
    else:
        raise SystemExit("column: choose an action (add, update, remove, move, list)")


def _label_command(args) -> None:
    path = _resolve_board(args)
    if args.action == "add":
        handlers.add_label(path, args.name, args.color)
        print(f"Added label '{args.name}'")
    elif args.action == "update":
        handlers.update_label(path, args.name, **_given(name=args.new_name, color=args.color))
        print(f"Updated label '{args.name}'")
    elif args.action == "remove":
        handlers.remove_label(path, args.name)
        print(f"Removed label '{args.name}'")
    elif args.action in ("list", "find"):
        found = handlers.list_labels(path) if args.action == "list" else handlers.find_labels(path, args.query)
        for label in found:
            color = f" {label.color}" if label.color else ""
            print(f"{label.name}{color}")
    else:
        raise SystemExit("label: choose an action (add, update, remove, list, find)")


def _sprint_command(args) -> None:
    path = _resolve_board(args)
    if args.action == "add":
        sprint = handlers.add_sprint(
            path, args.name,
            **_given(description=args.description, capacity=args.capacity,
                     dates=_given(starts=args.starts, ends=args.ends) or None),
        )
        print(f"Added sprint {_format_sprint(sprint)}")
    elif args.action == "update":
        sprint = handlers.update_sprint(
            path, args.name,
            **_given(name=args.new_name, description=args.description, capacity=args.capacity,
                     dates=_given(starts=args.starts, ends=args.ends) or None),
        )
        print(f"Updated sprint {_format_sprint(sprint)}")
    elif args.action == "remove":
        handlers.remove_sprint(path, args.name)
        print(f"Removed sprint '{args.name}'")
    elif args.action == "list":
        if args.active:
            found = handlers.active_sprints(path)
        elif args.upcoming:
            found = handlers.upcoming_sprints(path)
        elif args.completed:
            found = handlers.completed_sprints(path)
        else:
            found = handlers.list_sprints(path)
        for sprint in found:
            print(_format_sprint(sprint))
    else:
        raise SystemExit("sprint: choose an action (add, update, remove, list)")


COMMANDS = {
    "init": _init_command,
    "boards": _boards_command,
    "view": _view_command,
    "task": _task_command,
    "column": _column_command,
    "label": _label_command,
    "sprint": _sprint_command,
}


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        COMMANDS[args.command](args)
    except (BoardError, FileExistsError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
