"""Shared test configuration."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from knbn.board.board import create_board
from knbn.board.clock import fixed_clock, format_timestamp
from knbn.board.tasks import create_task

NOW = "2024-06-01T12:00:00.000Z"
EARLIER = "2024-01-01T00:00:00.000Z"


@pytest.fixture
def clock():
    """Clock frozen at NOW."""
    return fixed_clock(NOW)


@pytest.fixture
def ticking_clock():
    """Clock that moves forward one minute per call, starting at NOW."""
    start = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    counter = itertools.count()

    def _clock() -> str:
        return format_timestamp(start + timedelta(minutes=next(counter)))

    return _clock


@pytest.fixture
def empty_board():
    return create_board(
        "Test Board",
        description="Board for tests",
        columns=["todo", "doing", "done"],
        clock=fixed_clock(EARLIER),
    )


@pytest.fixture
def board(empty_board):
    """Board with two tasks in todo: #1 has priority 1, #2 has none."""
    early = fixed_clock(EARLIER)
    b, _ = create_task(empty_board, title="Fix login bug", priority=1,
                       labels=["bug", "urgent"], sprint="Sprint 1", clock=early)
    b, _ = create_task(b, title="Write docs", description="User guide", clock=early)
    return b
