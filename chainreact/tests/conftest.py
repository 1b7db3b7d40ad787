"""
Pytest fixtures for Chain Reaction tests.
"""

import pytest

from ..engine_core.board import Board, create_board
from ..engine_core.reducer import new_game, start_run
from ..engine_core.state import GameRun
from ..session.results import InMemoryResultSink


class FakeClock:
    """Manually advanced clock for timing-dependent code."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def empty_board() -> Board:
    """Empty 4x4 board."""
    return create_board(4, 4)


@pytest.fixture
def two_player_run() -> GameRun:
    """Fresh 4x4 game between two humans, Alice to move."""
    return new_game(4, 4, ["Alice", "Bob"], game_id="test_game")


@pytest.fixture
def winning_run() -> GameRun:
    """
    4x4 game where Alice wins by playing (0, 0).

    Alice's primed corner bursts into Bob's only cell.
    """
    board = Board.from_layout(4, 4, [
        {"x": 0, "y": 0, "orbs": 1, "owner": 0},
        {"x": 1, "y": 0, "orbs": 1, "owner": 1},
    ])
    return start_run(board, ["Alice", "Bob"], game_id="test_game")


@pytest.fixture
def sink() -> InMemoryResultSink:
    return InMemoryResultSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
