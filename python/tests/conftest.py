"""Shared pytest fixtures for the Wheel Checkers test suite."""

from typing import Callable, Mapping, Optional, Union

import pytest

from wheel_checkers.game.board import SIDE_A, Piece, Side, board_from
from wheel_checkers.game.rules import GameState, initial_state


Layout = Mapping[str, Union[Piece, Side]]


@pytest.fixture
def opening() -> GameState:
    return initial_state()


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    """Build a position from ``{"O0": "A", "C": Piece("B", king=True)}``."""

    def _make(layout: Layout, turn: Side = SIDE_A, must_continue_from: Optional[str] = None) -> GameState:
        return GameState(board=board_from(layout), turn=turn, must_continue_from=must_continue_from)

    return _make