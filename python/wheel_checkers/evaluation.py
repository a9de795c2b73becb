"""Static position scoring used at the leaves of the search."""

from __future__ import annotations

from dataclasses import dataclass

from .game.board import Jump, Side
from .game.rules import GameState, legal_moves
from .topology import CENTER


Score = float


@dataclass(frozen=True)
class Weights:
    man: float = 1.0
    king: float = 3.0
    capture: float = 0.5
    center: float = 0.3


DEFAULT_WEIGHTS = Weights()


def material(state: GameState, side: Side, weights: Weights = DEFAULT_WEIGHTS) -> Score:
    score = 0.0
    for _, piece in state.board.items():
        value = weights.king if piece.king else weights.man
        score += value if piece.owner == side else -value
    return score


def evaluate(state: GameState, side: Side, weights: Weights = DEFAULT_WEIGHTS) -> Score:
    # Material plus capture and center bonuses for ``side``
    score = material(state, side, weights)

    captures = sum(
        1
        for move in legal_moves(state)
        if isinstance(move, Jump) and state.board.occupant(move.origin) == side
    )
    score += captures * weights.capture

    if state.board.occupant(CENTER) == side:
        score += weights.center

    return score
