"""Turn enforcement, capture chaining and the timeout penalty.

Everything here works on immutable :class:`GameState` values: each function
returns a new state (or the same one, when nothing may change) and never
touches its argument.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from ..topology import CENTER, NodeId, is_node, node_order
from .board import SIDE_A, SIDE_B, SIDES, Board, Jump, Move, Side, Step, opponent


LOG = logging.getLogger("wheel_checkers.rules")


@dataclass(frozen=True)
class GameState:
    board: Board = field(default_factory=Board.initial)
    turn: Side = SIDE_A
    history: Tuple[Move, ...] = ()
    must_continue_from: Optional[NodeId] = None

    def remaining(self, side: Side) -> int:
        return self.board.remaining(side)


@dataclass(frozen=True)
class MoveResult:
    state: GameState
    legal: bool
    captured: Optional[NodeId] = None
    must_continue: bool = False
    winner: Optional[Side] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class TimeoutResult:
    state: GameState
    penalized: Optional[NodeId] = None


def initial_state() -> GameState:
    return GameState(board=Board.initial(), turn=SIDE_A)


# ----------------------------------------------------------------------
# Move generation over a whole state
# ----------------------------------------------------------------------
def legal_steps(state: GameState, side: Optional[Side] = None) -> List[Step]:
    side = state.turn if side is None else side
    moves: List[Step] = []
    for node in state.board.nodes_of(side):
        moves.extend(state.board.steps_from(node))
    return moves


def legal_jumps_from(state: GameState, side: Side, node: NodeId) -> List[Jump]:
    if state.board.occupant(node) != side:
        return []
    return state.board.jumps_from(node)


def legal_jumps_all(state: GameState, side: Optional[Side] = None) -> List[Jump]:
    side = state.turn if side is None else side
    moves: List[Jump] = []
    for node in state.board.nodes_of(side):
        moves.extend(state.board.jumps_from(node))
    return moves


def legal_moves(state: GameState) -> List[Move]:
    if any(state.board.remaining(side) == 0 for side in SIDES):
        return []
    if state.must_continue_from is not None:
        return list(legal_jumps_from(state, state.turn, state.must_continue_from))

    jumps = legal_jumps_all(state, state.turn)
    if jumps:
        return list(jumps)
    return list(legal_steps(state, state.turn))


# ----------------------------------------------------------------------
# Transitions
# ----------------------------------------------------------------------
def _malformed(state: GameState, move: Move) -> Optional[str]:
    nodes = [move.origin, move.target] + ([move.over] if isinstance(move, Jump) else [])
    if not all(is_node(node) for node in nodes):
        return "unknown node"
    piece = state.board.get(move.origin)
    if piece is None:
        return "empty origin"
    if not state.board.is_empty(move.target):
        return "occupied target"
    if isinstance(move, Jump):
        victim = state.board.occupant(move.over)
        if victim is None or victim == piece.owner:
            return "nothing to capture"
        reachable = state.board.jumps_from(move.origin)
    else:
        reachable = state.board.steps_from(move.origin)
    # Geometry: the piece must be able to make this move along the board lines
    if move not in reachable:
        return "not reachable along a line"
    return None


def apply_move(state: GameState, move: Move) -> GameState:
    """Apply ``move`` and return the successor state.

    Legality is not re-checked here (see :func:`play_move`), but a move that
    does not fit the board at all leaves the state untouched.
    """

    if not isinstance(move, (Step, Jump)):
        LOG.debug("Ignoring non-move value %r", move)
        return state

    problem = _malformed(state, move)
    if problem is not None:
        LOG.debug("Ignoring malformed move %r: %s", move, problem)
        return state

    piece = state.board.get(move.origin)
    if piece is None:
        return state
    side = piece.owner

    changes = {move.origin: None}
    if isinstance(move, Jump):
        changes[move.over] = None
    if move.target == CENTER:
        piece = piece.crowned()
    changes[move.target] = piece

    board = state.board.with_changes(changes)
    history = state.history + (move,)

    if isinstance(move, Jump) and board.jumps_from(move.target):
        return GameState(board=board, turn=side, history=history, must_continue_from=move.target)

    return GameState(board=board, turn=opponent(side), history=history, must_continue_from=None)


def _rejection(state: GameState, move: Move) -> str:
    # Pick the most helpful reason for a move outside legal_moves
    if not isinstance(move, (Step, Jump)):
        return "illegal_move"
    piece = state.board.get(move.origin) if is_node(move.origin) else None
    if piece is None:
        return "no_piece"
    if piece.owner != state.turn:
        return "not_your_turn"
    if state.must_continue_from is not None and move.origin != state.must_continue_from:
        return "must_continue_capture"
    if isinstance(move, Step) and legal_jumps_all(state, state.turn):
        return "capture_required"
    return "illegal_move"


def play_move(state: GameState, move: Move) -> MoveResult:
    """Validated entry point for hosts; never raises on bad input."""

    if terminal(state):
        LOG.debug("Rejected %r: game is over", move)
        return MoveResult(state=state, legal=False, error="game_over")

    if move not in legal_moves(state):
        error = _rejection(state, move)
        LOG.debug("Rejected %r: %s", move, error)
        return MoveResult(state=state, legal=False, error=error)

    after = apply_move(state, move)
    captured = move.over if isinstance(move, Jump) else None
    return MoveResult(
        state=after,
        legal=True,
        captured=captured,
        must_continue=after.must_continue_from is not None,
        winner=winner(after),
    )


# ----------------------------------------------------------------------
# Outcome
# ----------------------------------------------------------------------
def remaining(state: GameState, side: Side) -> int:
    return state.board.remaining(side)


def terminal(state: GameState) -> bool:
    if any(state.board.remaining(side) == 0 for side in SIDES):
        return True
    return not legal_moves(state)


def winner(state: GameState) -> Optional[Side]:
    """Return the winning side of a finished game, ``None`` while it goes on."""

    if not terminal(state):
        return None
    # A wiped-out side always has the lower count; a blocked position goes to material
    counts = {side: state.board.remaining(side) for side in SIDES}
    if counts[SIDE_A] == counts[SIDE_B]:
        return None
    return SIDE_A if counts[SIDE_A] > counts[SIDE_B] else SIDE_B


def apply_timeout(state: GameState, rng: Optional[random.Random] = None) -> TimeoutResult:
    """Punish the side on move for letting its clock run out.

    When a capture was available, one of the pieces able to capture is
    removed. Either way the turn passes to the opponent.
    """

    if terminal(state):
        return TimeoutResult(state=state)

    rng = rng or random.Random()
    side = state.turn
    capturers = sorted({jump.origin for jump in legal_jumps_all(state, side)}, key=node_order)

    board = state.board
    penalized: Optional[NodeId] = None
    if capturers:
        penalized = rng.choice(capturers)
        board = board.with_changes({penalized: None})
        LOG.info("Timeout with capture pending: removed %s piece at %s", side, penalized)
    else:
        LOG.info("Timeout for %s, turn passes", side)

    after = replace(state, board=board, turn=opponent(side), must_continue_from=None)
    return TimeoutResult(state=after, penalized=penalized)


__all__ = [
    "GameState",
    "MoveResult",
    "TimeoutResult",
    "apply_move",
    "apply_timeout",
    "initial_state",
    "legal_jumps_all",
    "legal_jumps_from",
    "legal_moves",
    "legal_steps",
    "play_move",
    "remaining",
    "terminal",
    "winner",
]
