from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from .evaluation import Score, evaluate
from .game.board import Jump, Move, Side, opponent
from .game.rules import GameState, apply_move, legal_moves
from .topology import CENTER


LOG = logging.getLogger("wheel_checkers.ai")

Clock = Callable[[], float]

WIN_SCORE: Score = 1000.0


class Difficulty(str, Enum):
    EASY = "easy"
    MID = "mid"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        try:
            return cls(value.lower() if isinstance(value, str) else value)
        except ValueError as exc:
            choices = ", ".join(level.value for level in cls)
            raise ValueError(f"Unknown difficulty {value!r} (expected one of: {choices})") from exc


@dataclass(frozen=True)
class SearchProfile:
    """Search knobs for one difficulty level.

    Attributes
    ----------
    depth:
        Plies searched below each root candidate. ``0`` disables search.
    time_budget:
        Wall-clock seconds the search may spend before falling back to the
        static evaluation.
    max_candidates:
        How many moves are expanded at every node.
    order_moves:
        Whether candidates are sorted (captures first) before expansion.
    think_window:
        Minimum seconds a host should show the AI as "thinking".
    """

    depth: int
    time_budget: float
    max_candidates: int
    order_moves: bool
    think_window: float


PROFILES: Dict[Difficulty, SearchProfile] = {
    Difficulty.EASY: SearchProfile(depth=0, time_budget=0.0, max_candidates=0, order_moves=False, think_window=1.2),
    Difficulty.MID: SearchProfile(depth=1, time_budget=1.5, max_candidates=6, order_moves=False, think_window=2.0),
    Difficulty.HARD: SearchProfile(depth=2, time_budget=2.0, max_candidates=8, order_moves=True, think_window=3.2),
}


@dataclass(frozen=True)
class SearchResult:
    move: Optional[Move]
    score: Score
    nodes: int
    timed_out: bool = False


def order_moves(state: GameState, moves: List[Move]) -> List[Move]:
    """Captures first, then promotions onto the center, then king captures."""

    def priority(move: Move) -> tuple:
        piece = state.board.get(move.origin)
        promotes = move.target == CENTER and piece is not None and not piece.king
        takes_king = False
        if isinstance(move, Jump):
            victim = state.board.get(move.over)
            takes_king = victim is not None and victim.king
        return (isinstance(move, Jump), promotes, takes_king)

    # sorted() is stable, so equal priorities keep generator order
    return sorted(moves, key=priority, reverse=True)


class _Search:
    def __init__(self, side: Side, profile: SearchProfile, deadline: float, clock: Clock) -> None:
        self.side = side
        self.profile = profile
        self.deadline = deadline
        self.clock = clock
        self.nodes = 0
        self.timed_out = False

    def _expired(self) -> bool:
        if self.clock() >= self.deadline:
            self.timed_out = True
            return True
        return False

    def _candidates(self, state: GameState, moves: List[Move]) -> List[Move]:
        if self.profile.order_moves:
            moves = order_moves(state, moves)
        return moves[: self.profile.max_candidates]

    def _terminal_score(self, state: GameState, moves: List[Move]) -> Optional[Score]:
        if state.remaining(self.side) == 0:
            return -WIN_SCORE
        if state.remaining(opponent(self.side)) == 0:
            return WIN_SCORE
        if not moves:
            # Blocked: the side with more pieces wins, equal counts draw
            lead = state.remaining(self.side) - state.remaining(opponent(self.side))
            return math.copysign(WIN_SCORE, lead) if lead else 0.0
        return None

    def run(self, state: GameState) -> SearchResult:
        moves = legal_moves(state)
        if not moves:
            return SearchResult(move=None, score=evaluate(state, self.side), nodes=0)

        candidates = self._candidates(state, moves)
        best_move = candidates[0]
        best_score = -math.inf
        alpha = -math.inf
        beta = math.inf

        for move in candidates:
            if self._expired():
                break
            score = self.minimax(apply_move(state, move), self.profile.depth, alpha, beta)
            if score > best_score:
                best_score = score
                best_move = move
            alpha = max(alpha, best_score)

        if best_score == -math.inf:
            best_score = evaluate(apply_move(state, best_move), self.side)
        return SearchResult(move=best_move, score=best_score, nodes=self.nodes, timed_out=self.timed_out)

    def minimax(self, state: GameState, depth: int, alpha: float, beta: float) -> Score:
        # Depth-limited minimax core; maximizing whenever ``side`` is on move
        self.nodes += 1
        if self._expired():
            return evaluate(state, self.side)

        moves = legal_moves(state)
        outcome = self._terminal_score(state, moves)
        if outcome is not None:
            return outcome

        if depth <= 0:
            return evaluate(state, self.side)

        if state.turn == self.side:
            value = -math.inf
            for move in self._candidates(state, moves):
                value = max(value, self.minimax(apply_move(state, move), depth - 1, alpha, beta))
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
            return value

        value = math.inf
        for move in self._candidates(state, moves):
            value = min(value, self.minimax(apply_move(state, move), depth - 1, alpha, beta))
            beta = min(beta, value)
            if beta <= alpha:
                break
        return value


def search(
    state: GameState,
    side: Side,
    profile: SearchProfile,
    deadline: Optional[float] = None,
    clock: Clock = time.monotonic,
) -> SearchResult:
    budget_end = clock() + profile.time_budget
    effective = budget_end if deadline is None else min(deadline, budget_end)
    return _Search(side, profile, effective, clock).run(state)


def select_move(
    state: GameState,
    difficulty: "Difficulty | str",
    side: Side,
    deadline: Optional[float] = None,
    rng: Optional[random.Random] = None,
    clock: Clock = time.monotonic,
) -> Optional[Move]:
    """Pick a move for ``side`` at the requested difficulty.

    ``deadline`` is an absolute :func:`time.monotonic` value; the search also
    stops at its own per-difficulty budget, whichever comes first. Returns
    ``None`` when ``side`` is not on move or has nothing to play.
    """

    level = Difficulty.parse(difficulty)
    if state.turn != side:
        LOG.debug("select_move called for %s while %s is on move", side, state.turn)
        return None

    moves = legal_moves(state)
    if not moves:
        return None

    if level is Difficulty.EASY:
        rng = rng or random.Random()
        captures = [move for move in moves if isinstance(move, Jump)]
        choice = rng.choice(captures or moves)
        LOG.info("AI (%s, easy) plays %s", side, choice)
        return choice

    started = clock()
    result = search(state, side, PROFILES[level], deadline=deadline, clock=clock)
    LOG.info(
        "AI (%s, %s) plays %s score=%.2f nodes=%d elapsed=%.3fs%s",
        side,
        level.value,
        result.move,
        result.score,
        result.nodes,
        clock() - started,
        " (timed out)" if result.timed_out else "",
    )
    return result.move


class SearchAgent:
    def __init__(
        self,
        side: Side,
        difficulty: "Difficulty | str" = Difficulty.MID,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.side = side
        self.difficulty = Difficulty.parse(difficulty)
        self.rng = rng or random.Random()

    @property
    def profile(self) -> SearchProfile:
        return PROFILES[self.difficulty]

    def choose_move(self, state: GameState, deadline: Optional[float] = None) -> Optional[Move]:
        return select_move(state, self.difficulty, self.side, deadline=deadline, rng=self.rng)

    @property
    def description(self) -> str:
        profile = self.profile
        if profile.depth == 0:
            return f"Random({self.difficulty.value})"
        return f"Minimax({self.difficulty.value}, depth={profile.depth}, budget={profile.time_budget}s)"


__all__ = [
    "Difficulty",
    "PROFILES",
    "SearchAgent",
    "SearchProfile",
    "SearchResult",
    "WIN_SCORE",
    "order_moves",
    "search",
    "select_move",
]
