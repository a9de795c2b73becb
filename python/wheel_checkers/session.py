"""Host-side game flow shared by the terminal and pygame front-ends.

A :class:`GameSession` owns the single live :class:`GameState`, turns node
taps into moves, runs the per-turn clock and hands out AI moves as tickets so
that a result computed before a reset or undo is dropped instead of applied.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .ai import PROFILES, SearchAgent
from .config import Settings
from .game.board import Move, Side, opponent
from .game.rules import (
    GameState,
    MoveResult,
    TimeoutResult,
    apply_timeout,
    initial_state,
    legal_moves,
    play_move,
    terminal,
    winner,
)
from .topology import NodeId


LOG = logging.getLogger("wheel_checkers.session")

Clock = Callable[[], float]

MODE_AI = "ai"
MODE_LOCAL = "local"
UNDO_LIMIT = 40


class TurnClock:
    def __init__(self, duration: float, clock: Clock = time.monotonic) -> None:
        self.duration = float(duration)
        self._clock = clock
        self._started = clock()

    def restart(self, duration: Optional[float] = None) -> None:
        if duration is not None:
            self.duration = float(duration)
        self._started = self._clock()

    def remaining(self) -> float:
        return max(0.0, self.duration - (self._clock() - self._started))

    def expired(self) -> bool:
        return self.remaining() <= 0.0


@dataclass(frozen=True)
class AiTicket:
    generation: int
    move: Optional[Move]
    ready_at: float


class GameSession:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        mode: str = MODE_AI,
        rng: Optional[random.Random] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        if mode not in (MODE_AI, MODE_LOCAL):
            raise ValueError(f"Unknown mode: {mode!r}")
        self.settings = settings or Settings()
        self.mode = mode
        self.rng = rng or random.Random()
        self._clock = clock
        self.turn_clock = TurnClock(self.settings.timer_duration_seconds, clock=clock)
        self.agent = SearchAgent(self.settings.ai_side, self.settings.difficulty, rng=self.rng)

        self.state: GameState = initial_state()
        self.selected: Optional[NodeId] = None
        self.message: Optional[str] = None
        self._undo: List[GameState] = []
        self._generation = 0
        self.reset()

    # ------------------------------------------------------------------
    # Game flow helpers
    # ------------------------------------------------------------------
    @property
    def human_side(self) -> Side:
        return opponent(self.settings.ai_side)

    def configure(self, settings: Settings) -> None:
        """Apply new settings and start a fresh game with them."""

        self.settings = settings
        self.agent = SearchAgent(settings.ai_side, settings.difficulty, rng=self.rng)
        self.reset()

    def reset(self) -> None:
        self.state = initial_state()
        self.selected = None
        self.message = None
        self._undo = []
        self._generation += 1
        self.turn_clock.restart(self.settings.timer_duration_seconds)

    def undo(self) -> bool:
        if not self._undo:
            return False
        restored = self._undo.pop()
        # Against the AI, rewind to the last position the human had to play
        while self.mode == MODE_AI and restored.turn == self.settings.ai_side and self._undo:
            restored = self._undo.pop()
        self._set_state(restored, remember=False)
        self.message = "Undid last move"
        return True

    def _set_state(self, new_state: GameState, remember: bool = True) -> None:
        if remember:
            self._undo.append(self.state)
            if len(self._undo) > UNDO_LIMIT:
                self._undo = self._undo[-UNDO_LIMIT:]
        turn_changed = new_state.turn != self.state.turn
        self.state = new_state
        self.selected = new_state.must_continue_from
        self._generation += 1
        if turn_changed or not remember:
            # Always restart from the configured duration
            self.turn_clock.restart(self.settings.timer_duration_seconds)

    @property
    def game_over(self) -> bool:
        return terminal(self.state)

    @property
    def winner(self) -> Optional[Side]:
        return winner(self.state)

    def is_ai_turn(self) -> bool:
        return self.mode == MODE_AI and self.state.turn == self.settings.ai_side and not self.game_over

    def moves_by_origin(self) -> Dict[NodeId, List[Move]]:
        grouped: Dict[NodeId, List[Move]] = {}
        for move in legal_moves(self.state):
            grouped.setdefault(move.origin, []).append(move)
        return grouped

    def highlighted(self) -> List[Move]:
        if self.selected is None:
            return []
        return self.moves_by_origin().get(self.selected, [])

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------
    def tap(self, node: NodeId) -> Optional[MoveResult]:
        """Handle a tap on ``node``; returns the result once a move is played."""

        if self.game_over or self.is_ai_turn():
            return None

        moves = self.moves_by_origin()
        mine = self.state.board.occupant(node) == self.state.turn

        if self.selected is None:
            if mine and node in moves:
                self.selected = node
            return None

        if node == self.selected:
            if self.state.must_continue_from is None:
                self.selected = None
            return None

        move = next((m for m in moves.get(self.selected, []) if m.target == node), None)
        if move is None:
            if mine and node in moves and self.state.must_continue_from is None:
                self.selected = node
            return None

        return self.submit(move)

    def submit(self, move: Move) -> MoveResult:
        result = play_move(self.state, move)
        if not result.legal:
            self.message = f"Illegal move: {result.error}"
            return result

        self._set_state(result.state)
        if result.winner is not None:
            self.message = f"Side {result.winner} wins"
        elif result.must_continue:
            self.message = "Continue capture with the same piece"
        else:
            self.message = None
        return result

    # ------------------------------------------------------------------
    # AI turn
    # ------------------------------------------------------------------
    def request_ai_move(self, deadline: Optional[float] = None) -> AiTicket:
        started = self._clock()
        move = self.agent.choose_move(self.state, deadline=deadline)
        window = PROFILES[self.agent.difficulty].think_window
        return AiTicket(generation=self._generation, move=move, ready_at=started + window)

    def ready(self, ticket: AiTicket) -> bool:
        """Whether the thinking window of ``ticket`` has elapsed."""

        return self._clock() >= ticket.ready_at

    def deliver(self, ticket: AiTicket) -> Optional[MoveResult]:
        if ticket.generation != self._generation:
            LOG.info("Discarding stale AI move %s", ticket.move)
            return None
        if ticket.move is None:
            return None
        return self.submit(ticket.move)

    # ------------------------------------------------------------------
    # Turn clock
    # ------------------------------------------------------------------
    def tick(self) -> Optional[TimeoutResult]:
        """Apply the timeout policy once the human's clock has run out."""

        if self.game_over or self.is_ai_turn() or not self.turn_clock.expired():
            return None

        result = apply_timeout(self.state, self.rng)
        self._set_state(result.state)
        self.turn_clock.restart(self.settings.timer_duration_seconds)
        if result.penalized is not None:
            self.message = f"Time up! Piece at {result.penalized} removed for skipping a capture"
        else:
            self.message = "Time up! Turn passes"
        return result
