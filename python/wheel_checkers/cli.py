"""Command-line interface for playing Wheel Checkers against an AI opponent."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from .ai import Difficulty, SearchAgent
from .config import Settings, SettingsError
from .game.board import SIDE_A, SIDE_B, Jump, Move, Side, opponent
from .game.rules import GameState, initial_state, legal_moves, play_move, remaining, terminal, winner
from .topology import CENTER, RING_PREFIXES, RING_SIZE, is_node


LOG = logging.getLogger("wheel_checkers.cli")

SYMBOLS = {SIDE_A: ("a", "A"), SIDE_B: ("b", "B")}
RING_LABELS = {"O": "outer", "MO": "mid-outer", "MI": "mid-inner", "I": "inner"}


def _symbol(state: GameState, node: str) -> str:
    piece = state.board.get(node)
    if piece is None:
        return "."
    man, king = SYMBOLS[piece.owner]
    return king if piece.king else man


def _render_board(state: GameState) -> None:
    print("\nBoard state (index 0..11 around each ring, upper case = king):")
    print("         " + " ".join(f"{i:>2}" for i in range(RING_SIZE)))
    for prefix in RING_PREFIXES:
        cells = " ".join(f"{_symbol(state, f'{prefix}{i}'):>2}" for i in range(RING_SIZE))
        print(f"{RING_LABELS[prefix]:>9}{cells}")
    print(f"{'center':>9} {_symbol(state, CENTER):>2}")
    print(
        f"\nPieces - A: {remaining(state, SIDE_A)}  B: {remaining(state, SIDE_B)}"
        f"  |  {state.turn} to move"
        + (f" (continue capture from {state.must_continue_from})" if state.must_continue_from else "")
        + "\n"
    )


def _describe(move: Move) -> str:
    if isinstance(move, Jump):
        return f"{move.origin} x {move.over} -> {move.target}"
    return f"{move.origin} -> {move.target}"


def _parse_pair(text: str) -> Optional[Tuple[str, str]]:
    parts = text.replace("-", " ").replace(">", " ").upper().split()
    if len(parts) != 2 or not all(is_node(part) for part in parts):
        return None
    return parts[0], parts[1]


def _prompt_move(state: GameState) -> Optional[Move]:
    moves = legal_moves(state)
    while True:
        print("Legal moves: " + ", ".join(_describe(move) for move in moves))
        try:
            value = input("Your move as 'FROM TO' (or q to quit): ")
        except EOFError:
            return None

        value = value.strip()
        if value.lower() in {"q", "quit", "exit"}:
            return None

        pair = _parse_pair(value)
        if pair is None:
            print("Please enter two nodes such as 'I0 C' or 'q' to quit.")
            continue

        origin, target = pair
        match = next((m for m in moves if m.origin == origin and m.target == target), None)
        if match is None:
            print("That move is not legal here. Try again.")
            continue
        return match


def _human_turn(state: GameState, side: Side) -> Optional[GameState]:
    while True:
        _render_board(state)
        print(f"You are playing as {side}.")

        move = _prompt_move(state)
        if move is None:
            return None

        result = play_move(state, move)
        if not result.legal:
            print(f"Illegal move: {result.error}. Try again.")
            continue

        state = result.state
        print(f"Moved {_describe(move)}.")

        if result.winner is not None:
            return state

        if result.must_continue:
            print("Capture chain detected - you must continue with the same piece.")
            continue

        return state


def _ai_turn(state: GameState, agent: SearchAgent, label: str = "AI") -> Optional[GameState]:
    while True:
        move = agent.choose_move(state)
        if move is None:
            print(f"{label} has no legal moves.")
            return None

        result = play_move(state, move)
        if not result.legal:
            LOG.error("%s produced an illegal move %r (%s)", label, move, result.error)
            print(f"{label} attempted an illegal move. Ending match.")
            return None

        state = result.state
        print(f"{label} plays {_describe(move)}.")

        if result.winner is not None:
            return state

        if result.must_continue:
            print(f"{label} continues capture sequence...")
            continue

        return state


def _announce(state: GameState, labels: dict) -> None:
    side = winner(state)
    if side is None:
        print("The game ended without a winner.")
        return
    print(
        f"{labels[side]} won! Remaining pieces - A: {remaining(state, SIDE_A)}, "
        f"B: {remaining(state, SIDE_B)}"
    )


def _run_human_vs_ai(settings: Settings) -> int:
    state = initial_state()
    ai_side = settings.ai_side
    human_side = opponent(ai_side)
    agent = SearchAgent(ai_side, settings.difficulty)

    print(f"Game start! You play {human_side}, the AI ({agent.description}) plays {ai_side}.")
    print("Side A moves first. Enter 'q' at any prompt to quit.")

    while not terminal(state):
        if state.turn == human_side:
            next_state = _human_turn(state, human_side)
        else:
            next_state = _ai_turn(state, agent)
        if next_state is None:
            break
        state = next_state

    if terminal(state):
        _render_board(state)
        _announce(state, {human_side: "You", ai_side: "AI"})

    print("Thanks for playing!")
    return 0


def _run_ai_vs_ai(settings: Settings, opponent_difficulty: Difficulty, show_board: bool, max_turns: int) -> int:
    state = initial_state()
    agents = {
        SIDE_A: SearchAgent(SIDE_A, opponent_difficulty),
        SIDE_B: SearchAgent(SIDE_B, settings.difficulty),
    }
    labels = {side: f"AI {side} ({agent.description})" for side, agent in agents.items()}

    print(f"Game start! {labels[SIDE_A]} versus {labels[SIDE_B]}.")

    turn_counter = 1
    while not terminal(state) and turn_counter <= max_turns:
        label = labels[state.turn]
        next_state = _ai_turn(state, agents[state.turn], label=label)
        if next_state is None:
            break
        state = next_state
        if show_board:
            _render_board(state)
        turn_counter += 1

    if terminal(state):
        _announce(state, labels)
    else:
        print(f"Stopped after {max_turns} turns. A: {remaining(state, SIDE_A)}, B: {remaining(state, SIDE_B)}")

    print("AI vs AI match complete.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wheel Checkers in the terminal")
    parser.add_argument("--mode", choices=["human", "ai"], default="human", help="human vs AI or AI vs AI")
    parser.add_argument("--difficulty", choices=[level.value for level in Difficulty])
    parser.add_argument("--opponent-difficulty", choices=[level.value for level in Difficulty], default="easy",
                        help="difficulty of side A in AI vs AI mode")
    parser.add_argument("--ai-side", choices=[SIDE_A, SIDE_B])
    parser.add_argument("--show-board", action="store_true", help="print the board after every AI vs AI turn")
    parser.add_argument("--max-turns", type=int, default=300)
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))

    try:
        settings = Settings.from_env().override(difficulty=args.difficulty, ai_side=args.ai_side)
    except SettingsError as exc:
        print(f"Invalid settings: {exc}", file=sys.stderr)
        return 2

    if args.mode == "ai":
        return _run_ai_vs_ai(settings, Difficulty.parse(args.opponent_difficulty), args.show_board, args.max_turns)
    return _run_human_vs_ai(settings)


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    sys.exit(main())
