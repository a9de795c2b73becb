"""JSON message helpers for moves and game states.

Moves travel as ``{"kind": "step", "from": "O0", "to": "O1"}`` and jumps add
an ``"over"`` key. Node ids keep the board's string scheme (``O``/``MO``/
``MI``/``I`` plus ring index, or ``C``) so recorded games stay readable.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable

from .game.board import SIDES, Board, Jump, Move, Piece, Step
from .game.rules import GameState, initial_state, play_move
from .topology import is_node


Message = Dict[str, Any]
ENCODING = "utf-8"


class ProtocolError(RuntimeError):
    pass


def encode(message: Message) -> bytes:
    """Serialize a message to bytes with a trailing newline."""

    return (json.dumps(message, separators=(",", ":")) + "\n").encode(ENCODING)


def decode(payload: bytes) -> Message:
    """Parse bytes into a Python dictionary."""

    try:
        message = json.loads(payload.decode(ENCODING))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError("Malformed payload") from exc
    if not isinstance(message, dict):
        raise ProtocolError("Payload is not a JSON object")
    return message


def _node(message: Message, key: str) -> str:
    value = message.get(key)
    if not is_node(value):
        raise ProtocolError(f"Invalid node for {key!r}: {value!r}")
    return value


def move_to_message(move: Move) -> Message:
    if isinstance(move, Jump):
        return {"kind": "jump", "from": move.origin, "over": move.over, "to": move.target}
    return {"kind": "step", "from": move.origin, "to": move.target}


def move_from_message(message: Message) -> Move:
    if not isinstance(message, dict):
        raise ProtocolError("Move must be a JSON object")
    kind = message.get("kind")
    if kind == "step":
        return Step(origin=_node(message, "from"), target=_node(message, "to"))
    if kind == "jump":
        return Jump(origin=_node(message, "from"), over=_node(message, "over"), target=_node(message, "to"))
    raise ProtocolError(f"Unknown move kind: {kind!r}")


def state_to_message(state: GameState) -> Message:
    return {
        "board": {
            node: {"owner": piece.owner, "king": piece.king}
            for node, piece in state.board.items()
        },
        "turn": state.turn,
        "mustContinueFrom": state.must_continue_from,
        "history": [move_to_message(move) for move in state.history],
    }


def state_from_message(message: Message) -> GameState:
    if not isinstance(message, dict):
        raise ProtocolError("State must be a JSON object")

    raw_board = message.get("board")
    if not isinstance(raw_board, dict):
        raise ProtocolError("State is missing its board")

    cells: Dict[str, Piece] = {}
    for node, raw_piece in raw_board.items():
        if not is_node(node):
            raise ProtocolError(f"Unknown node on board: {node!r}")
        if not isinstance(raw_piece, dict) or raw_piece.get("owner") not in SIDES:
            raise ProtocolError(f"Invalid piece at {node}: {raw_piece!r}")
        king = raw_piece.get("king", False)
        if not isinstance(king, bool):
            raise ProtocolError(f"Invalid king flag at {node}: {king!r}")
        cells[node] = Piece(owner=raw_piece["owner"], king=king)

    turn = message.get("turn")
    if turn not in SIDES:
        raise ProtocolError(f"Invalid turn: {turn!r}")

    board = Board(cells)
    pending = message.get("mustContinueFrom")
    if pending is not None and (not is_node(pending) or board.occupant(pending) != turn):
        raise ProtocolError(f"Invalid mustContinueFrom: {pending!r}")

    raw_history = message.get("history", [])
    if not isinstance(raw_history, list):
        raise ProtocolError("History must be a list of moves")
    history = tuple(move_from_message(raw) for raw in raw_history)
    return GameState(board=board, turn=turn, history=history, must_continue_from=pending)


def replay(moves: Iterable[Message]) -> GameState:
    """Rebuild a game from the opening position and a list of move messages."""

    state = initial_state()
    for number, raw in enumerate(moves, start=1):
        result = play_move(state, move_from_message(raw))
        if not result.legal:
            raise ProtocolError(f"Move {number} is not playable: {result.error}")
        state = result.state
    return state