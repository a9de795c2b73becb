from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ..topology import (
    ALL_NODES,
    CENTER,
    NodeId,
    is_node,
    lines_through,
    ring_node,
    ring_position,
    sorted_neighbors,
)


Side = str
SIDE_A: Side = "A"
SIDE_B: Side = "B"
SIDES: Tuple[Side, Side] = (SIDE_A, SIDE_B)


# Flip between sides
def opponent(side: Side) -> Side:
    return SIDE_B if side == SIDE_A else SIDE_A


@dataclass(frozen=True)
class Piece:
    owner: Side
    king: bool = False

    def crowned(self) -> "Piece":
        return self if self.king else Piece(owner=self.owner, king=True)


@dataclass(frozen=True)
class Step:
    origin: NodeId
    target: NodeId

    @property
    def kind(self) -> str:
        return "step"


@dataclass(frozen=True)
class Jump:
    origin: NodeId
    over: NodeId
    target: NodeId

    @property
    def kind(self) -> str:
        return "jump"


Move = Union[Step, Jump]


def _unique(moves: List[Move]) -> List[Move]:
    # Spokes overlap pairwise, so the same move can come from two lines
    seen = set()
    out: List[Move] = []
    for move in moves:
        if move not in seen:
            seen.add(move)
            out.append(move)
    return out


class Board:
    """Immutable node-to-piece mapping; only occupied nodes are stored."""

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[Mapping[NodeId, Piece]] = None) -> None:
        checked: Dict[NodeId, Piece] = {}
        for node, piece in (cells or {}).items():
            if not is_node(node):
                raise ValueError(f"Unknown node: {node!r}")
            if piece is not None:
                checked[node] = piece
        self._cells = checked

    @classmethod
    def initial(cls) -> "Board":
        cells: Dict[NodeId, Piece] = {}
        for node in ALL_NODES:
            position = ring_position(node)
            if position is None:
                continue
            cells[node] = Piece(SIDE_A if position[1] < 6 else SIDE_B)
        return cls(cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self) -> int:
        return hash(frozenset(self._cells.items()))

    def __repr__(self) -> str:
        return f"Board({len(self._cells)} pieces)"

    def get(self, node: NodeId) -> Optional[Piece]:
        return self._cells.get(node)

    def occupant(self, node: NodeId) -> Optional[Side]:
        piece = self._cells.get(node)
        return None if piece is None else piece.owner

    def is_empty(self, node: NodeId) -> bool:
        return node not in self._cells

    def snapshot(self) -> Dict[NodeId, Optional[Piece]]:
        return {node: self._cells.get(node) for node in ALL_NODES}

    def items(self) -> Iterator[Tuple[NodeId, Piece]]:
        for node in ALL_NODES:
            piece = self._cells.get(node)
            if piece is not None:
                yield node, piece

    def nodes_of(self, side: Side) -> List[NodeId]:
        return [node for node, piece in self.items() if piece.owner == side]

    def remaining(self, side: Side) -> int:
        return sum(1 for piece in self._cells.values() if piece.owner == side)

    def with_changes(self, changes: Mapping[NodeId, Optional[Piece]]) -> "Board":
        cells = dict(self._cells)
        for node, piece in changes.items():
            if piece is None:
                cells.pop(node, None)
            else:
                cells[node] = piece
        return Board(cells)

    # ------------------------------------------------------------------
    # Move generation
    # ------------------------------------------------------------------
    def steps_from(self, origin: NodeId) -> List[Step]:
        piece = self.get(origin)
        if piece is None:
            return []

        if not piece.king:
            return [Step(origin, nb) for nb in sorted_neighbors(origin) if self.is_empty(nb)]

        # Flying king: slide over any run of empty nodes
        moves: List[Move] = []
        for line, idx in lines_through(origin):
            for direction in (-1, 1):
                for node in line.walk(idx, direction):
                    if not self.is_empty(node):
                        break
                    moves.append(Step(origin, node))
        return _unique(moves)  # type: ignore[return-value]

    def jumps_from(self, origin: NodeId) -> List[Jump]:
        piece = self.get(origin)
        if piece is None:
            return []
        if piece.king:
            return self._king_jumps(origin, piece.owner)
        moves = self._line_jumps(origin, piece.owner) + self._lateral_jumps(origin, piece.owner)
        return _unique(moves)  # type: ignore[return-value]

    def _is_enemy(self, node: NodeId, side: Side) -> bool:
        owner = self.occupant(node)
        return owner is not None and owner != side

    def _line_jumps(self, origin: NodeId, side: Side) -> List[Move]:
        # Hop an adjacent enemy along any line shared with it
        moves: List[Move] = []
        for over in sorted_neighbors(origin):
            if not self._is_enemy(over, side):
                continue
            for line, idx in lines_through(origin):
                over_idx = line.index(over)
                if over_idx is None:
                    continue
                direction = line.offset(idx, over_idx)
                if direction is None:
                    continue
                landing = line.at(over_idx + direction)
                if landing is not None and landing != origin and self.is_empty(landing):
                    moves.append(Jump(origin, over, landing))
        return moves

    def _lateral_jumps(self, origin: NodeId, side: Side) -> List[Move]:
        # Sideways hop within the same ring, wrapping around index 11 -> 0
        position = ring_position(origin)
        if position is None:
            return []
        prefix, index = position
        moves: List[Move] = []
        for direction in (-1, 1):
            over = ring_node(prefix, index + direction)
            landing = ring_node(prefix, index + 2 * direction)
            if self._is_enemy(over, side) and self.is_empty(landing):
                moves.append(Jump(origin, over, landing))
        return moves

    def _king_jumps(self, origin: NodeId, side: Side) -> List[Jump]:
        moves: List[Move] = []
        for line, idx in lines_through(origin):
            for direction in (-1, 1):
                path = line.walk(idx, direction)
                for node in path:
                    owner = self.occupant(node)
                    if owner is None:
                        continue
                    if owner == side:
                        break
                    # One capture per direction: only the node right past the victim counts
                    landing = next(path, None)
                    if landing is not None and self.is_empty(landing):
                        moves.append(Jump(origin, node, landing))
                    break
        return _unique(moves)  # type: ignore[return-value]


def board_from(layout: Mapping[NodeId, Union[Piece, Side]]) -> Board:
    """Build a board from ``{"O0": "A", "C": Piece("B", king=True)}`` style input."""

    cells: Dict[NodeId, Piece] = {}
    for node, value in layout.items():
        cells[node] = value if isinstance(value, Piece) else Piece(value)
    return Board(cells)


__all__ = [
    "Board",
    "CENTER",
    "Jump",
    "Move",
    "Piece",
    "SIDES",
    "SIDE_A",
    "SIDE_B",
    "Side",
    "Step",
    "board_from",
    "opponent",
]
