"""Board topology for the Wheel Checkers graph.

The board is four concentric rings of twelve nodes plus a single center node.
Every ring is a closed line and every spoke is an open nine-node line running
from one outer node through the center to the opposite outer node. Adjacency
is derived from the lines, so the rest of the package shares a single source
of truth for both step and capture reasoning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple


NodeId = str

RING_SIZE = 12
RING_PREFIXES: Tuple[str, ...] = ("O", "MO", "MI", "I")
CENTER: NodeId = "C"


def ring_node(prefix: str, index: int) -> NodeId:
    return f"{prefix}{index % RING_SIZE}"


ALL_NODES: Tuple[NodeId, ...] = tuple(
    ring_node(prefix, i) for prefix in RING_PREFIXES for i in range(RING_SIZE)
) + (CENTER,)

_NODE_ORDER: Dict[NodeId, int] = {node: pos for pos, node in enumerate(ALL_NODES)}


@dataclass(frozen=True)
class Line:
    """A straight path across the board.

    Attributes
    ----------
    nodes:
        The ordered node sequence. Each node appears at most once.
    closed:
        ``True`` for rings. Indexing on a closed line wraps around and a walk
        stops before coming back to its starting node.
    """

    nodes: Tuple[NodeId, ...]
    closed: bool = False

    def __len__(self) -> int:
        return len(self.nodes)

    def index(self, node: NodeId) -> Optional[int]:
        try:
            return self.nodes.index(node)
        except ValueError:
            return None

    def at(self, index: int) -> Optional[NodeId]:
        if self.closed:
            return self.nodes[index % len(self.nodes)]
        if 0 <= index < len(self.nodes):
            return self.nodes[index]
        return None

    def offset(self, origin: int, other: int) -> Optional[int]:
        """Return ``+1``/``-1`` when ``other`` sits right next to ``origin``."""

        diff = other - origin
        if self.closed:
            diff %= len(self.nodes)
            if diff == 1:
                return 1
            if diff == len(self.nodes) - 1:
                return -1
            return None
        if diff in (1, -1):
            return diff
        return None

    def walk(self, start: int, direction: int) -> Iterator[NodeId]:
        """Yield nodes outward from ``start`` (exclusive) in ``direction``."""

        limit = len(self.nodes) - 1 if self.closed else len(self.nodes)
        for step in range(1, limit + 1):
            node = self.at(start + direction * step)
            if node is None:
                return
            yield node


def _build_lines() -> Tuple[Line, ...]:
    rings = [
        Line(tuple(ring_node(prefix, i) for i in range(RING_SIZE)), closed=True)
        for prefix in RING_PREFIXES
    ]
    spokes = []
    for i in range(RING_SIZE):
        opp = (i + RING_SIZE // 2) % RING_SIZE
        spokes.append(
            Line(
                (
                    ring_node("O", i),
                    ring_node("MO", i),
                    ring_node("MI", i),
                    ring_node("I", i),
                    CENTER,
                    ring_node("I", opp),
                    ring_node("MI", opp),
                    ring_node("MO", opp),
                    ring_node("O", opp),
                )
            )
        )
    return tuple(rings + spokes)


def _build_adjacency(lines: Tuple[Line, ...]) -> Dict[NodeId, FrozenSet[NodeId]]:
    graph: Dict[NodeId, set] = {node: set() for node in ALL_NODES}
    for line in lines:
        pairs = list(zip(line.nodes, line.nodes[1:]))
        if line.closed:
            pairs.append((line.nodes[-1], line.nodes[0]))
        for a, b in pairs:
            graph[a].add(b)
            graph[b].add(a)
    return {node: frozenset(nbs) for node, nbs in graph.items()}


def _build_line_index(lines: Tuple[Line, ...]) -> Dict[NodeId, Tuple[Tuple[Line, int], ...]]:
    index: Dict[NodeId, List[Tuple[Line, int]]] = {node: [] for node in ALL_NODES}
    for line in lines:
        for pos, node in enumerate(line.nodes):
            index[node].append((line, pos))
    return {node: tuple(entries) for node, entries in index.items()}


LINES: Tuple[Line, ...] = _build_lines()
ADJACENCY: Dict[NodeId, FrozenSet[NodeId]] = _build_adjacency(LINES)
_LINES_THROUGH = _build_line_index(LINES)


def is_node(value: object) -> bool:
    return isinstance(value, str) and value in _NODE_ORDER


def node_order(node: NodeId) -> int:
    """Canonical sort key: outer ring first, center last."""

    return _NODE_ORDER[node]


def neighbors(node: NodeId) -> FrozenSet[NodeId]:
    """Return the nodes one edge away from ``node``."""

    try:
        return ADJACENCY[node]
    except KeyError as exc:
        raise ValueError(f"Unknown node: {node!r}") from exc


def sorted_neighbors(node: NodeId) -> List[NodeId]:
    return sorted(neighbors(node), key=node_order)


def lines() -> Tuple[Line, ...]:
    return LINES


def lines_through(node: NodeId) -> Tuple[Tuple[Line, int], ...]:
    """Every line containing ``node`` paired with the node's index on it."""

    return _LINES_THROUGH.get(node, ())


def ring_position(node: NodeId) -> Optional[Tuple[str, int]]:
    """Split a ring node into ``(prefix, index)``; ``None`` for the center."""

    if node == CENTER or not is_node(node):
        return None
    prefix = node.rstrip("0123456789")
    return prefix, int(node[len(prefix):])


def all_edges() -> Iterator[Tuple[NodeId, NodeId]]:
    """Iterate over every undirected edge once, in canonical order."""

    for node in ALL_NODES:
        for nb in sorted_neighbors(node):
            if node_order(nb) > node_order(node):
                yield node, nb
