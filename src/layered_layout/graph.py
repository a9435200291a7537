"""Graph model — mutable node/edge container used by every layout phase.

Nodes are addressed by opaque hashable ids supplied by the caller. Edges are
identified by an integer key that stays stable across ``remove_edge`` /
``reinsert``, so parallel edges between the same pair of nodes can be laid out
independently.

The container is a thin wrapper around ``networkx.MultiDiGraph``: each node
stores its ``Node`` record under the ``data`` attribute and each edge stores
its ``Edge`` record the same way.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field

import networkx as nx

# ─── Records ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Point:
    """A 2D point in layout coordinates (x = layer axis, y = within-layer axis)."""

    x: float
    y: float


@dataclass
class Node:
    """A node in the layout graph.

    ``x`` follows the layer axis (layer index times layer spacing) and ``y``
    is the continuous position within the layer.
    """

    id: Hashable
    label: str = ""
    size: tuple[float, float] | None = None
    layer: int = 0
    x: float = 0.0
    y: float = 0.0
    is_dummy: bool = False

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class Edge:
    """A directed edge with an ordered list of bend points."""

    key: int
    source: Hashable
    target: Hashable
    bends: list[Point] = field(default_factory=list)
    is_dummy: bool = False

    def __repr__(self) -> str:
        return f"Edge({self.key}: {self.source!r} -> {self.target!r})"


# ─── LayoutGraph ──────────────────────────────────────────────────────────────


class LayoutGraph:
    """Mutable directed multigraph with coordinate and bend-point storage.

    Every query that returns a collection returns a fresh list, so callers can
    mutate the graph while walking a result.
    """

    def __init__(self) -> None:
        self._g: nx.MultiDiGraph = nx.MultiDiGraph()
        self._edges: dict[int, Edge] = {}
        self._next_key = 0

    # ── nodes ──

    def add_node(self, node_id: Hashable, label: str = "", size: tuple[float, float] | None = None) -> Node:
        """Create a real node. Raises ``ValueError`` if the id is taken."""
        if node_id in self._g:
            raise ValueError(f"node {node_id!r} already exists")
        node = Node(id=node_id, label=label, size=size)
        self._g.add_node(node_id, data=node)
        return node

    def create_dummy_node(self, node_id: Hashable, layer: int, x: float, y: float) -> Node:
        """Create a synthetic node in ``layer`` at (``x``, ``y``)."""
        if node_id in self._g:
            raise ValueError(f"node {node_id!r} already exists")
        node = Node(id=node_id, layer=layer, x=x, y=y, is_dummy=True)
        self._g.add_node(node_id, data=node)
        return node

    def remove_node(self, node_id: Hashable) -> None:
        """Remove a node together with all its incident edges."""
        self._require(node_id)
        for edge in self.in_edges(node_id) + self.out_edges(node_id):
            self._edges.pop(edge.key, None)
        self._g.remove_node(node_id)

    def node(self, node_id: Hashable) -> Node:
        return self._g.nodes[node_id]["data"]

    def _require(self, node_id: Hashable) -> None:
        if node_id not in self._g:
            raise KeyError(f"unknown node {node_id!r}")

    def has_node(self, node_id: Hashable) -> bool:
        return node_id in self._g

    def nodes(self) -> list[Node]:
        return [data for _, data in self._g.nodes(data="data")]

    def node_ids(self) -> list[Hashable]:
        return list(self._g.nodes)

    def number_of_nodes(self) -> int:
        return self._g.number_of_nodes()

    # ── edges ──

    def add_edge(self, source: Hashable, target: Hashable, *, dummy: bool = False) -> Edge:
        """Create an edge ``source -> target``. Both endpoints must exist."""
        self._require(source)
        self._require(target)
        edge = Edge(key=self._next_key, source=source, target=target, is_dummy=dummy)
        self._next_key += 1
        self._attach(edge)
        return edge

    def remove_edge(self, edge: Edge) -> None:
        """Remove ``edge`` from the active graph. The record itself is untouched."""
        if edge.key not in self._edges:
            raise KeyError(f"edge {edge!r} is not in the graph")
        self._g.remove_edge(edge.source, edge.target, key=edge.key)
        del self._edges[edge.key]

    def reinsert(self, edge: Edge) -> Edge:
        """Put a previously removed edge back, keeping its key, with no bends."""
        if edge.key in self._edges:
            raise ValueError(f"edge {edge!r} is already in the graph")
        self._require(edge.source)
        self._require(edge.target)
        edge.bends = []
        self._attach(edge)
        return edge

    def _attach(self, edge: Edge) -> None:
        self._g.add_edge(edge.source, edge.target, key=edge.key, data=edge)
        self._edges[edge.key] = edge

    def edge(self, key: int) -> Edge:
        return self._edges[key]

    def has_edge(self, edge: Edge) -> bool:
        return edge.key in self._edges

    def edges(self) -> list[Edge]:
        return [data for _, _, data in self._g.edges(data="data")]

    def number_of_edges(self) -> int:
        return self._g.number_of_edges()

    def source(self, edge: Edge) -> Node:
        return self.node(edge.source)

    def target(self, edge: Edge) -> Node:
        return self.node(edge.target)

    # ── adjacency ──

    def in_edges(self, node_id: Hashable) -> list[Edge]:
        self._require(node_id)
        return [data for _, _, data in self._g.in_edges(node_id, data="data")]

    def out_edges(self, node_id: Hashable) -> list[Edge]:
        self._require(node_id)
        return [data for _, _, data in self._g.out_edges(node_id, data="data")]

    def in_degree(self, node_id: Hashable) -> int:
        self._require(node_id)
        return self._g.in_degree(node_id)

    def out_degree(self, node_id: Hashable) -> int:
        self._require(node_id)
        return self._g.out_degree(node_id)

    def predecessors(self, node_id: Hashable) -> list[Hashable]:
        """Source ids of all incoming edges (repeated once per parallel edge)."""
        self._require(node_id)
        return [src for src, _ in self._g.in_edges(node_id)]

    def successors(self, node_id: Hashable) -> list[Hashable]:
        """Target ids of all outgoing edges (repeated once per parallel edge)."""
        self._require(node_id)
        return [tgt for _, tgt in self._g.out_edges(node_id)]

    # ── coordinates & bends ──

    def set_coordinates(self, node_id: Hashable, x: float, y: float) -> None:
        node = self.node(node_id)
        node.x = x
        node.y = y

    def get_x(self, node_id: Hashable) -> float:
        return self.node(node_id).x

    def get_y(self, node_id: Hashable) -> float:
        return self.node(node_id).y

    def add_bend(self, edge: Edge, x: float, y: float) -> None:
        edge.bends.append(Point(x, y))

    def clean_bends(self, tolerance: float = 1e-6) -> int:
        """Drop redundant bend points from every edge without changing path shapes.

        A bend is redundant if it coincides with the previous path point or the
        target, or lies on the straight segment between its neighbours.
        Returns the number of removed bends.
        """
        removed = 0
        for edge in self.edges():
            if not edge.bends:
                continue
            start = self.source(edge).position
            end = self.target(edge).position
            cleaned = clean_path(start, edge.bends, end, tolerance)
            removed += len(edge.bends) - len(cleaned)
            edge.bends = cleaned
        return removed

    # ── misc ──

    @property
    def digraph(self) -> nx.MultiDiGraph:
        """Read-only view of the underlying networkx graph."""
        return self._g.copy(as_view=True)

    def copy(self) -> LayoutGraph:
        """Deep copy: nodes, edges, coordinates and bends are all duplicated."""
        return copy.deepcopy(self)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._g

    def __len__(self) -> int:
        return self._g.number_of_nodes()

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.node_ids())

    def __repr__(self) -> str:
        return f"LayoutGraph(nodes={self.number_of_nodes()}, edges={self.number_of_edges()})"


# ─── Bend cleaning ────────────────────────────────────────────────────────────


def _coincide(a: Point, b: Point, tolerance: float) -> bool:
    return abs(a.x - b.x) <= tolerance and abs(a.y - b.y) <= tolerance


def _between_on_line(a: Point, p: Point, b: Point, tolerance: float) -> bool:
    """True if ``p`` lies on the segment a→b (within ``tolerance`` distance)."""
    dx, dy = b.x - a.x, b.y - a.y
    length = math.hypot(dx, dy)
    if length <= tolerance:
        return False
    cross = dx * (p.y - a.y) - dy * (p.x - a.x)
    if abs(cross) / length > tolerance:
        return False
    # Projection must fall inside the segment, otherwise the bend reverses direction.
    t = (dx * (p.x - a.x) + dy * (p.y - a.y)) / (length * length)
    return -tolerance <= t <= 1 + tolerance


def clean_path(start: Point, bends: list[Point], end: Point, tolerance: float = 1e-6) -> list[Point]:
    """Return ``bends`` with coincident and colinear points removed."""
    result: list[Point] = []
    for i, p in enumerate(bends):
        prev = result[-1] if result else start
        nxt = bends[i + 1] if i + 1 < len(bends) else end
        if _coincide(p, prev, tolerance) or _coincide(p, end, tolerance):
            continue
        if _between_on_line(prev, p, nxt, tolerance):
            continue
        result.append(p)
    return result
