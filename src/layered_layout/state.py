"""Pipeline snapshot passed from one layout phase to the next.

Each phase receives a ``LayoutState``, mutates the graph it carries, and
returns a new state built with ``dataclasses.replace``. A phase that changes
``layers``, ``layer_lists`` or ``chains`` builds fresh containers for them, so
an earlier snapshot keeps its own maps. Maps a phase leaves alone are handed on
by reference. The graph, and the ``Edge`` records held by ``chains``, are one
set of objects shared by every snapshot of a run and mutated in place.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum

from layered_layout.errors import InvariantViolation
from layered_layout.graph import Edge, LayoutGraph


class LayoutStage(Enum):
    """Progress of one layout run. Stages only ever move forward."""

    UNLAIDOUT = 0
    LAYERED = 1
    EXPANDED = 2
    ORDERED = 3
    POSITIONED = 4
    RECONSTRUCTED = 5


@dataclass(frozen=True)
class DummyId:
    """Id of a synthetic node: the ``index``-th hop of hidden edge ``edge_key``."""

    edge_key: int
    index: int

    def __repr__(self) -> str:
        return f"__dummy_{self.edge_key}_{self.index}"


@dataclass
class DummyChain:
    """A hidden long edge together with the synthetic nodes/edges standing in for it.

    Dummy nodes are ordered from the edge's source towards its target.
    """

    edge: Edge
    nodes: list[DummyId] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)

    @property
    def span(self) -> int:
        return len(self.nodes) + 1


@dataclass(frozen=True)
class LayoutState:
    """Graph plus the auxiliary maps produced so far."""

    graph: LayoutGraph
    stage: LayoutStage = LayoutStage.UNLAIDOUT
    layers: dict[Hashable, int] = field(default_factory=dict)
    layer_lists: tuple[tuple[Hashable, ...], ...] = ()
    chains: dict[int, DummyChain] = field(default_factory=dict)

    @property
    def layer_count(self) -> int:
        return len(self.layer_lists)

    @property
    def dummy_nodes(self) -> list[DummyId]:
        return [d for chain in self.chains.values() for d in chain.nodes]

    @property
    def dummy_edges(self) -> list[Edge]:
        return [e for chain in self.chains.values() for e in chain.edges]

    def expect(self, stage: LayoutStage) -> None:
        """Raise ``InvariantViolation`` unless the run is at ``stage``."""
        if self.stage is not stage:
            raise InvariantViolation(f"expected stage {stage.name}, layout is at {self.stage.name}")
