"""Dummy node insertion.

When an edge spans more than one layer (layer[tgt] - layer[src] > 1), it is
hidden and replaced by the chain

    u → d₁ → d₂ → … → dₖ → v

where each dᵢ lives in layer ``layer[u] + i``. The hidden edge and its chain
are kept together in a ``DummyChain`` so reconstruction can turn the dummy
positions back into bend points.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Hashable

from layered_layout.config import DEFAULT_CONFIG, LayoutConfig
from layered_layout.errors import InvariantViolation
from layered_layout.state import DummyChain, DummyId, LayoutStage, LayoutState

logger = logging.getLogger(__name__)


def edge_span(layers: dict[Hashable, int], source: Hashable, target: Hashable) -> int:
    return layers[target] - layers[source]


def expand_long_edges(state: LayoutState, config: LayoutConfig = DEFAULT_CONFIG) -> LayoutState:
    """Replace every multi-layer edge with a chain of unit-span dummy edges."""
    state.expect(LayoutStage.LAYERED)
    graph = state.graph
    layers = dict(state.layers)
    layer_lists: list[list[Hashable]] = [list(layer) for layer in state.layer_lists]
    chains: dict[int, DummyChain] = {}

    # Collect all edges up-front; the graph is mutated below.
    hidden = []
    for edge in graph.edges():
        span = edge_span(layers, edge.source, edge.target)
        if span < 1:
            raise InvariantViolation(f"{edge!r} spans {span} layers after layering")
        if span > 1:
            hidden.append(edge)

    for edge in hidden:
        start = layers[edge.source]
        span = edge_span(layers, edge.source, edge.target)
        chain = DummyChain(edge=edge)
        prev = edge.source

        for i in range(1, span):
            layer = start + i
            dummy_id = DummyId(edge.key, i)
            graph.create_dummy_node(dummy_id, layer, layer * config.layer_spacing, graph.get_y(prev))
            layers[dummy_id] = layer

            # Same slot as the previous chain node, so the chain starts out straight.
            slot = layer_lists[layer - 1].index(prev)
            layer_lists[layer].insert(min(slot, len(layer_lists[layer])), dummy_id)

            chain.edges.append(graph.add_edge(prev, dummy_id, dummy=True))
            chain.nodes.append(dummy_id)
            prev = dummy_id

        chain.edges.append(graph.add_edge(prev, edge.target, dummy=True))
        graph.remove_edge(edge)
        chains[edge.key] = chain

    logger.debug(
        "expanded %d long edges with %d dummy nodes",
        len(chains),
        sum(len(c.nodes) for c in chains.values()),
    )

    return dataclasses.replace(
        state,
        stage=LayoutStage.EXPANDED,
        layers=layers,
        layer_lists=tuple(tuple(layer) for layer in layer_lists),
        chains=chains,
    )


def check_unit_spans(state: LayoutState) -> None:
    """Raise ``InvariantViolation`` if an active edge does not span exactly one layer."""
    for edge in state.graph.edges():
        span = edge_span(state.layers, edge.source, edge.target)
        if span != 1:
            raise InvariantViolation(f"{edge!r} spans {span} layers after expansion")
