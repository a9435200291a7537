"""Layer assignment — longest-path layering.

Every node gets the length of the longest path reaching it from any source
(in-degree 0 node), so for each edge u → v we have layer[u] < layer[v].
Isolated nodes land in layer 0.

The input must be acyclic. Cycles are not broken here: a cycle is a
precondition violation and is reported as ``StructuralError``.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Hashable

import networkx as nx

from layered_layout.config import DEFAULT_CONFIG, LayoutConfig
from layered_layout.errors import StructuralError
from layered_layout.state import LayoutStage, LayoutState

logger = logging.getLogger(__name__)


def find_cycle(digraph: nx.MultiDiGraph) -> list[tuple[Hashable, Hashable]]:
    """Return the (source, target) pairs of one directed cycle, or [] if acyclic."""
    try:
        cycle = nx.find_cycle(digraph, orientation="original")
    except nx.NetworkXNoCycle:
        return []
    return [(edge[0], edge[1]) for edge in cycle]


def longest_path_layers(digraph: nx.MultiDiGraph) -> dict[Hashable, int]:
    """Longest-path layer of every node in an acyclic graph.

    Raises ``StructuralError`` if the graph has a cycle (self-loops included).
    """
    cycle = find_cycle(digraph)
    if cycle:
        path = " -> ".join(repr(src) for src, _ in cycle) + f" -> {cycle[0][0]!r}"
        raise StructuralError(f"graph contains a cycle: {path}", cycle=cycle)

    layers: dict[Hashable, int] = {}
    for node_id in nx.topological_sort(digraph):
        preds = [layers[p] for p, _ in digraph.in_edges(node_id)]
        layers[node_id] = max(preds) + 1 if preds else 0
    return layers


def assign_layers(state: LayoutState, config: LayoutConfig = DEFAULT_CONFIG) -> LayoutState:
    """Layer the graph and build the per-layer node lists.

    Layer lists follow node insertion order; crossing minimisation reorders
    them later.
    """
    state.expect(LayoutStage.UNLAIDOUT)
    graph = state.graph

    layers = longest_path_layers(graph.digraph)
    layer_count = (max(layers.values()) + 1) if layers else 0

    buckets: list[list[Hashable]] = [[] for _ in range(layer_count)]
    for node_id in graph.node_ids():
        layer = layers[node_id]
        buckets[layer].append(node_id)
        node = graph.node(node_id)
        node.layer = layer
        node.x = layer * config.layer_spacing

    logger.debug("layered %d nodes into %d layers", len(layers), layer_count)

    return dataclasses.replace(
        state,
        stage=LayoutStage.LAYERED,
        layers=layers,
        layer_lists=tuple(tuple(bucket) for bucket in buckets),
    )
