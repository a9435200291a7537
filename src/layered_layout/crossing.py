"""Crossing minimisation (barycenter / median heuristic).

Requires every edge to connect adjacent layers (see ``dummies``). Layers are
swept top-down (ordering each layer by the positions of its predecessors) and
then bottom-up (by its successors), for several passes. The best ordering seen
is kept, so the result never has more crossings than the incoming ordering.
"""

from __future__ import annotations

import bisect
import dataclasses
import logging
import random
from collections.abc import Hashable, Sequence

from layered_layout.config import DEFAULT_CONFIG, LayoutConfig
from layered_layout.dummies import check_unit_spans
from layered_layout.graph import LayoutGraph
from layered_layout.state import LayoutStage, LayoutState

logger = logging.getLogger(__name__)

Ordering = list[list[Hashable]]


def _positions(layer: Sequence[Hashable]) -> dict[Hashable, int]:
    return {nid: i for i, nid in enumerate(layer)}


def layer_crossings(graph: LayoutGraph, upper: Sequence[Hashable], lower: Sequence[Hashable]) -> int:
    """Crossings between the edges joining ``upper`` to ``lower``.

    Edges are walked in upper-layer order; each one crosses every edge seen
    earlier whose lower endpoint lies strictly further along ``lower``.
    """
    lower_pos = _positions(lower)
    seen: list[int] = []
    total = 0
    for src_id in upper:
        targets = sorted(lower_pos[nb] for nb in graph.successors(src_id) if nb in lower_pos)
        for t in targets:
            total += len(seen) - bisect.bisect_right(seen, t)
        for t in targets:
            bisect.insort(seen, t)
    return total


def count_crossings(graph: LayoutGraph, layer_lists: Sequence[Sequence[Hashable]]) -> int:
    """Count edge crossings between consecutive layers."""
    return sum(layer_crossings(graph, upper, lower) for upper, lower in zip(layer_lists, layer_lists[1:]))


def _median(values: list[float]) -> float:
    values = sorted(values)
    mid = len(values) // 2
    if len(values) % 2:
        return values[mid]
    return (values[mid - 1] + values[mid]) / 2


def _ordering_key(
    node_id: Hashable,
    graph: LayoutGraph,
    neighbor_pos: dict[Hashable, int],
    direction: str,
    heuristic: str,
) -> float | None:
    """Barycenter (or median) of a node's neighbours in the fixed adjacent layer.

    direction: "incoming" to look at predecessors, "outgoing" for successors.
    Returns None if the node has no neighbours there.
    """
    neighbors = graph.predecessors(node_id) if direction == "incoming" else graph.successors(node_id)
    positions = [neighbor_pos[nb] for nb in neighbors if nb in neighbor_pos]
    if not positions:
        return None
    if heuristic == "median":
        return _median(positions)
    return sum(positions) / len(positions)


def _reorder_layer(
    layer: list[Hashable],
    fixed: list[Hashable],
    graph: LayoutGraph,
    direction: str,
    heuristic: str,
) -> list[Hashable]:
    """Sort ``layer`` by its neighbours in ``fixed``; nodes without neighbours keep their index."""
    fixed_pos = _positions(fixed)
    keyed: list[tuple[float, int, Hashable]] = []
    for idx, node_id in enumerate(layer):
        value = _ordering_key(node_id, graph, fixed_pos, direction, heuristic)
        keyed.append((float(idx) if value is None else value, idx, node_id))
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [node_id for _, _, node_id in keyed]


def sweep(ordering: Ordering, graph: LayoutGraph, heuristic: str = "barycenter") -> None:
    """One top-down plus bottom-up pass over ``ordering`` (in place)."""
    layer_count = len(ordering)
    for layer_idx in range(1, layer_count):
        ordering[layer_idx] = _reorder_layer(ordering[layer_idx], ordering[layer_idx - 1], graph, "incoming", heuristic)
    for layer_idx in range(layer_count - 2, -1, -1):
        ordering[layer_idx] = _reorder_layer(ordering[layer_idx], ordering[layer_idx + 1], graph, "outgoing", heuristic)


def shuffle_layers(ordering: Ordering, rng: random.Random) -> None:
    for layer in ordering:
        rng.shuffle(layer)


def order_layers(
    graph: LayoutGraph,
    layer_lists: Sequence[Sequence[Hashable]],
    config: LayoutConfig = DEFAULT_CONFIG,
) -> Ordering:
    """Return a new per-layer ordering with (locally) fewer crossings."""
    ordering: Ordering = [list(layer) for layer in layer_lists]
    best: Ordering = [list(layer) for layer in ordering]
    best_count = count_crossings(graph, best)
    initial_count = best_count

    if config.seed is not None:
        shuffle_layers(ordering, random.Random(config.seed))
        shuffled_count = count_crossings(graph, ordering)
        if shuffled_count < best_count:
            best, best_count = [list(layer) for layer in ordering], shuffled_count

    for pass_idx in range(config.crossing_passes):
        if best_count == 0:
            break
        before = [list(layer) for layer in ordering]
        sweep(ordering, graph, config.heuristic)
        current = count_crossings(graph, ordering)
        logger.debug("crossing pass %d: %d crossings", pass_idx, current)
        if current < best_count:
            best, best_count = [list(layer) for layer in ordering], current
        if ordering == before:
            break

    logger.debug("crossings reduced from %d to %d", initial_count, best_count)
    return best


def minimise_crossings(state: LayoutState, config: LayoutConfig = DEFAULT_CONFIG) -> LayoutState:
    """Reorder every layer, then set each node's y to its index in the layer."""
    state.expect(LayoutStage.EXPANDED)
    check_unit_spans(state)

    ordering = order_layers(state.graph, state.layer_lists, config)
    for layer in ordering:
        for pos, node_id in enumerate(layer):
            state.graph.node(node_id).y = float(pos)

    return dataclasses.replace(
        state,
        stage=LayoutStage.ORDERED,
        layer_lists=tuple(tuple(layer) for layer in ordering),
    )
