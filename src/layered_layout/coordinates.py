"""Vertical coordinate assignment (priority method).

Turns the ordinal positions from crossing minimisation into real y values.
Each sweep visits the layers in turn; inside a layer, nodes are handled in
decreasing priority and moved towards the mean y of their neighbours in the
adjacent, already placed layer. A node may push lower-priority nodes out of
the way but never passes a node placed before it, so the within-layer order
is preserved and consecutive nodes stay at least ``node_spacing`` apart.

Dummy nodes get the highest priority, which keeps long edges straight.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Hashable, Sequence

from layered_layout.config import DEFAULT_CONFIG, LayoutConfig
from layered_layout.errors import InvariantViolation
from layered_layout.graph import LayoutGraph
from layered_layout.state import LayoutStage, LayoutState

logger = logging.getLogger(__name__)

DUMMY_PRIORITY = math.inf


def place_layer(
    y: list[float],
    desired: Sequence[float | None],
    priority: Sequence[float],
    spacing: float,
) -> None:
    """Move the nodes of one layer towards ``desired`` (in place).

    ``y`` must be strictly increasing with gaps of at least ``spacing``; this
    still holds on return.
    """
    n = len(y)
    placed = [False] * n
    for i in sorted(range(n), key=lambda k: (-priority[k], k)):
        target = desired[i]
        if target is not None and target < y[i]:
            j = i - 1
            while j >= 0 and not placed[j]:
                j -= 1
            floor = y[j] + (i - j) * spacing if j >= 0 else -math.inf
            y[i] = max(target, floor)
            for k in range(i - 1, j, -1):
                y[k] = min(y[k], y[k + 1] - spacing)
        elif target is not None and target > y[i]:
            j = i + 1
            while j < n and not placed[j]:
                j += 1
            ceiling = y[j] - (j - i) * spacing if j < n else math.inf
            y[i] = min(target, ceiling)
            for k in range(i + 1, j):
                y[k] = max(y[k], y[k - 1] + spacing)
        placed[i] = True


def _place_against(
    graph: LayoutGraph,
    layer: Sequence[Hashable],
    coords: dict[Hashable, float],
    direction: str,
    spacing: float,
) -> None:
    y = [coords[nid] for nid in layer]
    desired: list[float | None] = []
    priority: list[float] = []
    for node_id in layer:
        neighbors = graph.predecessors(node_id) if direction == "incoming" else graph.successors(node_id)
        if neighbors:
            desired.append(sum(coords[nb] for nb in neighbors) / len(neighbors))
        else:
            desired.append(None)
        priority.append(DUMMY_PRIORITY if graph.node(node_id).is_dummy else float(len(neighbors)))

    place_layer(y, desired, priority, spacing)
    for node_id, value in zip(layer, y):
        coords[node_id] = value


def vertical_coordinates(
    graph: LayoutGraph,
    layer_lists: Sequence[Sequence[Hashable]],
    config: LayoutConfig = DEFAULT_CONFIG,
) -> dict[Hashable, float]:
    """Compute the y coordinate of every node in ``layer_lists``."""
    spacing = config.node_spacing
    coords: dict[Hashable, float] = {}
    for layer in layer_lists:
        for idx, node_id in enumerate(layer):
            coords[node_id] = idx * spacing

    layer_count = len(layer_lists)
    for _pass in range(config.coordinate_passes):
        for layer_idx in range(1, layer_count):
            _place_against(graph, layer_lists[layer_idx], coords, "incoming", spacing)
        for layer_idx in range(layer_count - 2, -1, -1):
            _place_against(graph, layer_lists[layer_idx], coords, "outgoing", spacing)

    # Normalize: shift everything so the topmost node sits at y=0.
    if coords:
        min_y = min(coords.values())
        for node_id in coords:
            coords[node_id] -= min_y
    return coords


def _check_order(layer_lists: Sequence[Sequence[Hashable]], coords: dict[Hashable, float]) -> None:
    for layer_idx, layer in enumerate(layer_lists):
        for upper, lower in zip(layer, layer[1:]):
            if not coords[upper] < coords[lower]:
                raise InvariantViolation(f"nodes {upper!r} and {lower!r} swapped order in layer {layer_idx}")


def assign_vertical_coordinates(state: LayoutState, config: LayoutConfig = DEFAULT_CONFIG) -> LayoutState:
    """Set final (x, y) on every node: x from the layer index, y from the priority method."""
    state.expect(LayoutStage.ORDERED)
    graph = state.graph

    coords = vertical_coordinates(graph, state.layer_lists, config)
    _check_order(state.layer_lists, coords)

    for layer_idx, layer in enumerate(state.layer_lists):
        for node_id in layer:
            graph.set_coordinates(node_id, layer_idx * config.layer_spacing, coords[node_id])

    logger.debug("placed %d nodes, height %.2f", len(coords), max(coords.values(), default=0.0))
    return dataclasses.replace(state, stage=LayoutStage.POSITIONED)
