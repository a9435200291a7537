"""Edge reconstruction: hidden long edges come back with bend points."""

from __future__ import annotations

import dataclasses
import logging

from layered_layout.config import DEFAULT_CONFIG, LayoutConfig
from layered_layout.state import LayoutStage, LayoutState

logger = logging.getLogger(__name__)


def reconstruct(state: LayoutState, config: LayoutConfig = DEFAULT_CONFIG) -> LayoutState:
    """Reinsert every hidden edge and release its dummy chain.

    Each reinserted edge receives one bend per dummy node, in chain order,
    taken from the dummy's final coordinates. Removing the dummy nodes also
    removes the dummy edges. Redundant bends are cleaned afterwards when
    ``config.clean_bends`` is set.
    """
    state.expect(LayoutStage.POSITIONED)
    graph = state.graph

    for chain in state.chains.values():
        edge = graph.reinsert(chain.edge)
        for dummy_id in chain.nodes:
            graph.add_bend(edge, graph.get_x(dummy_id), graph.get_y(dummy_id))
            graph.remove_node(dummy_id)

    removed = graph.clean_bends(config.tolerance) if config.clean_bends else 0
    logger.debug("reinserted %d long edges, cleaned %d bends", len(state.chains), removed)

    released = set(state.dummy_nodes)
    layers = {nid: layer for nid, layer in state.layers.items() if nid not in released}
    layer_lists = tuple(tuple(nid for nid in layer if nid not in released) for layer in state.layer_lists)

    return dataclasses.replace(
        state,
        stage=LayoutStage.RECONSTRUCTED,
        layers=layers,
        layer_lists=layer_lists,
        chains={},
    )
