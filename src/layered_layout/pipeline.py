"""Full layout pipeline.

Phases, run strictly in order over one graph:
  1. Layer assignment        (layering.assign_layers)
  2. Dummy node insertion    (dummies.expand_long_edges)
  3. Crossing minimisation   (crossing.minimise_crossings)
  4. Vertical coordinates    (coordinates.assign_vertical_coordinates)
  5. Edge reconstruction     (reconstruct.reconstruct)

A failing phase aborts the run and leaves the graph in an undefined state;
lay out a ``LayoutGraph.copy()`` if the original must survive a failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial

from layered_layout.config import DEFAULT_CONFIG, LayoutConfig
from layered_layout.coordinates import assign_vertical_coordinates
from layered_layout.crossing import minimise_crossings
from layered_layout.dummies import expand_long_edges
from layered_layout.graph import LayoutGraph
from layered_layout.layering import assign_layers
from layered_layout.reconstruct import reconstruct
from layered_layout.state import LayoutState

logger = logging.getLogger(__name__)

Phase = Callable[[LayoutState], LayoutState]


class LayeredLayouter:
    """Sugiyama-style layered layout of a ``LayoutGraph``."""

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def phases(self) -> list[tuple[str, Phase]]:
        """The ordered (name, phase) pairs making up one run."""
        return [
            ("layering", partial(assign_layers, config=self.config)),
            ("expansion", partial(expand_long_edges, config=self.config)),
            ("crossing minimisation", partial(minimise_crossings, config=self.config)),
            ("vertical placement", partial(assign_vertical_coordinates, config=self.config)),
            ("reconstruction", partial(reconstruct, config=self.config)),
        ]

    def do_layout(self, graph: LayoutGraph) -> LayoutState:
        """Lay out ``graph`` in place and return the final pipeline state."""
        state = LayoutState(graph=graph)
        for name, phase in self.phases():
            logger.debug("running %s on %r", name, graph)
            state = phase(state)
        return state


def layout(graph: LayoutGraph, config: LayoutConfig | None = None) -> LayoutState:
    """Run the full layout pipeline on ``graph`` (mutated in place)."""
    return LayeredLayouter(config).do_layout(graph)
