"""Layered (Sugiyama-style) graph layout."""

from __future__ import annotations

from layered_layout.config import DEFAULT_CONFIG, LayoutConfig
from layered_layout.coordinates import assign_vertical_coordinates, place_layer, vertical_coordinates
from layered_layout.crossing import count_crossings, layer_crossings, minimise_crossings, order_layers
from layered_layout.dummies import check_unit_spans, expand_long_edges
from layered_layout.errors import ConfigurationError, InvariantViolation, LayoutError, StructuralError
from layered_layout.graph import Edge, LayoutGraph, Node, Point, clean_path
from layered_layout.layering import assign_layers, find_cycle, longest_path_layers
from layered_layout.pipeline import LayeredLayouter, layout
from layered_layout.reconstruct import reconstruct
from layered_layout.state import DummyChain, DummyId, LayoutStage, LayoutState

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigurationError",
    "DummyChain",
    "DummyId",
    "Edge",
    "InvariantViolation",
    "LayeredLayouter",
    "LayoutConfig",
    "LayoutError",
    "LayoutGraph",
    "LayoutStage",
    "LayoutState",
    "Node",
    "Point",
    "StructuralError",
    "assign_layers",
    "assign_vertical_coordinates",
    "check_unit_spans",
    "clean_path",
    "count_crossings",
    "expand_long_edges",
    "find_cycle",
    "layer_crossings",
    "layout",
    "longest_path_layers",
    "minimise_crossings",
    "order_layers",
    "place_layer",
    "reconstruct",
    "vertical_coordinates",
]
