"""Layout configuration."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from layered_layout.errors import ConfigurationError

HEURISTICS = ("barycenter", "median")


@dataclass(frozen=True)
class LayoutConfig:
    """Tuning knobs for one layout run.

    Attributes:
        seed: Seed for the initial within-layer shuffle before crossing
            minimisation. ``None`` keeps the incoming order (no shuffle).
        heuristic: Ordering key used by crossing minimisation,
            ``"barycenter"`` or ``"median"``.
        crossing_passes: Maximum number of down+up sweeps when reordering layers.
        coordinate_passes: Number of down+up sweeps of the vertical placement.
        node_spacing: Minimum vertical distance between two nodes of a layer.
        layer_spacing: Horizontal distance between consecutive layers.
        clean_bends: Remove redundant bend points after reconstruction.
        tolerance: Distance under which two points are considered equal.
    """

    seed: int | None = 0
    heuristic: str = "barycenter"
    crossing_passes: int = 24
    coordinate_passes: int = 8
    node_spacing: float = 1.0
    layer_spacing: float = 1.0
    clean_bends: bool = True
    tolerance: float = 1e-6

    def __post_init__(self) -> None:
        if self.heuristic not in HEURISTICS:
            raise ConfigurationError(f"heuristic must be one of {', '.join(HEURISTICS)}, got {self.heuristic!r}")
        if self.crossing_passes < 0:
            raise ConfigurationError(f"crossing_passes must be >= 0, got {self.crossing_passes}")
        if self.coordinate_passes < 0:
            raise ConfigurationError(f"coordinate_passes must be >= 0, got {self.coordinate_passes}")
        if self.node_spacing <= 0:
            raise ConfigurationError(f"node_spacing must be > 0, got {self.node_spacing}")
        if self.layer_spacing <= 0:
            raise ConfigurationError(f"layer_spacing must be > 0, got {self.layer_spacing}")
        if self.tolerance < 0:
            raise ConfigurationError(f"tolerance must be >= 0, got {self.tolerance}")

    def with_overrides(self, **changes: object) -> LayoutConfig:
        """Return a copy with ``changes`` applied (validated again)."""
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = LayoutConfig()
