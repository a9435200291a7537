"""Tests for config.py and errors.py."""

from __future__ import annotations

import pytest

from layered_layout import ConfigurationError, LayoutConfig, LayoutError, StructuralError


class TestLayoutConfig:
    def test_defaults(self):
        """Defaults: seeded shuffle, barycenter, unit spacing, cleaning on."""
        cfg = LayoutConfig()
        assert cfg.seed == 0
        assert cfg.heuristic == "barycenter"
        assert cfg.node_spacing == 1.0
        assert cfg.layer_spacing == 1.0
        assert cfg.clean_bends is True

    @pytest.mark.parametrize(
        "field,value",
        [
            ("heuristic", "mean"),
            ("crossing_passes", -1),
            ("coordinate_passes", -2),
            ("node_spacing", 0.0),
            ("layer_spacing", -5.0),
            ("tolerance", -1e-3),
        ],
    )
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ConfigurationError):
            LayoutConfig(**{field: value})

    def test_configuration_error_is_value_error(self):
        """ConfigurationError can be caught as a plain ValueError."""
        with pytest.raises(ValueError):
            LayoutConfig(node_spacing=-1)

    def test_with_overrides(self):
        """with_overrides returns a validated copy; the original is unchanged."""
        cfg = LayoutConfig()
        other = cfg.with_overrides(seed=None, heuristic="median")
        assert other.seed is None
        assert other.heuristic == "median"
        assert cfg.seed == 0
        with pytest.raises(ConfigurationError):
            cfg.with_overrides(node_spacing=0)

    def test_frozen(self):
        cfg = LayoutConfig()
        with pytest.raises(AttributeError):
            cfg.seed = 3  # type: ignore[misc]


class TestErrors:
    def test_structural_error_carries_cycle(self):
        err = StructuralError("cycle", cycle=[("A", "B"), ("B", "A")])
        assert isinstance(err, LayoutError)
        assert err.cycle == [("A", "B"), ("B", "A")]
        assert err.message == "cycle"

    def test_structural_error_default_cycle(self):
        assert StructuralError("boom").cycle == []
