"""Tests for lattice value noise."""

import numpy as np
import pytest

from py_gridmap.core.noise import (
    ELEVATION_CHANNEL,
    MOISTURE_CHANNEL,
    lattice_value,
    value_noise,
)


class TestLatticeValue:
    """Test the coordinate hash."""

    def test_range(self):
        xs, ys = np.meshgrid(np.arange(50), np.arange(50))
        values = lattice_value(xs, ys, ELEVATION_CHANNEL)
        assert values.shape == (50, 50)
        assert values.min() >= 0.0
        assert values.max() < 1.0

    def test_scalar(self):
        value = lattice_value(3, 4, MOISTURE_CHANNEL)
        assert isinstance(value, float)
        assert value == lattice_value(3, 4, MOISTURE_CHANNEL)

    def test_channels_independent(self):
        xs, ys = np.meshgrid(np.arange(10), np.arange(10))
        elevation = lattice_value(xs, ys, ELEVATION_CHANNEL)
        moisture = lattice_value(xs, ys, MOISTURE_CHANNEL)
        assert not np.allclose(elevation, moisture)


class TestValueNoise:
    """Test the interpolated noise field."""

    @pytest.mark.parametrize("size", [1, 20, 57, 100])
    def test_shape_and_range(self, size):
        field = value_noise(size, ELEVATION_CHANNEL)
        assert field.shape == (size, size)
        assert field.min() >= 0.0
        assert field.max() < 1.0

    def test_deterministic(self):
        assert np.array_equal(value_noise(40, ELEVATION_CHANNEL), value_noise(40, ELEVATION_CHANNEL))

    def test_lattice_points_match_hash(self):
        """Test that tiles on lattice corners take the raw lattice value."""
        field = value_noise(33, MOISTURE_CHANNEL, cell_size=8)
        for ix in range(5):
            for iy in range(5):
                assert field[iy * 8, ix * 8] == pytest.approx(lattice_value(ix, iy, MOISTURE_CHANNEL))

    def test_spatially_coherent(self):
        """Test neighbouring tiles differ less than the full lattice spread."""
        field = value_noise(64, ELEVATION_CHANNEL, cell_size=8)
        steps = np.abs(np.diff(field, axis=1))
        assert steps.max() <= 1.0 / 8 + 1e-9

    def test_prefix_stable_across_sizes(self):
        """Test a tile's value does not depend on the grid size."""
        small = value_noise(20, ELEVATION_CHANNEL)
        large = value_noise(60, ELEVATION_CHANNEL)
        assert np.allclose(small, large[:20, :20])
