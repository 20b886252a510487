"""Tests for landmass labelling and bridge repair."""

import numpy as np
import pytest

from py_gridmap.core.connectivity import (
    ConnectivityOptions,
    carve_bridge,
    label_landmasses,
    nearest_tile,
    repair_connectivity,
)
from py_gridmap.core.grid import Grid, Terrain
from py_gridmap.utils.geometry import line_points


def water_grid(size):
    grid = Grid(size)
    grid.terrain[:] = Terrain.WATER
    return grid


def fill(grid, x0, y0, x1, y1, terrain=Terrain.PLAINS):
    grid.terrain[y0:y1 + 1, x0:x1 + 1] = terrain


class TestLinePoints:
    """Test bridge paths."""

    def test_single_point(self):
        assert line_points(3, 3, 3, 3) == [(3, 3)]

    def test_straight(self):
        assert line_points(7, 5, 4, 5) == [(7, 5), (6, 5), (5, 5), (4, 5)]

    def test_diagonal_inserts_corners(self):
        assert line_points(4, 4, 2, 2) == [(4, 4), (3, 4), (3, 3), (2, 3), (2, 2)]

    @pytest.mark.parametrize("end", [(3, 1), (-2, 5), (6, -6), (-4, -1), (0, 7)])
    def test_four_connected(self, end):
        points = line_points(0, 0, *end)
        assert points[0] == (0, 0)
        assert points[-1] == end
        for (ax, ay), (bx, by) in zip(points, points[1:]):
            assert abs(ax - bx) + abs(ay - by) == 1


class TestLabelLandmasses:
    """Test 4-connected component labelling."""

    def test_all_land(self):
        masses = label_landmasses(Grid(6))
        assert masses.count == 1
        assert masses.main_size == 36
        assert masses.main_mask().all()

    def test_all_water(self):
        masses = label_landmasses(water_grid(6))
        assert masses.count == 0
        assert masses.main_label == 0
        assert masses.main_size == 0
        assert not masses.main_mask().any()

    def test_diagonal_is_not_adjacent(self):
        grid = water_grid(4)
        grid.set_terrain(1, 1, Terrain.FOREST)
        grid.set_terrain(2, 2, Terrain.MOUNTAIN)
        masses = label_landmasses(grid)
        assert masses.count == 2
        assert masses.sizes == [1, 1]

    def test_labels_in_row_major_order(self):
        grid = water_grid(10)
        fill(grid, 6, 0, 9, 1)      # 8 tiles
        fill(grid, 0, 5, 4, 9)      # 25 tiles
        masses = label_landmasses(grid)
        assert masses.sizes == [8, 25]
        assert masses.labels[0, 6] == 1
        assert masses.labels[9, 0] == 2
        assert masses.main_label == 2

    def test_tie_goes_to_first_component(self):
        grid = water_grid(7)
        fill(grid, 0, 0, 1, 1)
        fill(grid, 5, 5, 6, 6)
        masses = label_landmasses(grid)
        assert masses.sizes == [4, 4]
        assert masses.main_label == 1

    def test_buildings_count_as_land(self):
        grid = water_grid(5)
        grid.set_terrain(1, 1, Terrain.SETTLEMENT)
        grid.set_terrain(2, 1, Terrain.SWAMP)
        assert label_landmasses(grid).sizes == [2]

    def test_large_grid(self):
        """Test that a winding region far beyond the recursion limit is labelled."""
        grid = water_grid(100)
        for y in range(0, 100, 2):
            fill(grid, 0, y, 99, y)
            gap_x = 99 if (y // 2) % 2 == 0 else 0
            if y + 1 < 100:
                grid.set_terrain(gap_x, y + 1, Terrain.PLAINS)
        masses = label_landmasses(grid)
        assert masses.count == 1
        assert masses.main_size == int(grid.land_mask().sum())


class TestNearestTile:
    """Test nearest mainland lookup."""

    def test_nearest(self):
        points = np.array([[0, 0], [5, 5], [4, 5]])
        assert nearest_tile(points, 7, 5) == (5, 5, 2.0)

    def test_first_wins_ties(self):
        points = np.array([[2, 0], [0, 2]])
        x, y, dist = nearest_tile(points, 0, 0)
        assert (x, y) == (2, 0)
        assert dist == 2.0


class TestCarveBridge:
    """Test bridge carving."""

    def test_only_water_converted(self):
        grid = water_grid(6)
        grid.set_terrain(3, 2, Terrain.FOREST)
        converted = carve_bridge(grid, 5, 2, 0, 2)
        assert converted == 5
        assert grid.get_terrain(3, 2) == Terrain.FOREST
        assert all(grid.get_terrain(x, 2) == Terrain.PLAINS for x in (0, 1, 2, 4, 5))


class TestRepairConnectivity:
    """Test the repair pass."""

    def test_single_landmass_untouched(self):
        grid = Grid(8)
        before = grid.terrain.copy()
        report = repair_connectivity(grid)
        assert report.components_before == 1
        assert report.bridges == 0
        assert np.array_equal(grid.terrain, before)

    def test_all_water_noop(self):
        report = repair_connectivity(water_grid(8))
        assert report.components_before == 0
        assert report.main_landmass_size == 0
        assert report.tiles_converted == 0

    def test_close_fragment_bridged(self):
        grid = water_grid(10)
        fill(grid, 0, 0, 4, 9)
        grid.set_terrain(7, 5, Terrain.FOREST)

        report = repair_connectivity(grid)

        assert report.components_before == 2
        assert report.main_landmass_size == 50
        assert report.bridges == 1
        assert report.tiles_converted == 2
        assert grid.get_terrain(6, 5) == Terrain.PLAINS
        assert grid.get_terrain(5, 5) == Terrain.PLAINS
        assert grid.get_terrain(7, 5) == Terrain.FOREST
        assert label_landmasses(grid).count == 1

    def test_diagonal_bridge_is_walkable(self):
        grid = water_grid(8)
        fill(grid, 0, 0, 2, 2)
        grid.set_terrain(4, 4, Terrain.PLAINS)

        report = repair_connectivity(grid)

        assert report.tiles_converted == 3
        masses = label_landmasses(grid)
        assert masses.count == 1
        assert masses.labels[4, 4] == masses.labels[0, 0]

    def test_far_fragment_left_alone(self):
        grid = water_grid(12)
        fill(grid, 0, 0, 3, 11)
        grid.set_terrain(9, 6, Terrain.MOUNTAIN)

        report = repair_connectivity(grid)

        assert report.bridges == 0
        assert report.unreachable_tiles == 1
        assert grid.count(Terrain.WATER) == 12 * 12 - 48 - 1
        assert label_landmasses(grid).count == 2

    def test_custom_distance(self):
        grid = water_grid(12)
        fill(grid, 0, 0, 3, 11)
        grid.set_terrain(9, 6, Terrain.MOUNTAIN)

        report = repair_connectivity(grid, ConnectivityOptions(max_bridge_distance=6.0))

        assert report.bridges == 1
        assert label_landmasses(grid).count == 1

    def test_bridges_never_touch_land(self):
        grid = water_grid(10)
        fill(grid, 0, 0, 4, 9, Terrain.FOREST)
        fill(grid, 6, 2, 7, 3, Terrain.SWAMP)
        grid.set_terrain(6, 6, Terrain.SETTLEMENT)
        land_before = grid.land_mask()
        terrain_before = grid.terrain.copy()

        repair_connectivity(grid)

        assert np.array_equal(grid.terrain[land_before], terrain_before[land_before])
        assert label_landmasses(grid).count == 1
