"""
Terrain synthesis.

Layered passes over a fresh grid:
1. Base pass - elevation/moisture noise classified into terrain kinds
2. Water bodies - circular features with radial density decay
3. Mountain ranges - widened linear ridges
4. Forest patches - circular features
5. Swamp areas - circular features

Passes 2-5 draw from the shared random stream, so their order is part of the
output. Later passes overwrite earlier terrain at every tile they touch.
"""

import math
from typing import Tuple

import structlog
from pydantic import BaseModel, Field

from ..utils.geometry import distance, round_half_up
from ..utils.random import probability, rand_int
from .grid import Grid, Terrain
from .lcg_prng import LcgPRNG
from .noise import ELEVATION_CHANNEL, MOISTURE_CHANNEL, NOISE_CELL_SIZE, value_noise

logger = structlog.get_logger()

# Eight neighbours of a tile, row-major
NEIGHBOR_OFFSETS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


class TerrainOptions(BaseModel):
    """Terrain synthesis parameters."""

    noise_cell_size: int = Field(default=NOISE_CELL_SIZE, ge=1, description="Tiles per noise lattice cell")
    mountain_elevation: float = Field(default=0.7, description="Elevation above which base terrain is mountain")
    swamp_elevation: float = Field(default=0.3, description="Elevation below which wet tiles become swamp")
    swamp_moisture: float = Field(default=0.6, description="Moisture above which low tiles become swamp")
    forest_moisture: float = Field(default=0.7, description="Moisture above which base terrain is forest")

    water_density: float = Field(default=0.8, description="Peak conversion probability at a lake centre")
    mountain_density: float = Field(default=0.7, description="Conversion probability on the ridge line")
    mountain_flank_factor: float = Field(default=0.4, description="Ridge density multiplier for neighbours")
    forest_density: float = Field(default=0.6, description="Forest patch conversion probability")
    swamp_density: float = Field(default=0.5, description="Swamp area conversion probability")


def classify_base_terrain(elevation: float, moisture: float, options: TerrainOptions) -> Terrain:
    """Map an elevation/moisture sample to a base terrain kind."""
    if elevation > options.mountain_elevation:
        return Terrain.MOUNTAIN
    if elevation < options.swamp_elevation and moisture > options.swamp_moisture:
        return Terrain.SWAMP
    if moisture > options.forest_moisture:
        return Terrain.FOREST
    return Terrain.PLAINS


class TerrainSynthesizer:
    """Runs the terrain passes over a grid using a shared random stream."""

    def __init__(self, grid: Grid, prng: LcgPRNG, options: TerrainOptions = None):
        self.grid = grid
        self.prng = prng
        self.options = options or TerrainOptions()
        self.size = grid.size

    def generate(self) -> Grid:
        """Run every terrain pass in order."""
        self.apply_base_noise()
        self.generate_water()
        self.generate_mountains()
        self.generate_forests()
        self.generate_swamps()
        logger.debug(
            "Terrain synthesized",
            size=self.size,
            draws=self.prng.call_count,
            water=self.grid.count(Terrain.WATER),
            mountains=self.grid.count(Terrain.MOUNTAIN),
        )
        return self.grid

    def apply_base_noise(self) -> None:
        """Fill elevation and moisture from noise and classify every tile."""
        cell = self.options.noise_cell_size
        self.grid.elevation[:] = value_noise(self.size, ELEVATION_CHANNEL, cell)
        self.grid.moisture[:] = value_noise(self.size, MOISTURE_CHANNEL, cell)

        for y in range(self.size):
            for x in range(self.size):
                terrain = classify_base_terrain(
                    self.grid.elevation[y, x], self.grid.moisture[y, x], self.options
                )
                self.grid.set_terrain(x, y, terrain)

    def _random_point(self) -> Tuple[int, int]:
        return rand_int(self.prng, self.size), rand_int(self.prng, self.size)

    def generate_water(self) -> None:
        count = max(2, self.size // 15)
        for _ in range(count):
            cx, cy = self._random_point()
            radius = 3 + self.prng.random() * (self.size / 10)
            self.paint_circle(cx, cy, radius, Terrain.WATER, self.options.water_density, decay=True)

    def generate_mountains(self) -> None:
        count = max(1, self.size // 20)
        for _ in range(count):
            sx, sy = self._random_point()
            angle = self.prng.random() * math.pi * 2
            length = 8 + self.prng.random() * (self.size / 5)
            self.paint_line(sx, sy, angle, int(length), Terrain.MOUNTAIN, self.options.mountain_density)

    def generate_forests(self) -> None:
        count = max(3, self.size // 8)
        for _ in range(count):
            cx, cy = self._random_point()
            radius = 4 + self.prng.random() * 6
            self.paint_circle(cx, cy, radius, Terrain.FOREST, self.options.forest_density)

    def generate_swamps(self) -> None:
        count = max(1, self.size // 25)
        for _ in range(count):
            cx, cy = self._random_point()
            radius = 2 + self.prng.random() * 4
            self.paint_circle(cx, cy, radius, Terrain.SWAMP, self.options.swamp_density)

    def paint_circle(
        self,
        cx: int,
        cy: int,
        radius: float,
        terrain: Terrain,
        density: float,
        decay: bool = False,
    ) -> int:
        """
        Probabilistically paint a disc of terrain.

        With ``decay`` the conversion probability falls linearly from
        ``density`` at the centre to 0 at the rim.

        Returns:
            Number of tiles converted
        """
        converted = 0
        reach = int(math.ceil(radius))
        for y in range(cy - reach, cy + reach + 1):
            for x in range(cx - reach, cx + reach + 1):
                if not self.grid.in_bounds(x, y):
                    continue
                d = distance(cx, cy, x, y)
                if d > radius:
                    continue
                p = density * (1 - d / radius) if decay else density
                if probability(self.prng, p):
                    self.grid.set_terrain(x, y, terrain)
                    converted += 1
        return converted

    def paint_line(
        self,
        sx: int,
        sy: int,
        angle: float,
        length: int,
        terrain: Terrain,
        density: float,
    ) -> int:
        """
        Paint a straight ridge from a start point along an angle.

        Each in-bounds step converts with ``density`` and each of its eight
        neighbours with ``density * mountain_flank_factor``.

        Returns:
            Number of conversions
        """
        dx = math.cos(angle)
        dy = math.sin(angle)
        flank = density * self.options.mountain_flank_factor
        converted = 0

        for i in range(length):
            x = round_half_up(sx + dx * i)
            y = round_half_up(sy + dy * i)
            if not self.grid.in_bounds(x, y):
                continue

            if probability(self.prng, density):
                self.grid.set_terrain(x, y, terrain)
                converted += 1

            for ox, oy in NEIGHBOR_OFFSETS:
                nx, ny = x + ox, y + oy
                if self.grid.in_bounds(nx, ny) and probability(self.prng, flank):
                    self.grid.set_terrain(nx, ny, terrain)
                    converted += 1
        return converted
