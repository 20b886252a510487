"""
Tile grid used by every generation stage.

The grid stores one NumPy array per tile attribute, indexed ``[y, x]``:
terrain kind, elevation and moisture, plus object arrays for the nullable
unit, owner and resource references. Dimensions are fixed at construction.
"""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, Field


class Terrain(IntEnum):
    """Closed set of terrain kinds."""

    PLAINS = 0
    FOREST = 1
    MOUNTAIN = 2
    WATER = 3
    SWAMP = 4
    SETTLEMENT = 5
    STRONGHOLD = 6

    @property
    def label(self) -> str:
        """Lower-case name used in serialized maps."""
        return self.name.lower()


TERRAIN_COUNT = len(Terrain)
BUILDING_TERRAINS = frozenset({Terrain.SETTLEMENT, Terrain.STRONGHOLD})

DEFAULT_ELEVATION = 0.0
DEFAULT_MOISTURE = 0.5


class Tile(BaseModel):
    """Read view of a single grid cell."""

    x: int = Field(description="Column index")
    y: int = Field(description="Row index")
    terrain: Terrain = Field(default=Terrain.PLAINS, description="Terrain kind")
    elevation: float = Field(default=DEFAULT_ELEVATION, ge=0.0, le=1.0)
    moisture: float = Field(default=DEFAULT_MOISTURE, ge=0.0, le=1.0)
    unit: Optional[Any] = Field(default=None, description="Occupying unit reference")
    owner: Optional[str] = Field(default=None, description="Owning player reference")
    resource: Optional[str] = Field(default=None, description="Resource tag")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "terrain": self.terrain.label,
            "elevation": round(self.elevation, 4),
            "moisture": round(self.moisture, 4),
            "unit": self.unit,
            "owner": self.owner,
            "resource": self.resource,
        }


class Grid:
    """
    Square terrain grid of ``size x size`` tiles.

    Coordinates are ``(x, y)`` with ``x`` the column and ``y`` the row, both
    in ``[0, size)``. Internally arrays are indexed ``[y, x]``.
    """

    def __init__(self, size: int):
        """
        Allocate a grid with default terrain.

        Every tile starts as plains with elevation 0 and moisture 0.5 and no
        unit, owner or resource. No randomness is consumed.

        Args:
            size: Grid dimension, must be positive
        """
        if not isinstance(size, (int, np.integer)) or isinstance(size, bool):
            raise ValueError(f"Grid size must be an integer, got {size!r}")
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")

        self.size = int(size)
        shape = (self.size, self.size)
        self.terrain = np.full(shape, Terrain.PLAINS, dtype=np.uint8)
        self.elevation = np.full(shape, DEFAULT_ELEVATION, dtype=np.float64)
        self.moisture = np.full(shape, DEFAULT_MOISTURE, dtype=np.float64)
        self.units = np.full(shape, None, dtype=object)
        self.owners = np.full(shape, None, dtype=object)
        self.resources = np.full(shape, None, dtype=object)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.terrain.shape

    @property
    def total_tiles(self) -> int:
        return self.size * self.size

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_interior(self, x: int, y: int) -> bool:
        """Check that a tile is not on the outer ring."""
        return 1 <= x <= self.size - 2 and 1 <= y <= self.size - 2

    def get_terrain(self, x: int, y: int) -> Terrain:
        return Terrain(int(self.terrain[y, x]))

    def set_terrain(self, x: int, y: int, terrain: Terrain) -> None:
        self.terrain[y, x] = terrain

    def is_land(self, x: int, y: int) -> bool:
        """Land is every tile that is not water."""
        return self.terrain[y, x] != Terrain.WATER

    def land_mask(self) -> np.ndarray:
        return self.terrain != Terrain.WATER

    def tile(self, x: int, y: int) -> Tile:
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile ({x}, {y}) outside {self.size}x{self.size} grid")
        return Tile(
            x=x,
            y=y,
            terrain=self.get_terrain(x, y),
            elevation=float(self.elevation[y, x]),
            moisture=float(self.moisture[y, x]),
            unit=self.units[y, x],
            owner=self.owners[y, x],
            resource=self.resources[y, x],
        )

    def positions_of(self, terrain: Terrain) -> List[Tuple[int, int]]:
        """All ``(x, y)`` positions holding a terrain kind, row-major."""
        ys, xs = np.nonzero(self.terrain == terrain)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def count(self, terrain: Terrain) -> int:
        return int(np.count_nonzero(self.terrain == terrain))

    def terrain_counts(self) -> Dict[Terrain, int]:
        """Tile count for every terrain kind, including kinds with zero tiles."""
        counts = np.bincount(self.terrain.ravel(), minlength=TERRAIN_COUNT)
        return {kind: int(counts[kind]) for kind in Terrain}

    def copy(self) -> "Grid":
        clone = Grid(self.size)
        clone.terrain = self.terrain.copy()
        clone.elevation = self.elevation.copy()
        clone.moisture = self.moisture.copy()
        clone.units = self.units.copy()
        clone.owners = self.owners.copy()
        clone.resources = self.resources.copy()
        return clone

    def to_rows(self) -> List[List[Dict[str, Any]]]:
        """Serialize as ``size`` rows of ``size`` tile dicts for renderers and the network layer."""
        return [
            [self.tile(x, y).to_dict() for x in range(self.size)]
            for y in range(self.size)
        ]

    def to_ascii(self) -> str:
        """Debug rendering, one glyph per tile."""
        from ..config.terrain_definitions import TERRAIN_DEFINITIONS

        glyphs = {kind: TERRAIN_DEFINITIONS[kind].symbol for kind in Terrain}
        return "\n".join(
            "".join(glyphs[Terrain(int(value))] for value in row) for row in self.terrain
        )

    def __repr__(self) -> str:
        return f"Grid(size={self.size})"
